"""
Optimal hand checkers.

An optimal grouping leaves the fewest tiles free, then forms the most
triplets and runs. A hand can have several optimal groupings; only one is
returned. The checkers do not look for special hands (seven pairs,
thirteen orphans) and never form kongs.

The search is a depth-first descent over the free tiles. At every free
tile, in sorted order, it tries to remove a triplet, then a pair, then a
run, solves what is left and keeps a candidate only if it scores strictly
higher than the best so far. Together those two orders decide which of
several equally good groupings is returned.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from concurrent.futures import ThreadPoolExecutor
from typing import TYPE_CHECKING, ClassVar

import structlog

from mj.handcheck.memo import MemoStore
from mj.handcheck.settings import CheckerSettings, Representation
from mj.logic.grouping import Grouping, merge_groupings, verify_round_trip
from mj.logic.hand import Hand

if TYPE_CHECKING:
    from collections.abc import Iterable

    from mj.logic.collection import TileCollection
    from mj.logic.tile import Tile

logger = structlog.get_logger()

# (collection method, grouping method), tried in this order at every tile
ATTEMPT_ORDER = (
    ("try_triplet", "with_triplet"),
    ("try_pair", "with_pair"),
    ("try_run", "with_run"),
)


class _Search:
    """State shared by every step of one search: the memo and a step counter."""

    def __init__(self, *, use_memo: bool) -> None:
        self.memo = MemoStore() if use_memo else None
        self.steps = 0

    def solve(self, free: TileCollection) -> Grouping:
        """Return the best grouping of exactly the tiles in `free`."""
        self.steps += 1

        if len(free) == 0:
            return Grouping()

        key = free.marshal()
        if self.memo is not None:
            cached = self.memo.get(key)
            if cached is not None:
                return cached

        # committing nothing further is always a candidate
        best = Grouping(free=free.to_hand())
        best_score = 0
        for locator, tile in free.locators():
            for remove, commit in ATTEMPT_ORDER:
                next_free = getattr(free, remove)(locator)
                if next_free is None:
                    continue
                candidate = getattr(self.solve(next_free), commit)(tile)
                score = candidate.score()
                if score > best_score:
                    best = candidate
                    best_score = score

        if self.memo is not None:
            self.memo.store(key, best)
        return best


class OptimalChecker(ABC):
    """
    Finds an optimal grouping for a hand.

    Subclasses choose the collection type used for the free tiles. The
    ordered Hand has a higher branching factor (it visits every position)
    but cheap steps; TileCounter and HandRLE visit each distinct tile once
    at a higher cost per step.
    """

    representation: ClassVar[Representation]

    def __init__(self, settings: CheckerSettings | None = None) -> None:
        if settings is None:
            settings = CheckerSettings(representation=self.representation)
        elif settings.representation != self.representation:
            msg = (
                f"{type(self).__name__} searches {self.representation.value!r}, "
                f"settings ask for {settings.representation.value!r}"
            )
            raise ValueError(msg)
        self.settings = settings

    @abstractmethod
    def to_collection(self, hand: Hand) -> TileCollection:
        """Convert a sorted, validated hand to this checker's collection type."""

    def check(self, hand: Hand | Iterable[Tile]) -> Grouping:
        """
        Find an optimal grouping for the hand.

        Raises InvalidTileError if any tile is invalid. A hand where
        nothing melds is not an error: every tile comes back free. Each
        field of the result is sorted.
        """
        h = (hand if isinstance(hand, Hand) else Hand(hand)).sorted()
        h.validate()

        free = self.to_collection(h)
        if self.settings.split:
            searches, result = self._check_split(free)
        else:
            search = _Search(use_memo=self.settings.use_memo)
            searches = [search]
            result = search.solve(free)

        result = result.copy(sort=True)
        verify_round_trip(result, h)

        logger.debug(
            "hand search finished",
            representation=self.representation,
            split=self.settings.split,
            tiles=len(h),
            steps=sum(s.steps for s in searches),
            memo_entries=sum(len(s.memo) for s in searches if s.memo is not None),
            memo_hits=sum(s.memo.hits for s in searches if s.memo is not None),
            score=result.score(),
        )
        return result

    def _check_split(self, free: TileCollection) -> tuple[list[_Search], Grouping]:
        """Search each suit independently, each with its own memo, and merge the results."""
        parts = [part for _, part in sorted(free.split().items())]
        searches = [_Search(use_memo=self.settings.use_memo) for _ in parts]

        if self.settings.parallel and len(parts) > 1:
            with ThreadPoolExecutor(max_workers=self.settings.max_workers) as pool:
                results = list(pool.map(lambda sp: sp[0].solve(sp[1]), zip(searches, parts, strict=True)))
        else:
            results = [s.solve(p) for s, p in zip(searches, parts, strict=True)]

        return searches, merge_groupings(results)


class OptHandChecker(OptimalChecker):
    """Optimal checker over the ordered Hand representation."""

    representation = Representation.HAND

    def to_collection(self, hand: Hand) -> Hand:
        return hand


class OptCounterChecker(OptimalChecker):
    """
    Optimal checker over the TileCounter representation.

    The branching factor is lower, but every step copies a dict, so it is
    usually slower than the other two.
    """

    representation = Representation.COUNTER

    def to_collection(self, hand: Hand) -> TileCollection:
        return hand.to_counter()


class OptHandRLEChecker(OptimalChecker):
    """Optimal checker over the HandRLE representation."""

    representation = Representation.RLE

    def to_collection(self, hand: Hand) -> TileCollection:
        return hand.to_rle()


_CHECKERS: dict[Representation, type[OptimalChecker]] = {
    Representation.HAND: OptHandChecker,
    Representation.COUNTER: OptCounterChecker,
    Representation.RLE: OptHandRLEChecker,
}


def build_checker(settings: CheckerSettings | None = None) -> OptimalChecker:
    """Create the checker for settings.representation."""
    if settings is None:
        settings = CheckerSettings()
    return _CHECKERS[settings.representation](settings)
