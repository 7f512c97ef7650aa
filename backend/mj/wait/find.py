"""
Waiting tiles for a grouped hand.

A 13-tile hand one tile away from four melds and a pair shows up in an
optimal grouping as one of four shapes:

- three melds and two pairs: either pair can become a triplet
- three melds, a pair and two free tiles of one suit one apart: either
  end completes a run
- the same with the free tiles two apart: the middle tile completes it
- four melds and one free tile: a matching tile completes the pair

A tile is only a wait if the hand does not already hold all four copies.
Discards and other players' melds are not considered.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from mj.handcheck.optimal import build_checker
from mj.logic.exceptions import InvalidHandError
from mj.logic.hand import Hand
from mj.logic.tile import MAX_BASIC_VALUE, MAX_TILE_COPIES, MIN_BASIC_VALUE

if TYPE_CHECKING:
    from collections.abc import Iterable

    from mj.handcheck.optimal import OptimalChecker
    from mj.logic.grouping import Grouping
    from mj.logic.tile import Tile

NUM_TILES_IN_HAND = 13
_MELDS_FOR_WIN = 4


def find_waits(grouping: Grouping, *, allow_middle: bool = True) -> list[Tile]:
    """
    Return the tiles that would complete the grouping, in sorted order.

    Only this grouping is inspected. A hand with several optimal
    groupings can have further waits that show up in another of them.

    With allow_middle=False a gap in the middle of a run (e.g. b4 _ b6)
    is not counted as a wait.
    """
    melds = len(grouping.triplets) + len(grouping.runs)
    num_pairs = len(grouping.pairs)
    free = grouping.free
    counts = grouping.to_counter()

    def available(t: Tile) -> bool:
        return t.can_meld and counts.get(t) < MAX_TILE_COPIES

    if not free and melds == _MELDS_FOR_WIN - 1 and num_pairs == 2:
        return sorted(t for t in grouping.pairs if available(t))

    if len(free) == 2 and melds == _MELDS_FOR_WIN - 1 and num_pairs == 1:
        low, high = sorted(free)
        if not low.is_basic or not high.is_basic or low.suit != high.suit:
            return []

        if low.value + 1 == high.value:
            waits = []
            if low.value > MIN_BASIC_VALUE and available(low.shifted(-1)):
                waits.append(low.shifted(-1))
            if high.value < MAX_BASIC_VALUE and available(high.shifted(1)):
                waits.append(high.shifted(1))
            return waits

        if low.value + 2 == high.value and allow_middle:
            middle = low.shifted(1)
            return [middle] if available(middle) else []
        return []

    if len(free) == 1 and melds == _MELDS_FOR_WIN and num_pairs == 0:
        t = free[0]
        return [t] if available(t) else []

    return []


def find_hand_waits(
    hand: Hand | Iterable[Tile],
    checker: OptimalChecker | None = None,
    *,
    allow_middle: bool = True,
) -> list[Tile]:
    """
    Group a 13-tile hand optimally and return the waits of that grouping.

    The list is not every tile that completes the hand: see find_waits.

    Raises InvalidHandError if the hand does not hold exactly 13 tiles and
    InvalidTileError if any tile is invalid.
    """
    h = hand if isinstance(hand, Hand) else Hand(hand)
    if len(h) != NUM_TILES_IN_HAND:
        raise InvalidHandError(f"hand must have {NUM_TILES_IN_HAND} tiles, got {len(h)}")

    if checker is None:
        checker = build_checker()
    return find_waits(checker.check(h), allow_middle=allow_middle)
