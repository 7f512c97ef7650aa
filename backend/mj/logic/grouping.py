"""
Allocation of the tiles of a hand to triplets, runs, pairs and free tiles.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from mj.logic.counter import TileCounter
from mj.logic.exceptions import HandcheckInvariantError, InvalidHandError
from mj.logic.hand import Hand, unmarshal_hand

if TYPE_CHECKING:
    from collections.abc import Iterable

    from mj.logic.tile import Tile

FIELD_SEPARATOR = b","
NUM_FIELDS = 4

TRIPLET_SCORE = 4
RUN_SCORE = 4
PAIR_SCORE = 2

# 4 melds and a pair
COMPLETE_SCORE = 4 * TRIPLET_SCORE + PAIR_SCORE


@dataclass(frozen=True, slots=True)
class Grouping:
    """
    One way of grouping a hand.

    Each tile in `triplets` stands for three identical tiles, each tile in
    `runs` is the lowest of three consecutive tiles, each tile in `pairs`
    stands for two identical tiles. `free` holds every leftover tile.
    """

    triplets: Hand = field(default_factory=Hand)
    runs: Hand = field(default_factory=Hand)
    pairs: Hand = field(default_factory=Hand)
    free: Hand = field(default_factory=Hand)

    def score(self) -> int:
        """
        Rank groupings; higher is better.

        A free tile is worth nothing, a tile in a pair 1 and a tile in a
        triplet or run 1.33. Six b1 score 8 as two triplets and 6 as three
        pairs. A complete 14-tile hand scores 18; waiting on a pair or a
        triplet scores 16, waiting on a run 14.

        Seven pairs scores lower than a complete hand, and six pairs lower
        than any waiting hand.
        """
        return TRIPLET_SCORE * len(self.triplets) + RUN_SCORE * len(self.runs) + PAIR_SCORE * len(self.pairs)

    @property
    def is_complete(self) -> bool:
        return not self.free and self.score() == COMPLETE_SCORE

    def to_hand(self) -> Hand:
        """Expand every group back into tiles, in field order."""
        tiles: list[Tile] = []
        for t in self.triplets:
            tiles.extend((t, t, t))
        for t in self.runs:
            tiles.extend((t, t.shifted(1), t.shifted(2)))
        for t in self.pairs:
            tiles.extend((t, t))
        tiles.extend(self.free)
        return Hand(tiles)

    def to_counter(self) -> TileCounter:
        """Counts of the full implied hand."""
        return TileCounter.from_tiles(self.to_hand())

    def copy(self, *, sort: bool = False) -> Grouping:
        """Return an independent grouping, optionally with every field sorted."""
        if not sort:
            return Grouping(self.triplets, self.runs, self.pairs, self.free)
        return Grouping(
            triplets=Hand(sorted(self.triplets)),
            runs=Hand(sorted(self.runs)),
            pairs=Hand(sorted(self.pairs)),
            free=Hand(sorted(self.free)),
        )

    def with_triplet(self, tile: Tile) -> Grouping:
        return Grouping(self.triplets.append(tile), self.runs, self.pairs, self.free)

    def with_run(self, tile: Tile) -> Grouping:
        return Grouping(self.triplets, self.runs.append(tile), self.pairs, self.free)

    def with_pair(self, tile: Tile) -> Grouping:
        return Grouping(self.triplets, self.runs, self.pairs.append(tile), self.free)

    def marshal(self) -> bytes:
        """
        Encode as four comma-separated tile byte strings.

        Sort the fields first (copy(sort=True)) for a stable representation.
        """
        return FIELD_SEPARATOR.join(h.marshal() for h in (self.triplets, self.runs, self.pairs, self.free))

    def __str__(self) -> str:
        parts = (
            ("triplets", self.triplets),
            ("runs", self.runs),
            ("pairs", self.pairs),
            ("free", self.free),
        )
        return " ".join(f"{name}=[{' '.join(t.code for t in h)}]" for name, h in parts)


def merge_groupings(groupings: Iterable[Grouping]) -> Grouping:
    """Concatenate the fields of independent groupings (e.g. one per suit)."""
    triplets: list[Tile] = []
    runs: list[Tile] = []
    pairs: list[Tile] = []
    free: list[Tile] = []
    for g in groupings:
        triplets.extend(g.triplets)
        runs.extend(g.runs)
        pairs.extend(g.pairs)
        free.extend(g.free)
    return Grouping(Hand(triplets), Hand(runs), Hand(pairs), Hand(free))


def unmarshal_grouping(data: bytes) -> Grouping:
    """Inverse of Grouping.marshal()."""
    fields = data.split(FIELD_SEPARATOR)
    if len(fields) != NUM_FIELDS:
        raise InvalidHandError(f"wrong number of fields: {len(fields)}")
    return Grouping(*(unmarshal_hand(f) for f in fields))


def verify_round_trip(grouping: Grouping, hand: Hand) -> None:
    """Raise HandcheckInvariantError unless the grouping expands back to exactly `hand`."""
    if grouping.to_hand().sorted() != hand.sorted():
        raise HandcheckInvariantError(f"grouping does not reproduce hand: {grouping} vs {hand!r}")
