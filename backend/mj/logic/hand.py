"""
Ordered sequence representation of a collection of tiles.

Hand is the cheapest representation to build from raw input. Its methods
never mutate the receiver: every removal returns a new Hand. The try_*
methods expect a sorted hand, since they rely on identical tiles being
adjacent.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from mj.logic.exceptions import HandcheckInvariantError, InvalidTileError
from mj.logic.tile import MAX_RUN_START_VALUE, Suit, Tile, unmarshal_tile

if TYPE_CHECKING:
    from collections.abc import Iterable, Iterator

    from mj.logic.counter import TileCounter
    from mj.logic.hand_rle import HandRLE

TRIPLET_SIZE = 3
PAIR_SIZE = 2
RUN_SIZE = 3


class Hand:
    """An ordered, immutable sequence of tiles."""

    __slots__ = ("_tiles",)

    def __init__(self, tiles: Iterable[Tile] = ()) -> None:
        self._tiles: tuple[Tile, ...] = tuple(tiles)

    @classmethod
    def _wrap(cls, tiles: tuple[Tile, ...]) -> Hand:
        hand = cls.__new__(cls)
        hand._tiles = tiles
        return hand

    @property
    def tiles(self) -> tuple[Tile, ...]:
        return self._tiles

    def __len__(self) -> int:
        return len(self._tiles)

    def __iter__(self) -> Iterator[Tile]:
        return iter(self._tiles)

    def __getitem__(self, i: int) -> Tile:
        return self._tiles[i]

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Hand):
            return NotImplemented
        return self._tiles == other._tiles

    def __hash__(self) -> int:
        return hash(self._tiles)

    def __repr__(self) -> str:
        return f"Hand({' '.join(t.code for t in self._tiles)!r})"

    def __str__(self) -> str:
        """Unicode rendering, always sorted so it is suitable for comparison."""
        return "".join(str(t) for t in self.sorted())

    @property
    def valid(self) -> bool:
        return all(t.valid for t in self._tiles)

    def validate(self) -> None:
        """Raise InvalidTileError for the first invalid tile, if any."""
        for t in self._tiles:
            if not t.valid:
                raise InvalidTileError(t)

    def get(self, tile: Tile) -> int:
        return self._tiles.count(tile)

    def is_sorted(self) -> bool:
        tiles = self._tiles
        return all(tiles[i] <= tiles[i + 1] for i in range(len(tiles) - 1))

    def sorted(self) -> Hand:
        """Return this hand if it is already sorted, otherwise a sorted copy."""
        if self.is_sorted():
            return self
        return Hand._wrap(tuple(sorted(self._tiles)))

    def marshal(self) -> bytes:
        """
        Encode each tile as one byte, in the current order.

        Sort the hand first to get an encoding suitable for comparison.
        """
        return bytes(t.marshal() for t in self._tiles)

    def remove(self, i: int) -> Hand:
        """Return a copy of this hand without the tile at index i."""
        if not 0 <= i < len(self._tiles):
            raise HandcheckInvariantError(f"remove out of bounds: {i} len={len(self._tiles)}")
        return Hand._wrap(self._tiles[:i] + self._tiles[i + 1 :])

    def append(self, tile: Tile) -> Hand:
        return Hand._wrap((*self._tiles, tile))

    def extend(self, tiles: Iterable[Tile]) -> Hand:
        return Hand._wrap(self._tiles + tuple(tiles))

    def to_hand(self) -> Hand:
        return self

    def to_counter(self) -> TileCounter:
        """Convert to a TileCounter with no shared state."""
        from mj.logic.counter import TileCounter  # noqa: PLC0415

        return TileCounter.from_tiles(self._tiles)

    def to_rle(self) -> HandRLE:
        from mj.logic.hand_rle import HandRLE  # noqa: PLC0415

        return HandRLE.from_tiles(self._tiles)

    def split(self, *, sort: bool = True) -> dict[Suit, Hand]:
        """Partition the tiles into sub-hands by suit, preserving order."""
        source = self.sorted() if sort else self
        out: dict[Suit, list[Tile]] = {}
        for t in source:
            out.setdefault(Suit(t.suit), []).append(t)
        return {suit: Hand._wrap(tuple(tiles)) for suit, tiles in out.items()}

    def locators(self) -> Iterator[tuple[int, Tile]]:
        """Yield (index, tile) for every position."""
        return enumerate(self._tiles)

    def try_triplet(self, i: int) -> Hand | None:
        """
        Remove three identical tiles starting at index i.

        Returns the reduced hand, or None if there is no triplet at i. An
        empty Hand is returned when the triplet was the whole hand.
        """
        return self._try_identical(i, TRIPLET_SIZE)

    def try_pair(self, i: int) -> Hand | None:
        """Remove two identical tiles starting at index i. See try_triplet."""
        return self._try_identical(i, PAIR_SIZE)

    def _try_identical(self, i: int, n: int) -> Hand | None:
        tiles = self._tiles
        self._check_locator(i)
        if i > len(tiles) - n:
            return None

        t = tiles[i]
        if not t.can_meld:
            return None
        # relies on sorted order
        for j in range(1, n):
            if tiles[i + j] != t:
                return None

        return Hand._wrap(tiles[:i] + tiles[i + n :])

    def try_run(self, i: int) -> Hand | None:
        """
        Remove a run whose lowest tile is at index i.

        The other two tiles need not be adjacent to i: for b1 b2 b2 b3,
        try_run(0) removes b1, the first b2 and b3. Returns None if no run
        starts at i.
        """
        tiles = self._tiles
        self._check_locator(i)
        if i >= len(tiles) - (RUN_SIZE - 1):
            return None

        t1 = tiles[i]
        if not t1.is_basic or t1.value > MAX_RUN_START_VALUE:
            return None
        t2 = t1.shifted(1)
        t3 = t1.shifted(2)

        i2 = -1
        i3 = -1
        for j in range(i + 1, len(tiles)):
            t = tiles[j]
            if i2 < 0 and t == t2:
                i2 = j
            elif t == t3:
                i3 = j
                break
            elif t > t3:
                break

        if i2 < 0 or i3 < 0:
            return None

        return Hand._wrap(tuple(t for j, t in enumerate(tiles) if j not in (i, i2, i3)))

    def _check_locator(self, i: int) -> None:
        if not 0 <= i < len(self._tiles):
            raise HandcheckInvariantError(f"locator out of bounds: {i} len={len(self._tiles)}")

    def is_pair(self) -> bool:
        tiles = self._tiles
        return len(tiles) == PAIR_SIZE and tiles[0].can_meld and tiles[0] == tiles[1]

    def is_triplet(self) -> bool:
        tiles = self._tiles
        return len(tiles) == TRIPLET_SIZE and tiles[0].can_meld and tiles[0] == tiles[1] == tiles[2]

    def is_run(self) -> bool:
        tiles = self._tiles
        if len(tiles) != RUN_SIZE or not tiles[0].is_basic:
            return False
        return tiles[1] == tiles[0].shifted(1) and tiles[2] == tiles[0].shifted(2)


def unmarshal_hand(data: bytes) -> Hand:
    """Inverse of Hand.marshal()."""
    return Hand._wrap(tuple(unmarshal_tile(b) for b in data))
