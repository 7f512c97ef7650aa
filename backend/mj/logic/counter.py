"""
Counting-map representation of a collection of tiles.

TileCounter offers constant-time count lookup and iterates distinct tiles
rather than positions, which lowers the branching factor of the search at
the cost of copying the map on every removal. Methods never mutate the
receiver or share its map with the result.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, NamedTuple

from mj.logic.exceptions import HandcheckInvariantError, InvalidHandError, InvalidTileError
from mj.logic.hand import PAIR_SIZE, TRIPLET_SIZE, Hand
from mj.logic.tile import Suit, Tile

if TYPE_CHECKING:
    from collections.abc import Iterable, Iterator, Mapping


class CountEntry(NamedTuple):
    """A tile together with how many copies of it are present."""

    tile: Tile
    count: int


class TileCounter:
    """An immutable multiset of tiles backed by a dict of counts."""

    __slots__ = ("_counts", "_n")

    def __init__(self) -> None:
        self._counts: dict[Tile, int] = {}
        self._n = 0

    @classmethod
    def _wrap(cls, counts: dict[Tile, int], n: int) -> TileCounter:
        c = cls.__new__(cls)
        c._counts = counts
        c._n = n
        return c

    @classmethod
    def from_map(cls, counts: Mapping[Tile, int]) -> TileCounter:
        """
        Build a counter from a mapping of tiles to counts.

        Zero counts are dropped. Invalid tiles and negative counts raise.
        """
        m: dict[Tile, int] = {}
        n = 0
        for tile, count in counts.items():
            if not tile.valid:
                raise InvalidTileError(tile)
            if count < 0:
                raise InvalidHandError(f"invalid count for tile {tile.code}: {count}")
            if count == 0:
                continue
            m[tile] = m.get(tile, 0) + count
            n += count
        return cls._wrap(m, n)

    @classmethod
    def from_tiles(cls, tiles: Iterable[Tile]) -> TileCounter:
        m: dict[Tile, int] = {}
        n = 0
        for t in tiles:
            m[t] = m.get(t, 0) + 1
            n += 1
        return cls._wrap(m, n)

    @property
    def valid(self) -> bool:
        return all(t.valid for t in self._counts)

    def __len__(self) -> int:
        return self._n

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, TileCounter):
            return NotImplemented
        return self._counts == other._counts

    def __hash__(self) -> int:
        return hash(self.marshal())

    def __repr__(self) -> str:
        inner = " ".join(f"{t.code}:{n}" for t, n in sorted(self._counts.items()))
        return f"TileCounter({inner})"

    def __str__(self) -> str:
        return str(self.to_hand())

    def get(self, tile: Tile) -> int:
        return self._counts.get(tile, 0)

    def as_dict(self) -> dict[Tile, int]:
        """Return a copy of the underlying counts. Inverse of from_map()."""
        return dict(self._counts)

    def entries(self) -> list[CountEntry]:
        """All tile-count pairs, in sorted tile order."""
        return [CountEntry(t, n) for t, n in sorted(self._counts.items())]

    def locators(self) -> Iterator[tuple[Tile, Tile]]:
        """Yield (tile, tile) for every distinct tile, in sorted order."""
        for t in sorted(self._counts):
            yield t, t

    def to_hand(self, *, sort: bool = True) -> Hand:
        items = sorted(self._counts.items()) if sort else self._counts.items()
        tiles: list[Tile] = []
        for t, n in items:
            tiles.extend([t] * n)
        return Hand(tiles)

    def marshal(self) -> bytes:
        """Sorted one-byte-per-tile encoding, identical to the sorted Hand encoding."""
        return self.to_hand().marshal()

    def split(self) -> dict[Suit, TileCounter]:
        out: dict[Suit, dict[Tile, int]] = {}
        for t, n in self._counts.items():
            out.setdefault(Suit(t.suit), {})[t] = n
        return {suit: TileCounter._wrap(m, sum(m.values())) for suit, m in sorted(out.items())}

    def copy(self) -> TileCounter:
        return TileCounter._wrap(dict(self._counts), self._n)

    def remove(self, tile: Tile) -> TileCounter:
        """Return a copy with one copy of tile removed. The tile must be present."""
        if self._counts.get(tile, 0) <= 0:
            raise HandcheckInvariantError(f"no tiles to remove: {tile.code}")
        return self._take(tile, 1)

    def _take(self, tile: Tile, n: int) -> TileCounter:
        m = dict(self._counts)
        remaining = m[tile] - n
        if remaining:
            m[tile] = remaining
        else:
            del m[tile]
        return TileCounter._wrap(m, self._n - n)

    def try_triplet(self, tile: Tile) -> TileCounter | None:
        """
        Remove three copies of tile.

        Returns the reduced counter, or None if fewer than three remain.
        An empty counter is returned when the triplet was the whole counter.
        """
        return self._try_identical(tile, TRIPLET_SIZE)

    def try_pair(self, tile: Tile) -> TileCounter | None:
        return self._try_identical(tile, PAIR_SIZE)

    def _try_identical(self, tile: Tile, n: int) -> TileCounter | None:
        if not tile.can_meld or self._counts.get(tile, 0) < n:
            return None
        return self._take(tile, n)

    def try_run(self, tile: Tile) -> TileCounter | None:
        """
        Remove one each of tile and the next two tiles in its suit.

        For example {b1:1 b2:2 b3:1 b4:1}.try_run(b1) gives {b2:1 b4:1}.
        """
        if not tile.is_basic:
            return None
        t2 = tile.shifted(1)
        t3 = tile.shifted(2)
        if not t2.valid or not t3.valid:
            return None

        counts = self._counts
        if counts.get(tile, 0) <= 0 or counts.get(t2, 0) <= 0 or counts.get(t3, 0) <= 0:
            return None

        m: dict[Tile, int] = {}
        for t, n in counts.items():
            if t in (tile, t2, t3):
                if n > 1:
                    m[t] = n - 1
            else:
                m[t] = n
        return TileCounter._wrap(m, self._n - 3)
