"""
Run-length encoded representation of a collection of tiles.

HandRLE stores sorted (tile, count) entries. Like TileCounter it iterates
distinct tiles, like Hand it is ordered, compact and cheap to copy. Tile
lookup uses binary search over the sorted entries.
"""

from __future__ import annotations

from bisect import bisect_left
from typing import TYPE_CHECKING

from mj.logic.counter import CountEntry
from mj.logic.exceptions import HandcheckInvariantError, InvalidHandError, InvalidTileError
from mj.logic.hand import PAIR_SIZE, TRIPLET_SIZE, Hand
from mj.logic.tile import MAX_RUN_START_VALUE, Suit, Tile, unmarshal_tile

if TYPE_CHECKING:
    from collections.abc import Iterable, Iterator

# counts are packed into one byte when marshalled
MAX_MARSHAL_COUNT = 0x7F


class HandRLE:
    """An immutable, sorted sequence of CountEntry values."""

    __slots__ = ("_entries", "_n")

    def __init__(self, *entries: CountEntry | tuple[Tile, int]) -> None:
        """
        Build from entries in any order.

        Raises InvalidTileError for invalid tiles and InvalidHandError for
        non-positive counts or a tile given twice.
        """
        seen: set[Tile] = set()
        n = 0
        normalised: list[CountEntry] = []
        for tile, count in entries:
            if not tile.valid:
                raise InvalidTileError(tile)
            if count <= 0:
                raise InvalidHandError(f"invalid count for tile {tile.code}: {count}")
            if tile in seen:
                raise InvalidHandError(f"duplicated tile in entries: {tile.code}")
            seen.add(tile)
            n += count
            normalised.append(CountEntry(tile, count))
        normalised.sort()
        self._entries: tuple[CountEntry, ...] = tuple(normalised)
        self._n = n

    @classmethod
    def _wrap(cls, entries: tuple[CountEntry, ...], n: int) -> HandRLE:
        h = cls.__new__(cls)
        h._entries = entries
        h._n = n
        return h

    @classmethod
    def from_tiles(cls, tiles: Iterable[Tile]) -> HandRLE:
        counts: dict[Tile, int] = {}
        for t in tiles:
            counts[t] = counts.get(t, 0) + 1
        return cls(*counts.items())

    @property
    def valid(self) -> bool:
        """True if entries are valid, distinct, positive and agree with the cached total."""
        if len({e.tile for e in self._entries}) != len(self._entries):
            return False
        if any(not e.tile.valid or e.count <= 0 for e in self._entries):
            return False
        return sum(e.count for e in self._entries) == self._n

    def __len__(self) -> int:
        return self._n

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, HandRLE):
            return NotImplemented
        return self._entries == other._entries

    def __hash__(self) -> int:
        return hash(self._entries)

    def __repr__(self) -> str:
        inner = " ".join(f"{e.tile.code}:{e.count}" for e in self._entries)
        return f"HandRLE({inner})"

    def __str__(self) -> str:
        return "".join(str(e.tile) * e.count for e in self._entries)

    def get(self, tile: Tile) -> int:
        entries = self._entries
        i = bisect_left(entries, tile, key=lambda e: e.tile)
        if i < len(entries) and entries[i].tile == tile:
            return entries[i].count
        return 0

    def entries(self) -> tuple[CountEntry, ...]:
        return self._entries

    def locators(self) -> Iterator[tuple[int, Tile]]:
        """Yield (entry index, tile) for every distinct tile, in sorted order."""
        for i, e in enumerate(self._entries):
            yield i, e.tile

    def to_hand(self) -> Hand:
        tiles: list[Tile] = []
        for tile, count in self._entries:
            tiles.extend([tile] * count)
        return Hand(tiles)

    def marshal(self) -> bytes:
        """Encode as (tile byte, count byte) pairs. Always sorted, so suitable for comparison."""
        out = bytearray()
        for tile, count in self._entries:
            if count > MAX_MARSHAL_COUNT:
                raise HandcheckInvariantError(f"cannot marshal tile count {count} > {MAX_MARSHAL_COUNT}")
            out.append(tile.marshal())
            out.append(count)
        return bytes(out)

    def split(self) -> dict[Suit, HandRLE]:
        out: dict[Suit, list[CountEntry]] = {}
        for e in self._entries:
            out.setdefault(Suit(e.tile.suit), []).append(e)
        return {suit: HandRLE._wrap(tuple(es), sum(e.count for e in es)) for suit, es in out.items()}

    def try_triplet(self, i: int) -> HandRLE | None:
        """
        Remove three copies of the tile at entry i.

        Returns the reduced hand, or None. An empty HandRLE is returned
        when the triplet was the whole hand.
        """
        return self._try_identical(i, TRIPLET_SIZE)

    def try_pair(self, i: int) -> HandRLE | None:
        return self._try_identical(i, PAIR_SIZE)

    def _try_identical(self, i: int, n: int) -> HandRLE | None:
        self._check_locator(i)
        tile, count = self._entries[i]
        if not tile.can_meld or count < n:
            return None

        if count > n:
            replaced = (*self._entries[:i], CountEntry(tile, count - n), *self._entries[i + 1 :])
        else:
            replaced = self._entries[:i] + self._entries[i + 1 :]
        return HandRLE._wrap(replaced, self._n - n)

    def try_run(self, i: int) -> HandRLE | None:
        """
        Remove one each of the tiles at entries i, i+1 and i+2.

        Succeeds only if those entries hold three consecutive values of one
        basic suit, e.g. {b1:1 b2:2 b3:1 b4:1}.try_run(0) gives {b2:1 b4:1}.
        """
        self._check_locator(i)
        entries = self._entries
        if i >= len(entries) - 2:
            return None

        t1 = entries[i].tile
        if not t1.is_basic or t1.value > MAX_RUN_START_VALUE:
            return None
        if entries[i + 1].tile != t1.shifted(1) or entries[i + 2].tile != t1.shifted(2):
            return None

        middle = tuple(CountEntry(e.tile, e.count - 1) for e in entries[i : i + 3] if e.count > 1)
        return HandRLE._wrap(entries[:i] + middle + entries[i + 3 :], self._n - 3)

    def _check_locator(self, i: int) -> None:
        if not 0 <= i < len(self._entries):
            raise HandcheckInvariantError(f"locator out of bounds: {i} entries={len(self._entries)}")


def unmarshal_hand_rle(data: bytes) -> HandRLE:
    """Inverse of HandRLE.marshal()."""
    if len(data) % 2:
        raise InvalidHandError(f"odd number of bytes in encoding: {len(data)}")
    entries = []
    for j in range(0, len(data), 2):
        count = data[j + 1]
        if count > MAX_MARSHAL_COUNT:
            raise InvalidHandError(f"tile count {count} exceeds {MAX_MARSHAL_COUNT}")
        entries.append(CountEntry(unmarshal_tile(data[j]), count))
    return HandRLE(*entries)
