"""Structural contract shared by Hand, TileCounter and HandRLE."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Protocol, Self

if TYPE_CHECKING:
    from collections.abc import Iterator

    from mj.logic.hand import Hand
    from mj.logic.tile import Suit, Tile


class TileCollection(Protocol):
    """
    A multiset of tiles that the optimiser can peel melds off.

    The locator type depends on the representation: a position for Hand,
    an entry index for HandRLE, the tile itself for TileCounter. Every
    try_* method returns a new collection or None; none of them touch the
    receiver.
    """

    def __len__(self) -> int: ...

    def get(self, tile: Tile) -> int: ...

    def locators(self) -> Iterator[tuple[Any, Tile]]: ...

    def try_triplet(self, locator: Any) -> Self | None: ...

    def try_pair(self, locator: Any) -> Self | None: ...

    def try_run(self, locator: Any) -> Self | None: ...

    def marshal(self) -> bytes: ...

    def split(self) -> dict[Suit, Self]: ...

    def to_hand(self) -> Hand: ...
