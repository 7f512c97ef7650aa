"""Seven pairs waiting-hand detector."""

from __future__ import annotations

from typing import TYPE_CHECKING

from mj.logic.hand import Hand

if TYPE_CHECKING:
    from collections.abc import Iterable

    from mj.logic.tile import Tile

NUM_TILES_IN_HAND = 13


def is_seven_pairs(hand: Hand | Iterable[Tile], *, allow_repeat: bool = False) -> tuple[bool, Tile | None]:
    """
    Check whether a 13-tile hand is waiting for seven pairs.

    That means six pairs and one single tile; the single tile is returned
    as the wait. With allow_repeat, four of a kind counts as two pairs,
    and a triplet may be waiting for its fourth tile.
    """
    h = hand if isinstance(hand, Hand) else Hand(hand)
    if len(h) != NUM_TILES_IN_HAND or not all(t.can_meld for t in h):
        return False, None

    wait: Tile | None = None
    for entry in h.to_counter().entries():
        if entry.count == 2:
            continue
        if entry.count == 4 and allow_repeat:
            continue
        if entry.count == 1 or (entry.count == 3 and allow_repeat):
            if wait is not None:
                return False, None
            wait = entry.tile
            continue
        return False, None

    # 13 tiles of even-sized groups is impossible
    if wait is None:
        return False, None
    return True, wait
