"""Thirteen orphans waiting-hand detector."""

from __future__ import annotations

from typing import TYPE_CHECKING

from mj.logic.hand import Hand
from mj.logic.parse import parse_hand

if TYPE_CHECKING:
    from collections.abc import Iterable

    from mj.logic.tile import Tile

ORPHANS = parse_hand("b1 b9 c1 c9 w1 w9 he hs hw hn hz hf hb")


def is_thirteen_orphans(hand: Hand | Iterable[Tile]) -> tuple[bool, Tile | None]:
    """
    Check whether a 13-tile hand is waiting for thirteen orphans.

    Every tile must be a terminal or an honour. A hand holding all
    thirteen once is "pure" and waits on any of them: (True, None) is
    returned. A hand holding twelve of them plus a duplicate waits on the
    missing one, which is returned.
    """
    h = hand if isinstance(hand, Hand) else Hand(hand)
    if len(h) != len(ORPHANS):
        return False, None

    orphans = set(ORPHANS)
    if any(t not in orphans for t in h):
        return False, None

    missing = orphans.difference(h)
    if not missing:
        return True, None
    if len(missing) == 1:
        return True, missing.pop()
    return False, None
