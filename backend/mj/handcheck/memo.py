"""Per-search memo of solved free-tile multisets."""

from __future__ import annotations

from typing import TYPE_CHECKING

from mj.logic.exceptions import HandcheckInvariantError
from mj.logic.grouping import unmarshal_grouping

if TYPE_CHECKING:
    from mj.logic.grouping import Grouping


class MemoStore:
    """
    Maps the encoding of a free-tile multiset to its best grouping.

    The best grouping of a multiset does not depend on how the search got
    there, so answers are shared between every path that reaches the same
    free tiles. Entries are write-once. A store belongs to exactly one
    search and is not thread-safe.
    """

    def __init__(self) -> None:
        self._entries: dict[bytes, bytes] = {}
        self.hits = 0

    def __len__(self) -> int:
        return len(self._entries)

    def __contains__(self, key: bytes) -> bool:
        return key in self._entries

    def get(self, key: bytes) -> Grouping | None:
        stored = self._entries.get(key)
        if stored is None:
            return None
        self.hits += 1
        return unmarshal_grouping(stored)

    def store(self, key: bytes, grouping: Grouping) -> None:
        """Record the best grouping for key. Storing a key twice is an engine defect."""
        old = self._entries.get(key)
        if old is not None:
            raise HandcheckInvariantError(f"updating memo: key={key.hex()} old={old.hex()} new={grouping}")
        self._entries[key] = grouping.copy(sort=True).marshal()
