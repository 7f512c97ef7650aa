"""Result cache for repeated checks of the same hand."""

from __future__ import annotations

import threading
from collections import OrderedDict
from typing import TYPE_CHECKING

import structlog

from mj.logic.hand import Hand

if TYPE_CHECKING:
    from collections.abc import Iterable

    from mj.handcheck.optimal import OptimalChecker
    from mj.logic.grouping import Grouping
    from mj.logic.tile import Tile

logger = structlog.get_logger()


class CachedChecker:
    """
    Wraps a checker with a bounded LRU cache keyed by the sorted hand encoding.

    Useful when the same hands are checked over and over (e.g. an agent
    evaluating discards). Concurrent calls for the same hand wait for a
    single computation instead of each running the search. Groupings are
    immutable, so cached results are returned as is.
    """

    def __init__(self, checker: OptimalChecker, maxsize: int = 1024) -> None:
        if maxsize < 0:
            raise ValueError(f"maxsize must be >= 0, got {maxsize}")
        self.checker = checker
        self.maxsize = maxsize
        self.hits = 0
        self.misses = 0
        self._entries: OrderedDict[bytes, Grouping] = OrderedDict()
        self._pending: dict[bytes, threading.Event] = {}
        self._lock = threading.Lock()

    def __len__(self) -> int:
        return len(self._entries)

    def check(self, hand: Hand | Iterable[Tile]) -> Grouping:
        h = (hand if isinstance(hand, Hand) else Hand(hand)).sorted()
        if self.maxsize == 0:
            return self.checker.check(h)

        key = h.marshal()
        while True:
            with self._lock:
                cached = self._entries.get(key)
                if cached is not None:
                    self._entries.move_to_end(key)
                    self.hits += 1
                    return cached
                pending = self._pending.get(key)
                if pending is None:
                    pending = threading.Event()
                    self._pending[key] = pending
                    self.misses += 1
                    break
            # another thread is solving this hand; if it fails we retry
            pending.wait()

        try:
            result = self.checker.check(h)
            with self._lock:
                self._entries[key] = result
                if len(self._entries) > self.maxsize:
                    evicted, _ = self._entries.popitem(last=False)
                    logger.debug("evicted cached grouping", key=evicted.hex(), size=len(self._entries))
        finally:
            with self._lock:
                del self._pending[key]
            pending.set()
        return result

    def clear(self) -> None:
        with self._lock:
            self._entries.clear()
            self.hits = 0
            self.misses = 0
