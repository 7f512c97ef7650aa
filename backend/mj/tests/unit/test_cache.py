import logging
import threading
import time

import pytest

from mj.handcheck.cache import CachedChecker
from mj.handcheck.optimal import OptHandRLEChecker
from mj.logic.exceptions import InvalidTileError
from mj.logic.parse import parse_hand
from mj.logic.tile import Tile


class _CountingChecker(OptHandRLEChecker):
    def __init__(self, delay: float = 0.0) -> None:
        super().__init__()
        self.calls = 0
        self.delay = delay
        self._calls_lock = threading.Lock()

    def check(self, hand):
        with self._calls_lock:
            self.calls += 1
        time.sleep(self.delay)
        return super().check(hand)


class TestCachedChecker:
    def test_second_check_is_a_hit(self):
        inner = _CountingChecker()
        cached = CachedChecker(inner)
        first = cached.check(parse_hand("b1 b2 b3 he he"))
        second = cached.check(parse_hand("b1 b2 b3 he he"))

        assert first == second
        assert inner.calls == 1
        assert (cached.hits, cached.misses) == (1, 1)

    def test_key_ignores_tile_order(self):
        inner = _CountingChecker()
        cached = CachedChecker(inner)
        cached.check(parse_hand("he b3 b2 he b1"))
        cached.check(parse_hand("b1 b2 b3 he he"))

        assert inner.calls == 1
        assert len(cached) == 1

    def test_matches_uncached_result(self):
        text = "w1 b7 w4 c5 b9 he w5 hf w5 c3 b8 hf hn hf"
        assert CachedChecker(OptHandRLEChecker()).check(parse_hand(text)) == OptHandRLEChecker().check(
            parse_hand(text),
        )

    def test_evicts_least_recently_used(self, caplog):
        inner = _CountingChecker()
        cached = CachedChecker(inner, maxsize=2)
        cached.check(parse_hand("b1"))
        cached.check(parse_hand("b2"))
        cached.check(parse_hand("b1"))
        with caplog.at_level(logging.DEBUG, logger="mj.handcheck.cache"):
            cached.check(parse_hand("b3"))

        assert len(cached) == 2
        cached.check(parse_hand("b1"))
        assert inner.calls == 3
        cached.check(parse_hand("b2"))
        assert inner.calls == 4
        assert any(r.msg["event"] == "evicted cached grouping" for r in caplog.records)

    def test_zero_size_disables_cache(self):
        inner = _CountingChecker()
        cached = CachedChecker(inner, maxsize=0)
        cached.check(parse_hand("b1 b1"))
        cached.check(parse_hand("b1 b1"))

        assert inner.calls == 2
        assert len(cached) == 0
        assert cached.hits == 0

    def test_negative_size_rejected(self):
        with pytest.raises(ValueError, match="maxsize"):
            CachedChecker(OptHandRLEChecker(), maxsize=-1)

    def test_clear(self):
        cached = CachedChecker(OptHandRLEChecker())
        cached.check(parse_hand("b1"))
        cached.check(parse_hand("b1"))
        cached.clear()

        assert len(cached) == 0
        assert (cached.hits, cached.misses) == (0, 0)

    def test_errors_are_not_cached(self):
        inner = _CountingChecker()
        cached = CachedChecker(inner)
        hand = parse_hand("b1 b2").append(Tile(0, 1))
        for _ in range(2):
            with pytest.raises(InvalidTileError):
                cached.check(hand)

        assert inner.calls == 2
        assert len(cached) == 0

    def test_concurrent_checks_compute_once(self):
        inner = _CountingChecker(delay=0.05)
        cached = CachedChecker(inner)
        hand = parse_hand("b1 b2 b3 c4 c5 c6 w7 w8 w9 he he he hz hz")
        results = []

        def worker():
            results.append(cached.check(hand))

        threads = [threading.Thread(target=worker) for _ in range(8)]
        for t in threads:
            t.start()
        for t in threads:
            t.join()

        assert inner.calls == 1
        assert len(results) == 8
        assert all(r == results[0] for r in results)
        assert (cached.hits, cached.misses) == (7, 1)
