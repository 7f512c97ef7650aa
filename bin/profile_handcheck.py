"""Benchmark and profile the optimal hand checkers.

Time every checker configuration on a set of benchmark hands, then run
one configuration under cProfile and save a .prof file for detailed
analysis.

Usage:
    python bin/profile_handcheck.py
    python bin/profile_handcheck.py --iterations 20 --representation counter --no-memo
    python bin/profile_handcheck.py --hand "b1 b2 b3 b3 b4 b5 b5 b6 b7 b7 b8 b9 b9 b9"
"""

from __future__ import annotations

import argparse
import cProfile
import logging
import pstats
import statistics
import sys
import time
from pathlib import Path

from mj.handcheck.optimal import build_checker
from mj.handcheck.settings import CheckerSettings, Representation
from mj.logic.exceptions import HandError
from mj.logic.hand import Hand
from mj.logic.parse import parse_hand
from shared.logging import setup_logging

BENCHMARK_HANDS = {
    "fourteen b1": "b1 b1 b1 b1 b1 b1 b1 b1 b1 b1 b1 b1 b1 b1",
    "stacked triplets": "b1 b1 b1 b2 b2 b2 b3 b3 b3 b4 b4 b4 b5 b5",
    "all runs": "b1 b2 b3 b3 b4 b5 b5 b6 b7 b7 b8 b9 b9 b9",
    "mixed": "w1 b7 w4 c5 b9 he w5 hf w5 c3 b8 hf hn hf",
}
PROFILE_DIR = Path(__file__).resolve().parent.parent / "backend" / "profiles"


def _time_checker(settings: CheckerSettings, hand: Hand, iterations: int) -> list[float]:
    checker = build_checker(settings)
    elapsed = []
    for _ in range(iterations):
        start = time.perf_counter()
        checker.check(hand)
        elapsed.append(time.perf_counter() - start)
    return elapsed


def _config_name(settings: CheckerSettings) -> str:
    name = settings.representation.value
    if settings.split:
        name += "+split"
    if not settings.use_memo:
        name += " (no memo)"
    return name


def benchmark(hands: dict[str, Hand], iterations: int) -> None:
    """Print the median time of every memoised configuration on every hand."""
    configs = [
        CheckerSettings(representation=r, split=split)
        for r in Representation
        for split in (False, True)
    ]

    print("=" * 60)
    print(f"BENCHMARK (median of {iterations} runs, ms)")
    print("=" * 60)
    print(f"{'':<18}" + "".join(f"{_config_name(c):>14}" for c in configs))
    for name, hand in hands.items():
        medians = [statistics.median(_time_checker(c, hand, iterations)) * 1000 for c in configs]
        print(f"{name:<18}" + "".join(f"{m:>14.3f}" for m in medians))
    print()


def profile(settings: CheckerSettings, hands: dict[str, Hand], limit: int) -> Path:
    """Run one configuration over every hand under cProfile and save the stats."""
    checker = build_checker(settings)
    profiler = cProfile.Profile()
    profiler.enable()
    for hand in hands.values():
        checker.check(hand)
    profiler.disable()

    PROFILE_DIR.mkdir(parents=True, exist_ok=True)
    profile_file = PROFILE_DIR / f"handcheck_{time.strftime('%Y-%m-%d_%H-%M-%S')}.prof"
    profiler.dump_stats(str(profile_file))

    stats = pstats.Stats(profiler)
    stats.sort_stats("cumulative")
    print(f"Top {limit} checker functions by cumulative time ({_config_name(settings)}):")
    entries = [(key, value) for key, value in stats.stats.items() if "/mj/" in key[0] and "/tests/" not in key[0]]
    entries.sort(key=lambda e: e[1][3], reverse=True)
    print(f"{'ncalls':>9}  {'tottime':>8}  {'cumtime':>8}  filename:lineno(function)")
    for (filename, lineno, func_name), (cc, nc, tt, ct, _) in entries[:limit]:
        calls = str(nc) if cc == nc else f"{nc}/{cc}"
        short = "mj/" + filename.split("/mj/", 1)[1]
        print(f"{calls:>9}  {tt:>8.3f}  {ct:>8.3f}  {short}:{lineno}({func_name})")
    print()
    print(f"Profile saved to: {profile_file}")
    return profile_file


def main() -> None:
    parser = argparse.ArgumentParser(description="Benchmark and profile the optimal hand checkers")
    parser.add_argument("--hand", help="benchmark this hand instead of the built-in set")
    parser.add_argument("-n", "--iterations", type=int, default=5, help="timed runs per configuration (default: 5)")
    parser.add_argument(
        "--representation",
        choices=[r.value for r in Representation],
        default=Representation.RLE.value,
        help="configuration to profile (default: rle)",
    )
    parser.add_argument("--split", action="store_true", help="profile with per-suit search")
    parser.add_argument("--no-memo", action="store_true", help="profile without the memo")
    parser.add_argument("--limit", type=int, default=20, help="number of functions to display (default: 20)")
    args = parser.parse_args()

    if args.iterations < 1:
        print("Iterations must be at least 1", file=sys.stderr)
        sys.exit(1)

    texts = {"custom": args.hand} if args.hand else BENCHMARK_HANDS
    try:
        hands = {name: parse_hand(text) for name, text in texts.items()}
    except HandError as e:
        print(f"Invalid hand: {e}", file=sys.stderr)
        sys.exit(1)

    # keep search statistics out of the tables
    setup_logging(level=logging.CRITICAL)

    benchmark(hands, args.iterations)
    profile(
        CheckerSettings(
            representation=Representation(args.representation),
            split=args.split,
            use_memo=not args.no_memo,
        ),
        hands,
        args.limit,
    )


if __name__ == "__main__":
    main()
