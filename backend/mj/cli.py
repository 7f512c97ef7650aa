"""Command-line hand checker.

Reads a hand in tile notation and prints its optimal grouping and waits.

Usage:
    mj-handcheck "b1 b2 b3 c4 c5 c6 w7 w8 w9 he he he hz"
    echo "b1 b1 b1 b2 b3" | mj-handcheck --representation hand --split
    MJ_USE_MEMO=false mj-handcheck "b1 b2 b3 b1 b2 b3"
"""

from __future__ import annotations

import argparse
import sys
from typing import TYPE_CHECKING

import structlog

from mj.handcheck.cache import CachedChecker
from mj.handcheck.optimal import build_checker
from mj.handcheck.settings import HandcheckSettings, Representation
from mj.logic.exceptions import HandError
from mj.logic.parse import format_hand, parse_hand
from mj.special.seven_pairs import is_seven_pairs
from mj.special.thirteen_orphans import is_thirteen_orphans
from mj.wait.find import NUM_TILES_IN_HAND, find_waits
from shared.logging import setup_logging

if TYPE_CHECKING:
    from collections.abc import Sequence

    from mj.logic.hand import Hand

logger = structlog.get_logger()

EXIT_OK = 0
EXIT_BAD_INPUT = 2


def build_parser(defaults: HandcheckSettings) -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="mj-handcheck", description="Find the optimal grouping of a mahjong hand.")
    parser.add_argument("hand", nargs="?", help="space-separated tiles, e.g. 'b1 b2 b3 he he'; read from stdin if omitted")
    parser.add_argument(
        "--representation",
        choices=[r.value for r in Representation],
        default=defaults.representation.value,
        help="collection type used while searching",
    )
    parser.add_argument(
        "--split",
        action=argparse.BooleanOptionalAction,
        default=defaults.split,
        help="search each suit separately",
    )
    parser.add_argument(
        "--memo",
        action=argparse.BooleanOptionalAction,
        default=defaults.use_memo,
        help="memoise repeated subproblems",
    )
    parser.add_argument(
        "--no-middle",
        action="store_true",
        help="do not count a gap in the middle of a run as a wait",
    )
    return parser


def _report_special(hand: Hand) -> list[str]:
    lines = []
    ok, wait = is_seven_pairs(hand, allow_repeat=True)
    if ok and wait is not None:
        lines.append(f"seven pairs: waiting on {wait.code}")
    ok, wait = is_thirteen_orphans(hand)
    if ok:
        lines.append(f"thirteen orphans: waiting on {wait.code if wait is not None else 'any orphan'}")
    return lines


def run(argv: Sequence[str] | None = None, settings: HandcheckSettings | None = None) -> int:
    if settings is None:
        settings = HandcheckSettings()
    args = build_parser(settings).parse_args(argv)

    text = args.hand if args.hand is not None else sys.stdin.readline()
    try:
        hand = parse_hand(text)
        hand.validate()
    except HandError as e:
        logger.warning("rejected hand", text=text.strip(), error=str(e))
        print(f"cannot parse hand: {e}", file=sys.stderr)
        return EXIT_BAD_INPUT

    checker_settings = settings.checker_settings().model_copy(
        update={
            "representation": Representation(args.representation),
            "split": args.split,
            "use_memo": args.memo,
        },
    )
    checker = CachedChecker(build_checker(checker_settings), maxsize=settings.cache_size)

    sorted_hand = hand.sorted()
    grouping = checker.check(sorted_hand)
    print(f"hand: {format_hand(sorted_hand)}")
    print(f"marshal: {sorted_hand.marshal().hex()}")
    print(f"solution: {grouping} (score {grouping.score()})")

    if len(hand) == NUM_TILES_IN_HAND:
        waits = find_waits(grouping, allow_middle=not args.no_middle)
        # only the returned grouping is inspected; other optimal groupings may add waits
        print(f"grouping waits: {format_hand(waits)}" if waits else "no grouping waits")
        for line in _report_special(hand):
            print(line)
    return EXIT_OK


def main() -> None:
    settings = HandcheckSettings()
    setup_logging(log_dir=settings.log_dir)
    sys.exit(run(settings=settings))


if __name__ == "__main__":
    main()
