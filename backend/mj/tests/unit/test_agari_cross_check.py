"""Compare complete groupings against the mahjong library's agari detector."""

import random
from collections import Counter

import pytest

from mj.handcheck.optimal import OptHandRLEChecker
from mj.logic.hand import Hand
from mj.logic.parse import parse_hand
from mj.logic.tile import BAN, EAST, Suit, Tile
from mj.special.thirteen_orphans import ORPHANS
from mj.tests.helpers.agari import is_agari, to_34_array

COMPLETE_HANDS = [
    "b1 b2 b3 b3 b4 b5 b5 b6 b7 b7 b8 b9 b9 b9",
    "b1 b1 b1 b2 b2 b2 b3 b3 b3 b4 b4 b4 b5 b5",
    "b1 b2 b3 c4 c5 c6 w7 w8 w9 he he he hz hz",
    "c1 c1 c1 c2 c3 c4 c5 c5 c6 c7 c8 c9 c9 c9",
    "hb hb hb hf hf hf hz hz hz he he he hn hn",
    "b1 b1 b2 b2 b3 b3 c5 c6 c7 w2 w3 w4 hs hs",
]

INCOMPLETE_HANDS = [
    "w1 b7 w4 c5 b9 he w5 hf w5 c3 b8 hf hn hf",
    "b1 b3 b5 b7 b9 c1 c3 c5 c7 c9 w1 w3 w5 w7",
    "b1 b2 b3 c4 c5 c6 w7 w8 w9 he he he hz hs",
]


def _is_seven_pairs_shape(hand: Hand) -> bool:
    counts = Counter(hand)
    return len(counts) == 7 and all(n == 2 for n in counts.values())


def _is_thirteen_orphans_shape(hand: Hand) -> bool:
    return set(hand) == set(ORPHANS)


class TestConverter:
    def test_slots(self):
        arr = to_34_array(parse_hand("w1 c1 b1 he hb hf hz"))
        assert [i for i, n in enumerate(arr) if n] == [0, 9, 18, 27, 31, 32, 33]


class TestAgariCrossCheck:
    @pytest.mark.parametrize("text", COMPLETE_HANDS)
    def test_complete_hands(self, text):
        hand = parse_hand(text)
        assert is_agari(hand)
        assert OptHandRLEChecker().check(hand).is_complete

    @pytest.mark.parametrize("text", INCOMPLETE_HANDS)
    def test_incomplete_hands(self, text):
        hand = parse_hand(text)
        assert not is_agari(hand)
        assert not OptHandRLEChecker().check(hand).is_complete

    def test_seven_pairs_is_not_a_complete_grouping(self):
        hand = parse_hand("b1 b1 b4 b4 b7 b7 c2 c2 c5 c5 w3 w3 hz hz")
        assert is_agari(hand)
        result = OptHandRLEChecker().check(hand)
        assert not result.is_complete
        assert len(result.pairs) == 7

    @pytest.mark.parametrize("seed", range(20))
    def test_random_hands_agree(self, seed):
        rng = random.Random(seed)
        # few suits make complete hands likely enough to matter
        pool = [Tile(Suit.BAMBOO, v) for v in range(1, 10)] + [Tile(Suit.HONOUR, v) for v in range(EAST, BAN + 1)]
        hand = Hand(rng.sample(pool * 4, 14))

        if OptHandRLEChecker().check(hand).is_complete:
            assert is_agari(hand)
        elif is_agari(hand):
            assert _is_seven_pairs_shape(hand) or _is_thirteen_orphans_shape(hand)
