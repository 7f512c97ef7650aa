"""Tests for the two-character tile notation."""

import pytest

from mj.logic.exceptions import HandError, TileParseError
from mj.logic.parse import format_hand, parse_hand, parse_tile
from mj.logic.tile import BAN, EAST, FA, FLOWER_BASE, ZHONG, Suit, Tile


class TestParseTile:
    @pytest.mark.parametrize(
        ("text", "expected"),
        [
            ("b1", Tile(Suit.BAMBOO, 1)),
            ("c9", Tile(Suit.COIN, 9)),
            ("W5", Tile(Suit.WAN, 5)),
            ("he", Tile(Suit.HONOUR, EAST)),
            ("HZ", Tile(Suit.HONOUR, ZHONG)),
            ("hf", Tile(Suit.HONOUR, FA)),
            ("hb", Tile(Suit.HONOUR, BAN)),
            ("f1", Tile(Suit.FLOWER, FLOWER_BASE)),
            ("f8", Tile(Suit.FLOWER, FLOWER_BASE + 7)),
        ],
    )
    def test_valid(self, text, expected):
        tile = parse_tile(text)
        assert tile == expected
        assert tile.valid

    @pytest.mark.parametrize(
        ("text", "reason"),
        [
            ("b", "2 characters"),
            ("b10", "2 characters"),
            ("x1", "unrecognised suit"),
            ("b0", "invalid value for basic tile"),
            ("bx", "invalid value"),
            ("hx", "invalid value for honour suit"),
            ("f0", "invalid value for flower tile"),
            ("f9", "invalid value for flower tile"),
            ("b²", "invalid value"),
        ],
    )
    def test_invalid(self, text, reason):
        with pytest.raises(TileParseError, match=reason) as exc_info:
            parse_tile(text)
        assert exc_info.value.text == text

    def test_parse_error_is_hand_error(self):
        with pytest.raises(HandError):
            parse_tile("zz")

    def test_code_is_inverse(self):
        for text in ("b1", "c5", "w9", "he", "hs", "hw", "hn", "hz", "hf", "hb", "f1", "f8"):
            assert parse_tile(text).code == text


class TestParseHand:
    def test_keeps_order(self):
        assert format_hand(parse_hand("c1 b1  he\tw9")) == "c1 b1 he w9"

    def test_empty(self):
        assert len(parse_hand("   ")) == 0

    def test_error_names_bad_tile(self):
        with pytest.raises(TileParseError, match="'b0'"):
            parse_hand("b1 b0 b2")
