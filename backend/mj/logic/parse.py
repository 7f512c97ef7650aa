"""
Text notation for tiles and hands.

A tile is two characters: the suit ('b'amboo, 'c'oin, 'w'an, 'h'onour,
'f'lower) followed by the value. Basic suits take a digit 1-9, honours
one of 'eswnzfb' (East, South, West, North, Zhong, Fa, Ban) and flowers a
digit 1-8. A hand is tiles separated by whitespace. Parsing is case
insensitive.
"""

from __future__ import annotations

from mj.logic.exceptions import TileParseError
from mj.logic.hand import Hand
from mj.logic.tile import (
    FLOWER_BASE,
    HONOUR_CODES,
    MAX_BASIC_VALUE,
    MIN_BASIC_VALUE,
    NUM_FLOWERS,
    SUIT_CODES,
    Suit,
    Tile,
)

_TILE_TEXT_LENGTH = 2

_SUIT_BY_CHAR = {char: suit for suit, char in SUIT_CODES.items()}
_HONOUR_BY_CHAR = {char: value for value, char in HONOUR_CODES.items()}


def parse_tile(text: str) -> Tile:
    """Parse a two-character tile such as 'b1', 'HZ' or 'f8'."""
    if len(text) != _TILE_TEXT_LENGTH:
        raise TileParseError(text, "tile must be 2 characters long")

    s = text.lower()
    suit = _SUIT_BY_CHAR.get(s[0])
    if suit is None:
        raise TileParseError(text, f"unrecognised suit {s[0]!r}")

    if suit == Suit.HONOUR:
        value = _HONOUR_BY_CHAR.get(s[1])
        if value is None:
            raise TileParseError(text, f"invalid value for honour suit {s[1]!r}")
        return Tile(suit, value)

    if s[1] not in "0123456789":
        raise TileParseError(text, f"invalid value {s[1]!r}")
    digit = int(s[1])

    if suit == Suit.FLOWER:
        if not 1 <= digit <= NUM_FLOWERS:
            raise TileParseError(text, f"invalid value for flower tile {s[1]!r}")
        return Tile(suit, FLOWER_BASE + digit - 1)

    if not MIN_BASIC_VALUE <= digit <= MAX_BASIC_VALUE:
        raise TileParseError(text, f"invalid value for basic tile {s[1]!r}")
    return Tile(suit, digit)


def parse_hand(text: str) -> Hand:
    """Parse whitespace-separated tiles into a Hand, keeping their order."""
    return Hand(parse_tile(part) for part in text.split())


def format_hand(hand: Hand) -> str:
    """Inverse of parse_hand."""
    return " ".join(t.code for t in hand)
