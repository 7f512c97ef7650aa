"""
Tile representation for mahjong hands.

A tile is a (suit, value) pair. Values 1-9 are used by the three basic
suits, East..Ban by the Honour suit and FLOWER_BASE..FLOWER_BASE+7 by the
Flower suit. Constructing an invalid tile is allowed; the hand checkers
reject invalid tiles before searching.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import IntEnum


class Suit(IntEnum):
    """Tile suit. Zero is reserved as the invalid suit."""

    BAMBOO = 1
    COIN = 2
    WAN = 3  # characters
    HONOUR = 4
    FLOWER = 5
    # only 7 suits fit in the 3 high bits of the one-byte encoding


BASIC_SUITS = (Suit.BAMBOO, Suit.COIN, Suit.WAN)

# honour values
EAST = 10
SOUTH = 11
WEST = 12
NORTH = 13
ZHONG = 14  # red dragon
FA = 15  # green dragon
BAN = 16  # white dragon

FLOWER_BASE = 32
NUM_FLOWERS = 8

MIN_BASIC_VALUE = 1
MAX_BASIC_VALUE = 9
# highest value that can start a run (7-8-9)
MAX_RUN_START_VALUE = 7

NUM_UNIQUE_MELDING_TILES = 3 * 9 + 7
NUM_TILES = 4 * NUM_UNIQUE_MELDING_TILES + NUM_FLOWERS

# copies of each melding tile in a full set
MAX_TILE_COPIES = 4

_VALUE_MASK = 0b11111
_SUIT_SHIFT = 5

_UNI_TILE_BACK = 0x1F02B
_UNI_BASE = {
    Suit.HONOUR: (0x1F000, EAST),
    Suit.WAN: (0x1F007, 1),
    Suit.BAMBOO: (0x1F010, 1),
    Suit.COIN: (0x1F019, 1),
    Suit.FLOWER: (0x1F022, FLOWER_BASE),
}

SUIT_CODES = {
    Suit.BAMBOO: "b",
    Suit.COIN: "c",
    Suit.WAN: "w",
    Suit.HONOUR: "h",
    Suit.FLOWER: "f",
}

HONOUR_CODES = {
    EAST: "e",
    SOUTH: "s",
    WEST: "w",
    NORTH: "n",
    ZHONG: "z",
    FA: "f",
    BAN: "b",
}


@dataclass(frozen=True, order=True, slots=True)
class Tile:
    """
    A single mahjong tile.

    Ordering is by suit, then value, which is also the order of the
    one-byte encoding.
    """

    suit: int
    value: int

    @property
    def valid(self) -> bool:
        """True if the tile may be used in the hand algorithms."""
        if self.suit in BASIC_SUITS:
            return MIN_BASIC_VALUE <= self.value <= MAX_BASIC_VALUE
        if self.suit == Suit.HONOUR:
            return EAST <= self.value <= BAN
        if self.suit == Suit.FLOWER:
            return FLOWER_BASE <= self.value < FLOWER_BASE + NUM_FLOWERS
        return False

    @property
    def can_meld(self) -> bool:
        """True if the tile may take part in a triplet, run or pair."""
        return self.valid and self.suit != Suit.FLOWER

    @property
    def is_basic(self) -> bool:
        """True for numbered-suit tiles, the only tiles that form runs."""
        return self.valid and self.suit in BASIC_SUITS

    @property
    def is_terminal(self) -> bool:
        return self.is_basic and self.value in (MIN_BASIC_VALUE, MAX_BASIC_VALUE)

    @property
    def is_honour(self) -> bool:
        return self.valid and self.suit == Suit.HONOUR

    @property
    def code(self) -> str:
        """Two-character notation, e.g. 'b1', 'he', 'f3'. Inverse of parse_tile."""
        if not self.valid:
            return "??"
        suit_char = SUIT_CODES[Suit(self.suit)]
        if self.suit == Suit.HONOUR:
            return suit_char + HONOUR_CODES[self.value]
        if self.suit == Suit.FLOWER:
            return f"{suit_char}{self.value - FLOWER_BASE + 1}"
        return f"{suit_char}{self.value}"

    def shifted(self, offset: int) -> Tile:
        """Return the tile `offset` values along in the same suit (may be invalid)."""
        return Tile(self.suit, self.value + offset)

    def marshal(self) -> int:
        """
        Pack the tile into one byte: 0bSSSVVVVV.

        The suit is kept as is in the 3 high bits, the low 5 bits of the
        value in the rest. Valid tiles never encode to ',' (0x2c).
        """
        return (int(self.suit) << _SUIT_SHIFT) | (int(self.value) & _VALUE_MASK)

    def __str__(self) -> str:
        if not self.valid:
            return chr(_UNI_TILE_BACK)
        base, first = _UNI_BASE[Suit(self.suit)]
        return chr(base + self.value - first)

    def __repr__(self) -> str:
        return f"Tile({self.code})"


def unmarshal_tile(b: int) -> Tile:
    """Inverse of Tile.marshal()."""
    suit = b >> _SUIT_SHIFT
    value = b & _VALUE_MASK
    if suit == Suit.FLOWER:
        value |= FLOWER_BASE
    return Tile(suit, value)
