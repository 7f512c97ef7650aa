from mj.logic.exceptions import (
    HandcheckInvariantError,
    HandError,
    InvalidHandError,
    InvalidTileError,
    TileParseError,
)
from mj.logic.tile import Suit, Tile


class TestHandErrors:
    def test_input_errors_share_base(self):
        assert issubclass(InvalidTileError, HandError)
        assert issubclass(InvalidHandError, HandError)
        assert issubclass(TileParseError, HandError)

    def test_invalid_tile_message(self):
        err = InvalidTileError(Tile(Suit.COIN, 12))
        assert str(err) == "invalid tile: suit=2 value=12"
        assert err.tile == Tile(Suit.COIN, 12)

    def test_invalid_tile_custom_reason(self):
        assert str(InvalidTileError(Tile(0, 0), "bad input")) == "bad input: suit=0 value=0"

    def test_parse_error_keeps_text(self):
        err = TileParseError("q1", "unrecognised suit 'q'")
        assert err.text == "q1"
        assert "cannot parse 'q1'" in str(err)


class TestInvariantError:
    def test_is_assertion_not_hand_error(self):
        assert issubclass(HandcheckInvariantError, AssertionError)
        assert not issubclass(HandcheckInvariantError, HandError)
