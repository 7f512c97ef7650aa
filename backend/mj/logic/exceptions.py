"""Typed exceptions for hand validation and engine invariants.

Input problems raise subclasses of HandError, which callers are expected
to catch and report. HandcheckInvariantError signals a defect in the
engine itself and is never caught by library code.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from mj.logic.tile import Tile


class HandError(Exception):
    """Base exception for rejected input (tiles, hands, encodings)."""


class InvalidTileError(HandError):
    """A tile failed the validity check."""

    def __init__(self, tile: Tile, reason: str = "invalid tile") -> None:
        self.tile = tile
        self.reason = reason
        super().__init__(f"{reason}: suit={int(tile.suit)} value={int(tile.value)}")


class InvalidHandError(HandError):
    """A tile collection is malformed (bad counts, wrong length, bad encoding)."""


class TileParseError(HandError):
    """Tile notation could not be parsed."""

    def __init__(self, text: str, reason: str) -> None:
        self.text = text
        self.reason = reason
        super().__init__(f"cannot parse {text!r}: {reason}")


class HandcheckInvariantError(AssertionError):
    """An internal consistency check failed; the result cannot be trusted."""
