"""Piece models: the immutable definition and the mutable per-session state."""

from __future__ import annotations

from dataclasses import dataclass
from enum import StrEnum

from PIL import Image

from jigsaw_puzzle.backend.models.geometry import Point

QUARTER_TURNS = 4


class PiecePhase(StrEnum):
    IN_PILE = "in_pile"
    DRAGGING = "dragging"
    PLACED = "placed"


@dataclass(frozen=True)
class PieceDefinition:
    """Where a piece belongs and what it shows.

    ``correct_rotation`` counts clockwise quarter turns (0 = upright) and is
    fixed once the puzzle has been built.
    """

    id: str
    image: Image.Image
    correct_row: int
    correct_column: int
    correct_rotation: int = 0

    @property
    def cell(self) -> tuple[int, int]:
        return self.correct_row, self.correct_column


@dataclass
class PieceState:
    """Session-local tracking of one piece.

    Only the game engine mutates these; front ends read them.
    """

    id: str
    current_rotation: int
    position: Point
    pile_position: Point
    is_placed: bool = False
    is_in_pile: bool = True

    @property
    def phase(self) -> PiecePhase:
        if self.is_placed:
            return PiecePhase.PLACED
        if self.is_in_pile:
            return PiecePhase.IN_PILE
        return PiecePhase.DRAGGING


def snap_rotation(current: int, degrees: float) -> int:
    """Snap a free rotation gesture to an absolute quarter-turn.

    *degrees* is added to the piece's current orientation and the total is
    rounded to the nearest multiple of 90.  Negative gestures wrap around::

        snap_rotation(0, -80)   # -> 3
    """
    total = current * 90 + degrees
    return int(round(total / 90)) % QUARTER_TURNS


def is_valid_rotation(rotation: object) -> bool:
    """True for an integer quarter-turn count in 0..3 (bools excluded)."""
    if isinstance(rotation, bool) or not isinstance(rotation, int):
        return False
    return 0 <= rotation < QUARTER_TURNS
