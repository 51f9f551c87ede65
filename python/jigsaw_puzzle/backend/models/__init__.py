from jigsaw_puzzle.backend.models.geometry import Point, Rect, Size
from jigsaw_puzzle.backend.models.piece import (
    PieceDefinition,
    PiecePhase,
    PieceState,
    snap_rotation,
)
from jigsaw_puzzle.backend.models.puzzle import Puzzle

__all__ = [
    "PieceDefinition",
    "PiecePhase",
    "PieceState",
    "Point",
    "Puzzle",
    "Rect",
    "Size",
    "snap_rotation",
]
