"""Core gameplay logic: drags, drops, rotations and the win condition."""

from __future__ import annotations

import logging
import random
from collections.abc import Callable

from jigsaw_puzzle.backend.engine.gamegenerator import PuzzleFactory
from jigsaw_puzzle.backend.engine.gamestate import PuzzleState, StateEvent
from jigsaw_puzzle.backend.engine.gamestate.state import Listener
from jigsaw_puzzle.backend.engine.pilelayout import PileLayout
from jigsaw_puzzle.backend.errors import PuzzleError
from jigsaw_puzzle.backend.models.geometry import Point, Rect, Size
from jigsaw_puzzle.backend.models.piece import (
    PieceDefinition,
    PieceState,
    is_valid_rotation,
)
from jigsaw_puzzle.backend.models.puzzle import Puzzle
from jigsaw_puzzle.config import PLACEMENT_THRESHOLD

logger = logging.getLogger(__name__)


class PuzzleGame:
    """Orchestrates a single puzzle session.

    Each piece is in one of three phases: resting in the pile, being
    dragged, or placed.  Placed is terminal: every request that targets a
    placed piece is ignored, as is every request for an unknown id.

    Geometry changes are committed at once but the pile relayout they
    imply is deferred until ``flush_layout`` runs.  Every user operation
    flushes a pending relayout before doing anything else.
    """

    def __init__(
        self,
        puzzle: Puzzle,
        rng: random.Random | None = None,
        layout: PileLayout | None = None,
    ) -> None:
        self.puzzle = puzzle
        self._layout = layout or PileLayout()
        pieces = PuzzleFactory.scramble(puzzle, rng or random.Random())
        self.state = PuzzleState(pieces, puzzle.rows, puzzle.columns)

    # -- queries --------------------------------------------------------------

    @property
    def is_completed(self) -> bool:
        return self.state.is_completed

    @property
    def piece_size(self) -> Size:
        """Current on-screen size of every piece (one grid cell)."""
        return self.state.cell_size

    @property
    def dragged_id(self) -> str | None:
        return self.state.dragged_id

    def piece(self, piece_id: str) -> PieceState | None:
        return self.state.get(piece_id)

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        return self.state.subscribe(listener)

    def overlap_ratio(self, piece_id: str, point: Point) -> float:
        """Share of the piece's area covering its own cell if dropped at *point*."""
        definition = self.puzzle.piece(piece_id)
        size = self.state.cell_size
        if definition is None or size.is_empty:
            return 0.0
        piece_rect = Rect.centered(point, size)
        target = self.state.cell_rect(definition.correct_row, definition.correct_column)
        return piece_rect.intersection_area(target) / piece_rect.area

    # -- drag lifecycle -------------------------------------------------------

    def start_drag(self, piece_id: str) -> bool:
        """Lift a piece out of the pile.  Returns False if the request was ignored."""
        self.flush_layout()
        piece = self._movable(piece_id)
        if piece is None:
            return False
        self.state.dragged_id = piece_id
        piece.is_in_pile = False
        logger.debug("Drag started for %s at %s", piece_id, piece.position)
        self.state.notify(StateEvent.MOVED, piece_id)
        return True

    def update_drag_position(self, piece_id: str, point: Point) -> bool:
        """Track the pointer: the piece follows *point* unconditionally."""
        self.flush_layout()
        piece = self._movable(piece_id)
        if piece is None:
            return False
        self.state.dragged_id = piece_id
        piece.is_in_pile = False
        piece.position = point
        self.state.notify(StateEvent.MOVED, piece_id)
        return True

    def drop(self, piece_id: str, point: Point, is_final: bool = True) -> bool:
        """Handle a drop event.

        A non-final drop is a drag update.  A final drop runs the
        placement test and returns True only if the piece got placed.
        """
        if not is_final:
            return self.update_drag_position(piece_id, point)
        return self.end_drag(piece_id, point)

    def end_drag(self, piece_id: str, point: Point) -> bool:
        """Release a piece at *point*: snap it into its cell or send it back."""
        self.flush_layout()
        piece = self._movable(piece_id)
        if piece is None:
            return False
        if self.state.dragged_id == piece_id:
            self.state.dragged_id = None

        logger.debug("Piece %s dropped at %s", piece_id, point)
        if self._accepts(piece, point):
            self._place(piece)
            return True
        self._return_to_pile(piece)
        return False

    # -- rotation -------------------------------------------------------------

    def rotate(self, piece_id: str, rotation: int) -> bool:
        """Set the absolute rotation (quarter turns) of an unplaced piece.

        Returns True if the rotation changed.  Requests for placed or
        unknown pieces are ignored; otherwise anything but an integer in
        0..3 raises ``ValueError``.
        """
        self.flush_layout()
        piece = self._movable(piece_id)
        if piece is None:
            return False
        if not is_valid_rotation(rotation):
            raise ValueError(f"Rotation must be an integer in 0..3, got {rotation!r}.")
        if piece.current_rotation == rotation:
            return False
        piece.current_rotation = rotation
        self.state.notify(StateEvent.ROTATED, piece_id)
        return True

    # -- geometry -------------------------------------------------------------

    def set_canvas_area(self, area: Rect) -> bool:
        """Resize the board grid and re-snap every placed piece.

        Pieces change size with the grid, so the pile is marked for
        relayout.  A degenerate rectangle is ignored.
        """
        if area.is_empty:
            logger.warning("Ignoring degenerate canvas area %s", area)
            return False
        if area == self.state.canvas_area:
            return False
        self.state.set_canvas_area(area)
        for piece in self.state:
            if piece.is_placed:
                piece.position = self._home(piece.id)
        self.state.layout_dirty = True
        self.state.notify(StateEvent.GEOMETRY)
        return True

    def set_pile_area(self, area: Rect) -> bool:
        """Move or resize the pile region.  A degenerate rectangle is ignored."""
        if area.is_empty:
            logger.warning("Ignoring degenerate pile area %s", area)
            return False
        if area == self.state.pile_area:
            return False
        self.state.pile_area = area
        self.state.layout_dirty = True
        self.state.notify(StateEvent.GEOMETRY)
        return True

    def flush_layout(self) -> bool:
        """Run the pending pile relayout, if any.  Returns True if one ran."""
        if not self.state.layout_dirty:
            return False
        self.state.layout_dirty = False
        self._relayout()
        return True

    # -- helpers --------------------------------------------------------------

    def _movable(self, piece_id: str) -> PieceState | None:
        piece = self.state.get(piece_id)
        if piece is None:
            logger.debug("Ignoring request for unknown piece %s", piece_id)
            return None
        if piece.is_placed:
            return None
        return piece

    def _definition(self, piece_id: str) -> PieceDefinition:
        definition = self.puzzle.piece(piece_id)
        if definition is None:
            raise PuzzleError(f"No piece definition for {piece_id!r}.")
        return definition

    def _home(self, piece_id: str) -> Point:
        """Centre of the cell the piece belongs in."""
        return self.state.cell_center(*self._definition(piece_id).cell)

    def _accepts(self, piece: PieceState, point: Point) -> bool:
        canvas = self.state.canvas_area
        if canvas.is_empty or not canvas.contains(point):
            logger.debug("Drop point %s is outside the canvas %s", point, canvas)
            return False
        definition = self._definition(piece.id)
        ratio = self.overlap_ratio(piece.id, point)
        logger.debug(
            "Overlap %.3f, rotation %d (needs %d)",
            ratio,
            piece.current_rotation,
            definition.correct_rotation,
        )
        return (
            ratio > PLACEMENT_THRESHOLD
            and piece.current_rotation == definition.correct_rotation
        )

    def _place(self, piece: PieceState) -> None:
        piece.position = self._home(piece.id)
        piece.is_placed = True
        piece.is_in_pile = False
        self.state.notify(StateEvent.PLACED, piece.id)
        if self.state.is_completed:
            logger.info("Puzzle completed")
            self.state.notify(StateEvent.COMPLETED)

    def _return_to_pile(self, piece: PieceState) -> None:
        piece.is_in_pile = True
        piece.position = piece.pile_position
        self.state.notify(StateEvent.RETURNED, piece.id)
        self._relayout()

    def _relayout(self) -> None:
        self._layout.apply(
            self.state.pile_area,
            self.state.pieces,
            self.state.cell_size,
            excluded_id=self.state.dragged_id,
        )
        self.state.notify(StateEvent.LAYOUT)
