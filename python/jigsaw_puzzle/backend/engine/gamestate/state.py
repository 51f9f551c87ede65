"""Tracks the mutable state of a puzzle in progress."""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterator
from enum import StrEnum

from jigsaw_puzzle.backend.models.geometry import Point, Rect, Size
from jigsaw_puzzle.backend.models.piece import PieceState

logger = logging.getLogger(__name__)


class StateEvent(StrEnum):
    MOVED = "moved"
    ROTATED = "rotated"
    PLACED = "placed"
    RETURNED = "returned"
    LAYOUT = "layout"
    GEOMETRY = "geometry"
    COMPLETED = "completed"


Listener = Callable[[StateEvent, str | None], None]


class PuzzleState:
    """Holds the piece states, board geometry and change listeners.

    Front ends only read from this object and subscribe to it; every
    mutation goes through ``PuzzleGame``, which calls ``notify`` afterwards.
    """

    def __init__(self, pieces: list[PieceState], rows: int, columns: int) -> None:
        self.rows = rows
        self.columns = columns
        self.pieces = pieces
        self._by_id = {p.id: p for p in pieces}
        self.canvas_area: Rect = Rect.zero()
        self.pile_area: Rect = Rect.zero()
        self.cell_size: Size = Size(0.0, 0.0)
        self.cell_centers: list[list[Point]] = []
        self.dragged_id: str | None = None
        self.layout_dirty: bool = False
        self.version: int = 0
        self._listeners: list[Listener] = []

    # -- pieces ---------------------------------------------------------------

    def get(self, piece_id: str) -> PieceState | None:
        return self._by_id.get(piece_id)

    def __iter__(self) -> Iterator[PieceState]:
        return iter(self.pieces)

    def __len__(self) -> int:
        return len(self.pieces)

    @property
    def pile_pieces(self) -> list[PieceState]:
        """Unplaced pieces, in pile order."""
        return [p for p in self.pieces if not p.is_placed]

    @property
    def placed_count(self) -> int:
        return sum(1 for p in self.pieces if p.is_placed)

    @property
    def is_completed(self) -> bool:
        return all(p.is_placed for p in self.pieces)

    # -- geometry -------------------------------------------------------------

    def cell_center(self, row: int, column: int) -> Point:
        return self.cell_centers[row][column]

    def cell_rect(self, row: int, column: int) -> Rect:
        return Rect.centered(self.cell_center(row, column), self.cell_size)

    def set_canvas_area(self, area: Rect) -> None:
        """Store *area* and derive the cell size and every cell centre."""
        cw = area.width / self.columns
        ch = area.height / self.rows
        self.canvas_area = area
        self.cell_size = Size(cw, ch)
        self.cell_centers = [
            [
                Point(area.left + (c + 0.5) * cw, area.top + (r + 0.5) * ch)
                for c in range(self.columns)
            ]
            for r in range(self.rows)
        ]

    # -- observation ----------------------------------------------------------

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        """Register *listener*; return a callable that removes it again."""
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def notify(self, event: StateEvent, piece_id: str | None = None) -> None:
        self.version += 1
        for listener in list(self._listeners):
            listener(event, piece_id)
