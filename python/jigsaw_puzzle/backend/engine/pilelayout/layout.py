"""Resting positions for the pieces that are not on the board yet."""

from __future__ import annotations

import logging
from collections.abc import Iterable

from jigsaw_puzzle.backend.models.geometry import Point, Rect, Size
from jigsaw_puzzle.backend.models.piece import PieceState
from jigsaw_puzzle.config import PILE_GAP, PILE_TOP_MARGIN

logger = logging.getLogger(__name__)


class PileLayout:
    """Stacks unplaced pieces in one column centred in the pile region."""

    def __init__(self, gap: float = PILE_GAP, top_margin: float = PILE_TOP_MARGIN) -> None:
        self.gap = gap
        self.top_margin = top_margin

    def layout(
        self,
        pile_rect: Rect,
        states: Iterable[PieceState],
        cell_size: Size,
        excluded_id: str | None = None,
    ) -> dict[str, Point]:
        """Return the slot position of every unplaced piece except *excluded_id*.

        Slots are assigned in iteration order.  An empty pile region or an
        empty cell size yields no positions at all.
        """
        if pile_rect.is_empty or cell_size.is_empty:
            logger.debug(
                "Skipping pile layout for degenerate geometry %s / %s",
                pile_rect,
                cell_size,
            )
            return {}

        step = cell_size.height + self.gap
        x = pile_rect.center.x
        positions: dict[str, Point] = {}
        for state in states:
            if state.is_placed or state.id == excluded_id:
                continue
            slot = len(positions)
            positions[state.id] = Point(x, pile_rect.top + self.top_margin + slot * step)
        return positions

    def apply(
        self,
        pile_rect: Rect,
        states: list[PieceState],
        cell_size: Size,
        excluded_id: str | None = None,
    ) -> int:
        """Lay out *states* in place and return how many pieces moved.

        Every laid-out piece gets a new ``pile_position``; only pieces that
        are resting in the pile also have their ``position`` changed.
        """
        positions = self.layout(pile_rect, states, cell_size, excluded_id)
        moved = 0
        for state in states:
            slot = positions.get(state.id)
            if slot is None:
                continue
            state.pile_position = slot
            if state.is_in_pile and state.position != slot:
                state.position = slot
                moved += 1
        logger.debug("Pile relayout: %d slot(s), %d piece(s) moved", len(positions), moved)
        return moved
