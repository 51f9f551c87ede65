"""Pile layout policy: one centred column that never disturbs a drag."""

from __future__ import annotations

import pytest

from jigsaw_puzzle.backend.engine.pilelayout import PileLayout
from jigsaw_puzzle.backend.models.geometry import Point, Rect, Size
from jigsaw_puzzle.backend.models.piece import PieceState

PILE = Rect(500, 40, 200, 900)
CELL = Size(120, 80)


# -- helpers ------------------------------------------------------------------


def _states(n: int) -> list[PieceState]:
    return [
        PieceState(
            id=f"p{i}",
            current_rotation=0,
            position=Point(-1000, -1000),
            pile_position=Point(-1000, -1000),
        )
        for i in range(n)
    ]


def _slot(i: int) -> Point:
    return Point(600, 40 + 30 + i * (80 + 10))


# -- tests --------------------------------------------------------------------


def test_single_centered_column() -> None:
    states = _states(5)
    positions = PileLayout().layout(PILE, states, CELL)
    assert positions == {f"p{i}": _slot(i) for i in range(5)}


def test_dragged_piece_is_left_alone() -> None:
    states = _states(5)
    dragged = states[2]
    dragged.is_in_pile = False
    dragged.position = Point(123.5, 456.25)
    dragged.pile_position = Point(7, 8)

    PileLayout().apply(PILE, states, CELL, excluded_id=dragged.id)

    assert dragged.position == Point(123.5, 456.25)
    assert dragged.pile_position == Point(7, 8)
    rest = [s for s in states if s is not dragged]
    assert [s.position for s in rest] == [_slot(i) for i in range(4)]
    ys = [s.position.y for s in rest]
    assert {b - a for a, b in zip(ys, ys[1:])} == {90}


def test_placed_pieces_take_no_slot() -> None:
    states = _states(3)
    states[0].is_placed = True
    states[0].is_in_pile = False
    states[0].position = Point(50, 50)

    PileLayout().apply(PILE, states, CELL)

    assert states[0].position == Point(50, 50)
    assert states[1].position == _slot(0)
    assert states[2].position == _slot(1)


def test_lifted_piece_gets_new_home_but_stays_put() -> None:
    states = _states(2)
    states[0].is_in_pile = False
    states[0].position = Point(10, 10)

    PileLayout().apply(PILE, states, CELL)

    assert states[0].position == Point(10, 10)
    assert states[0].pile_position == _slot(0)


@pytest.mark.parametrize(
    "pile, cell",
    [
        (Rect(500, 40, 0, 900), CELL),
        (Rect(500, 40, 200, 0), CELL),
        (PILE, Size(0, 0)),
    ],
)
def test_degenerate_geometry_moves_nothing(pile: Rect, cell: Size) -> None:
    states = _states(3)
    assert PileLayout().layout(pile, states, cell) == {}
    assert PileLayout().apply(pile, states, cell) == 0
    assert all(s.position == Point(-1000, -1000) for s in states)


def test_custom_spacing() -> None:
    layout = PileLayout(gap=0, top_margin=0)
    positions = layout.layout(PILE, _states(2), CELL)
    assert positions["p1"].y - positions["p0"].y == 80
    assert positions["p0"].y == PILE.top
