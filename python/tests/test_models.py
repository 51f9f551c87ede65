"""Geometry value types and piece helpers."""

from __future__ import annotations

import pytest

from jigsaw_puzzle.backend.models.geometry import Point, Rect, Size
from jigsaw_puzzle.backend.models.piece import (
    PiecePhase,
    PieceState,
    is_valid_rotation,
    snap_rotation,
)


# -- geometry -----------------------------------------------------------------


def test_rect_edges_and_center() -> None:
    r = Rect(10, 20, 100, 50)
    assert (r.left, r.top, r.right, r.bottom) == (10, 20, 110, 70)
    assert r.center == Point(60, 45)
    assert r.size == Size(100, 50)


def test_centered_rect() -> None:
    assert Rect.centered(Point(50, 50), Size(100, 60)) == Rect(0, 20, 100, 60)


def test_contains_includes_border() -> None:
    r = Rect(0, 0, 400, 300)
    assert r.contains(Point(0, 0))
    assert r.contains(Point(400, 300))
    assert not r.contains(Point(400.5, 10))
    assert not r.contains(Point(-1, 10))


@pytest.mark.parametrize(
    "other, expected",
    [
        (Rect(0, 0, 100, 100), 10000),
        (Rect(50, 0, 100, 100), 5000),
        (Rect(50, 50, 100, 100), 2500),
        (Rect(100, 0, 100, 100), 0),
        (Rect(300, 300, 10, 10), 0),
    ],
)
def test_intersection_area(other: Rect, expected: float) -> None:
    assert Rect(0, 0, 100, 100).intersection_area(other) == expected


@pytest.mark.parametrize(
    "rect, empty",
    [
        (Rect(0, 0, 0, 10), True),
        (Rect(0, 0, 10, 0), True),
        (Rect(0, 0, -5, 10), True),
        (Rect(0, 0, 1, 1), False),
    ],
)
def test_rect_emptiness(rect: Rect, empty: bool) -> None:
    assert rect.is_empty is empty
    assert rect.size.is_empty is empty


# -- pieces -------------------------------------------------------------------


@pytest.mark.parametrize(
    "current, degrees, expected",
    [
        (0, 90, 1),
        (3, 90, 0),
        (0, -80, 3),
        (1, 44, 1),
        (1, 46, 2),
        (2, -180, 0),
        (1, 720, 1),
    ],
)
def test_snap_rotation(current: int, degrees: float, expected: int) -> None:
    assert snap_rotation(current, degrees) == expected


@pytest.mark.parametrize(
    "rotation, valid",
    [(0, True), (3, True), (4, False), (-1, False), (1.0, False), (1.5, False), (True, False)],
)
def test_valid_rotation_is_an_int_quarter_turn(rotation: object, valid: bool) -> None:
    assert is_valid_rotation(rotation) is valid


def test_phase_follows_flags() -> None:
    state = PieceState(
        id="p", current_rotation=0, position=Point(0, 0), pile_position=Point(0, 0)
    )
    assert state.phase is PiecePhase.IN_PILE
    state.is_in_pile = False
    assert state.phase is PiecePhase.DRAGGING
    state.is_placed = True
    assert state.phase is PiecePhase.PLACED
