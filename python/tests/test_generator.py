"""Puzzle factory: building, loading and scrambling."""

from __future__ import annotations

import random
from pathlib import Path

import pytest
from PIL import Image

from jigsaw_puzzle.backend.engine.gamegenerator import PuzzleFactory
from jigsaw_puzzle.backend.errors import AssetError, PuzzleError
from jigsaw_puzzle.backend.models.geometry import Point
from jigsaw_puzzle.backend.models.puzzle import Puzzle
from jigsaw_puzzle.config import OFFSCREEN


# -- build --------------------------------------------------------------------


def test_build_binds_every_cell_once(puzzle: Puzzle) -> None:
    assert len(puzzle) == 12
    assert [p.cell for p in puzzle.pieces] == [(r, c) for r in range(3) for c in range(4)]
    assert len({p.id for p in puzzle.pieces}) == 12


def test_build_fixes_rotation_upright(puzzle: Puzzle) -> None:
    assert all(p.correct_rotation == 0 for p in puzzle.pieces)


def test_build_keeps_final_image(image: Image.Image, puzzle: Puzzle) -> None:
    assert puzzle.final_image is image
    assert puzzle.piece_at(1, 2).image.tobytes() == image.crop((200, 100, 300, 200)).tobytes()


def test_build_is_deterministic(image: Image.Image) -> None:
    a = PuzzleFactory.build(image, 3, 4)
    b = PuzzleFactory.build(image, 3, 4)
    assert [(p.id, p.cell, p.correct_rotation) for p in a.pieces] == [
        (p.id, p.cell, p.correct_rotation) for p in b.pieces
    ]


def test_lookup_by_id(puzzle: Puzzle) -> None:
    first = puzzle.pieces[0]
    assert puzzle.piece(first.id) is first
    assert puzzle.piece("missing") is None


def test_puzzle_rejects_missing_cell(puzzle: Puzzle) -> None:
    with pytest.raises(ValueError):
        Puzzle(
            final_image=puzzle.final_image,
            rows=3,
            columns=4,
            pieces=puzzle.pieces[:-1],
        )


# -- load ---------------------------------------------------------------------


def test_load_missing_file_fails_fast(tmp_path: Path) -> None:
    with pytest.raises(AssetError) as info:
        PuzzleFactory.load(tmp_path / "nope.png")
    assert isinstance(info.value, PuzzleError)
    assert isinstance(info.value.__cause__, FileNotFoundError)


def test_load_rejects_non_image(tmp_path: Path) -> None:
    path = tmp_path / "notes.png"
    path.write_text("not really a picture")
    with pytest.raises(AssetError):
        PuzzleFactory.load(path)


def test_from_file_round_trip(tmp_path: Path, make_image) -> None:
    path = tmp_path / "picture.png"
    make_image(120, 90).save(path)

    puzzle = PuzzleFactory.from_file(path)

    assert puzzle.final_image.mode == "RGBA"
    assert puzzle.final_image.size == (120, 90)
    assert (puzzle.rows, puzzle.columns) == (3, 4)


def test_bundled_asset_loads() -> None:
    import jigsaw_puzzle
    from jigsaw_puzzle.config import DEFAULT_IMAGE

    # the image lives inside the package so non-editable installs ship it
    assert DEFAULT_IMAGE.is_relative_to(Path(jigsaw_puzzle.__file__).resolve().parent)
    puzzle = PuzzleFactory.from_file(DEFAULT_IMAGE)
    assert len(puzzle) == 12


# -- scramble -----------------------------------------------------------------


def test_scramble_starts_off_screen(puzzle: Puzzle) -> None:
    states = PuzzleFactory.scramble(puzzle, random.Random(5))
    offscreen = Point(*OFFSCREEN)

    assert sorted(s.id for s in states) == sorted(p.id for p in puzzle.pieces)
    for s in states:
        assert 0 <= s.current_rotation <= 3
        assert s.position == offscreen
        assert s.pile_position == offscreen
        assert s.is_in_pile and not s.is_placed


def test_scramble_is_reproducible_with_seed(puzzle: Puzzle) -> None:
    a = PuzzleFactory.scramble(puzzle, random.Random(99))
    b = PuzzleFactory.scramble(puzzle, random.Random(99))
    assert [(s.id, s.current_rotation) for s in a] == [(s.id, s.current_rotation) for s in b]


def test_scramble_shuffles_pile_order(puzzle: Puzzle) -> None:
    in_order = [p.id for p in puzzle.pieces]
    orders = {
        tuple(s.id for s in PuzzleFactory.scramble(puzzle, random.Random(seed)))
        for seed in range(20)
    }
    assert len(orders) > 1
    assert any(list(order) != in_order for order in orders)
