"""Shared fixtures: a synthetic picture and a game laid out on a 400×300 board.

With the canvas at (0, 0, 400, 300) every cell is exactly 100×100, which
keeps the overlap arithmetic in the tests exact.
"""

from __future__ import annotations

import random
from collections.abc import Callable

import pytest
from PIL import Image

from jigsaw_puzzle.backend.engine.gamegenerator import PuzzleFactory
from jigsaw_puzzle.backend.engine.gameplay import PuzzleGame
from jigsaw_puzzle.backend.models.geometry import Rect
from jigsaw_puzzle.backend.models.puzzle import Puzzle

CANVAS = Rect(0, 0, 400, 300)
PILE = Rect(500, 0, 150, 2000)


def _make_image(width: int, height: int) -> Image.Image:
    """An RGB image whose every pixel encodes its own coordinates."""
    img = Image.new("RGB", (width, height))
    img.putdata(
        [(x % 256, y % 256, (x // 256) * 16 + y // 256) for y in range(height) for x in range(width)]
    )
    return img


@pytest.fixture
def make_image() -> Callable[[int, int], Image.Image]:
    return _make_image


@pytest.fixture
def image() -> Image.Image:
    return _make_image(400, 300)


@pytest.fixture
def puzzle(image: Image.Image) -> Puzzle:
    return PuzzleFactory.build(image, 3, 4)


@pytest.fixture
def game(puzzle: Puzzle) -> PuzzleGame:
    g = PuzzleGame(puzzle, rng=random.Random(1234))
    g.set_canvas_area(CANVAS)
    g.set_pile_area(PILE)
    g.flush_layout()
    return g
