"""Builds the puzzle definition and the scrambled starting state."""

from __future__ import annotations

import logging
import random
from pathlib import Path

from PIL import Image, UnidentifiedImageError

from jigsaw_puzzle.backend.engine.slicer import slice_image
from jigsaw_puzzle.backend.errors import AssetError
from jigsaw_puzzle.backend.models.geometry import Point
from jigsaw_puzzle.backend.models.piece import (
    QUARTER_TURNS,
    PieceDefinition,
    PieceState,
)
from jigsaw_puzzle.backend.models.puzzle import Puzzle
from jigsaw_puzzle.config import COLUMNS, OFFSCREEN, ROWS

logger = logging.getLogger(__name__)


class PuzzleFactory:
    """Stateless factory; all methods are static."""

    @staticmethod
    def load(path: Path) -> Image.Image:
        """Read the puzzle image from *path*.

        Raises ``AssetError`` when the file is missing or not an image;
        the game cannot start without it.
        """
        try:
            with Image.open(path) as img:
                image = img.convert("RGBA")
        except FileNotFoundError as exc:
            raise AssetError(f"Puzzle image not found: {path}") from exc
        except (UnidentifiedImageError, OSError) as exc:
            raise AssetError(f"Cannot read puzzle image {path}: {exc}") from exc
        logger.info("Loaded puzzle image %s (%d×%d)", path, *image.size)
        return image

    @staticmethod
    def build(
        image: Image.Image, rows: int = ROWS, columns: int = COLUMNS
    ) -> Puzzle:
        """Slice *image* and bind each piece to its grid cell.

        Deterministic: the i-th slice (row-major) belongs at
        ``(i // columns, i % columns)`` and every piece is upright.
        """
        slices = slice_image(image, rows, columns)
        pieces = tuple(
            PieceDefinition(
                id=f"piece-{i // columns}-{i % columns}",
                image=piece_image,
                correct_row=i // columns,
                correct_column=i % columns,
                correct_rotation=0,
            )
            for i, piece_image in enumerate(slices)
        )
        logger.info("Built %d×%d puzzle with %d pieces", rows, columns, len(pieces))
        return Puzzle(final_image=image, rows=rows, columns=columns, pieces=pieces)

    @staticmethod
    def from_file(path: Path, rows: int = ROWS, columns: int = COLUMNS) -> Puzzle:
        return PuzzleFactory.build(PuzzleFactory.load(path), rows, columns)

    @staticmethod
    def scramble(puzzle: Puzzle, rng: random.Random) -> list[PieceState]:
        """Return fresh piece states in a shuffled pile order.

        Every piece gets a random starting rotation.  Positions stay off
        screen until the pile is laid out.
        """
        offscreen = Point(*OFFSCREEN)
        states = [
            PieceState(
                id=piece.id,
                current_rotation=rng.randrange(QUARTER_TURNS),
                position=offscreen,
                pile_position=offscreen,
            )
            for piece in puzzle.pieces
        ]
        rng.shuffle(states)
        return states
