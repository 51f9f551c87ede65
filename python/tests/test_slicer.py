"""Image slicer: the grid cells must partition the source image exactly."""

from __future__ import annotations

import pytest
from PIL import Image

from jigsaw_puzzle.backend.engine.slicer import cell_boxes, slice_image

_SHAPES = [(3, 4), (1, 1), (2, 5), (4, 3), (7, 7)]
_SIZES = [(400, 300), (401, 299), (37, 23)]


# -- helpers ------------------------------------------------------------------


def _coverage(width: int, height: int, rows: int, columns: int) -> list[list[int]]:
    """How many cell boxes cover each pixel."""
    counts = [[0] * width for _ in range(height)]
    for left, upper, right, lower in cell_boxes(width, height, rows, columns):
        for y in range(upper, lower):
            for x in range(left, right):
                counts[y][x] += 1
    return counts


# -- tests --------------------------------------------------------------------


@pytest.mark.parametrize("size", _SIZES, ids=lambda s: f"{s[0]}x{s[1]}")
@pytest.mark.parametrize("shape", _SHAPES, ids=lambda s: f"{s[0]}x{s[1]}")
def test_cells_partition_the_image(shape: tuple[int, int], size: tuple[int, int]) -> None:
    rows, columns = shape
    width, height = size
    counts = _coverage(width, height, rows, columns)
    assert all(c == 1 for row in counts for c in row), "gap or overlap in the grid"


@pytest.mark.parametrize("shape", _SHAPES, ids=lambda s: f"{s[0]}x{s[1]}")
def test_reassembly_reproduces_the_image(shape: tuple[int, int], make_image) -> None:
    rows, columns = shape
    source = make_image(401, 299)
    pieces = slice_image(source, rows, columns)
    boxes = cell_boxes(*source.size, rows, columns)

    canvas = Image.new("RGB", source.size)
    for piece, (left, upper, _, _) in zip(pieces, boxes):
        canvas.paste(piece, (left, upper))

    assert canvas.tobytes() == source.tobytes()


def test_pieces_come_out_row_major(make_image) -> None:
    source = make_image(400, 300)
    pieces = slice_image(source, 3, 4)

    assert len(pieces) == 12
    for i, piece in enumerate(pieces):
        row, col = divmod(i, 4)
        # top-left pixel encodes its source coordinates
        assert piece.getpixel((0, 0)) == source.getpixel((col * 100, row * 100))
        assert piece.size == (100, 100)


def test_remainder_pixels_are_spread_evenly() -> None:
    boxes = cell_boxes(403, 302, 3, 4)
    widths = {right - left for left, _, right, _ in boxes}
    heights = {lower - upper for _, upper, _, lower in boxes}
    assert max(widths) - min(widths) <= 1
    assert max(heights) - min(heights) <= 1


@pytest.mark.parametrize(
    "width, height, rows, columns",
    [
        (0, 300, 3, 4),
        (400, 0, 3, 4),
        (400, 300, 0, 4),
        (400, 300, 3, -1),
        (3, 300, 3, 4),
    ],
)
def test_invalid_geometry_is_rejected(width: int, height: int, rows: int, columns: int) -> None:
    with pytest.raises(ValueError):
        cell_boxes(width, height, rows, columns)


def test_image_too_small_for_grid(make_image) -> None:
    with pytest.raises(ValueError):
        slice_image(make_image(3, 2), 3, 4)
