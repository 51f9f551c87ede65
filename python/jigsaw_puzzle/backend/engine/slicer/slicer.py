"""Cuts a source image into a row-major grid of sub-images."""

from __future__ import annotations

from PIL import Image

Box = tuple[int, int, int, int]  # (left, upper, right, lower), Pillow crop order


def cell_boxes(width: int, height: int, rows: int, columns: int) -> list[Box]:
    """Return the pixel box of every grid cell in row-major order.

    Cell edges sit at ``floor(i * extent / count)`` so the boxes tile the
    image exactly: no gaps, no overlaps, and the remainder pixels are spread
    over the cells instead of piling up in the last row or column.
    """
    if rows <= 0 or columns <= 0:
        raise ValueError(
            f"rows and columns must be positive, got {rows}×{columns}."
        )
    if width <= 0 or height <= 0:
        raise ValueError(f"Cannot slice an empty {width}×{height} image.")
    if width < columns or height < rows:
        raise ValueError(
            f"A {width}×{height} image is too small for a {rows}×{columns} grid."
        )

    xs = [c * width // columns for c in range(columns + 1)]
    ys = [r * height // rows for r in range(rows + 1)]
    return [
        (xs[c], ys[r], xs[c + 1], ys[r + 1])
        for r in range(rows)
        for c in range(columns)
    ]


def slice_image(image: Image.Image, rows: int, columns: int) -> list[Image.Image]:
    """Cut *image* into ``rows * columns`` pieces, row-major.

    Raises ``ValueError`` for an image with no pixels or a non-positive grid.
    """
    width, height = image.size
    return [image.crop(box) for box in cell_boxes(width, height, rows, columns)]
