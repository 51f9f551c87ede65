"""The puzzle definition: final image plus one piece per grid cell."""

from __future__ import annotations

from dataclasses import dataclass, field

from PIL import Image

from jigsaw_puzzle.backend.models.piece import PieceDefinition


@dataclass(frozen=True)
class Puzzle:
    final_image: Image.Image
    rows: int
    columns: int
    pieces: tuple[PieceDefinition, ...]
    _by_id: dict[str, PieceDefinition] = field(
        init=False, repr=False, compare=False
    )

    def __post_init__(self) -> None:
        cells = {p.cell for p in self.pieces}
        expected = {(r, c) for r in range(self.rows) for c in range(self.columns)}
        if len(self.pieces) != len(expected) or cells != expected:
            raise ValueError(
                f"A {self.rows}×{self.columns} puzzle needs exactly one piece "
                f"per cell, got {len(self.pieces)} piece(s)."
            )
        object.__setattr__(self, "_by_id", {p.id: p for p in self.pieces})

    # -- queries --------------------------------------------------------------

    def piece(self, piece_id: str) -> PieceDefinition | None:
        return self._by_id.get(piece_id)

    def piece_at(self, row: int, column: int) -> PieceDefinition:
        return self.pieces[row * self.columns + column]

    def __len__(self) -> int:
        return len(self.pieces)
