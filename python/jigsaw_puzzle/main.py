"""Jigsaw Puzzle Game.

Usage::

    jigsaw-puzzle                     # Pygame GUI with the bundled image
    jigsaw-puzzle -f pyqt             # PyQt6 GUI
    jigsaw-puzzle --image photo.png   # play with another picture
    jigsaw-puzzle --seed 7 -l debug   # reproducible scramble, verbose log
"""

from __future__ import annotations

import importlib
import logging
from enum import StrEnum
from pathlib import Path
from typing import Optional

import typer
from rich.console import Console
from rich.logging import RichHandler

from jigsaw_puzzle.backend.engine.gamegenerator import PuzzleFactory
from jigsaw_puzzle.backend.errors import AssetError
from jigsaw_puzzle.config import DEFAULT_IMAGE

logger = logging.getLogger("jigsaw_puzzle")
console = Console(stderr=True)


# -- frontend registry -------------------------------------------------------


class Frontend(StrEnum):
    pygame = "pygame"
    pyqt = "pyqt"


class LogLevel(StrEnum):
    debug = "debug"
    info = "info"
    warning = "warning"
    error = "error"


_RUNNERS = {
    Frontend.pygame: "jigsaw_puzzle.frontend.gui.pygame.app",
    Frontend.pyqt: "jigsaw_puzzle.frontend.gui.pyqt.app",
}


# -- helpers ------------------------------------------------------------------


def _configure_logging(level: LogLevel) -> None:
    logging.basicConfig(
        level=level.upper(),
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=console, rich_tracebacks=True)],
    )


# -- CLI entry point ----------------------------------------------------------

app = typer.Typer(add_completion=False)


@app.command()
def main(
    frontend: Frontend = typer.Option(
        Frontend.pygame, "-f", "--frontend",
        help="GUI toolkit to launch.",
    ),
    image: Path = typer.Option(
        DEFAULT_IMAGE, "-i", "--image",
        help="Picture to cut into the 3×4 puzzle.",
    ),
    seed: Optional[int] = typer.Option(
        None, "--seed",
        help="Seed for the starting rotations and pile order.",
    ),
    log_level: LogLevel = typer.Option(
        LogLevel.warning, "-l", "--log-level",
        help="Logging verbosity.",
    ),
) -> None:
    """Jigsaw Puzzle Game."""
    _configure_logging(log_level)

    try:
        puzzle = PuzzleFactory.from_file(image)
    except AssetError as exc:
        console.print(f"[bold red]error:[/] {exc}")
        raise typer.Exit(code=1) from exc

    mod = importlib.import_module(_RUNNERS[frontend])
    logger.info("Launching %s frontend", frontend.value)
    mod.run(puzzle=puzzle, seed=seed)


if __name__ == "__main__":
    app()
