"""Launcher: a missing picture stops the game before any window opens."""

from __future__ import annotations

from pathlib import Path

from typer.testing import CliRunner

from jigsaw_puzzle.main import app

runner = CliRunner()


def test_missing_image_exits_with_error(tmp_path: Path) -> None:
    result = runner.invoke(app, ["--image", str(tmp_path / "absent.png")])
    assert result.exit_code == 1


def test_unknown_frontend_is_rejected() -> None:
    result = runner.invoke(app, ["--frontend", "curses"])
    assert result.exit_code != 0
