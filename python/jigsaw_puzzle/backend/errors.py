"""Exceptions raised by the puzzle backend."""

from __future__ import annotations


class PuzzleError(Exception):
    """Base class for all puzzle errors."""


class AssetError(PuzzleError):
    """The puzzle image could not be loaded.

    Fatal at startup: without its image the game cannot build a puzzle.
    """
