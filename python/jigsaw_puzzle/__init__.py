"""Single-image jigsaw puzzle game."""

__version__ = "0.1.0"
