from jigsaw_puzzle.backend.engine.gameplay.game import PuzzleGame

__all__ = ["PuzzleGame"]
