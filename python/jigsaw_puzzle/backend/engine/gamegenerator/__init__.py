from jigsaw_puzzle.backend.engine.gamegenerator.generator import PuzzleFactory

__all__ = ["PuzzleFactory"]
