from jigsaw_puzzle.backend.engine.pilelayout.layout import PileLayout

__all__ = ["PileLayout"]
