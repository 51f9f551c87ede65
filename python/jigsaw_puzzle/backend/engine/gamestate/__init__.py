from jigsaw_puzzle.backend.engine.gamestate.state import PuzzleState, StateEvent

__all__ = ["PuzzleState", "StateEvent"]
