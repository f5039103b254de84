from connect4_engine.config import EngineConfig
from connect4_engine.game import ConnectFour, IllegalMoveError
from connect4_engine.engine import AlphaBetaEngine, MoveSelector, MoveReason, select_move

__version__ = "0.1"

__all__ = [
    'EngineConfig',
    'ConnectFour',
    'IllegalMoveError',
    'AlphaBetaEngine',
    'MoveSelector',
    'MoveReason',
    'select_move',
]
