from connect4_engine.game.connect_four import (
    ConnectFour,
    IllegalMoveError,
    WinResult,
    other_player,
    EMPTY,
    PLAYER_ONE,
    PLAYER_TWO,
)

__all__ = [
    'ConnectFour',
    'IllegalMoveError',
    'WinResult',
    'other_player',
    'EMPTY',
    'PLAYER_ONE',
    'PLAYER_TWO',
]
