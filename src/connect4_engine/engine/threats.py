"""
Open-threat detection.

An open threat is a window holding three discs of one player and a single
empty cell that can be played this turn: the gap is on the bottom row or
the cell beneath it is already occupied. A three-in-a-row whose gap is
still floating is not actionable and is ignored.
"""

import numpy as np

from connect4_engine.config import COLS
from connect4_engine.game.connect_four import EMPTY
from connect4_engine.game.windows import WINDOW_CELLS, CELL_BELOW, padded


def find_open_threats(state: np.ndarray, player: int) -> list[int]:
    """
    Find every immediately playable gap completing a line for `player`.

    Args:
        state: Board state
        player: Player owning the three-in-a-row (1 or 2)

    Returns:
        Gap columns, one per threatening window, in axis order. The same
        column can appear more than once when several windows share a gap.
    """
    board = padded(state)
    cells = board[WINDOW_CELLS]
    empty = cells == EMPTY

    candidates = ((cells == player).sum(axis=1) == 3) & (empty.sum(axis=1) == 1)
    gaps = WINDOW_CELLS[candidates][empty[candidates]]
    playable = board[CELL_BELOW[gaps]] != EMPTY

    return (gaps[playable] % COLS).tolist()


def threat_columns(state: np.ndarray, player: int) -> list[int]:
    """Distinct threat columns, in first-seen order."""
    return list(dict.fromkeys(find_open_threats(state, player)))
