"""
Static position evaluation for the alpha-beta search.

The score is from the maximizing player's point of view and combines:
1. Positional bias from the lowest disc of every column (center and odd rows favoured)
2. Window patterns: open threes, twos and ones, inspected with one end cell
   on each side of the window
3. A double-threat bonus when a player holds two or more live lines

Terminal positions (wins, full board) are handled by the search before this
is called.
"""

import numpy as np

from connect4_engine.config import ROWS, CENTER_COLUMN, EVAL_WEIGHTS
from connect4_engine.game.connect_four import EMPTY, other_player
from connect4_engine.game.windows import WINDOW_CELLS, WINDOW_ENDS, padded


def _positional_bias(state: np.ndarray, player: int, weights: dict) -> int:
    occupied = state != EMPTY
    columns = np.flatnonzero(occupied.any(axis=0))
    if columns.size == 0:
        return 0

    # Lowest occupied row of each non-empty column
    rows = ROWS - 1 - np.argmax(occupied[::-1, columns], axis=0)
    owners = state[rows, columns]

    bonus = np.where(columns == CENTER_COLUMN, weights['center_column'], weights['side_column'])
    bonus = bonus + np.where(rows % 2 == 1, weights['odd_row'], 0)
    sign = np.where(owners == player, 1, -1)

    return int((sign * bonus).sum())


def evaluate(state: np.ndarray, player: int, weights: dict = EVAL_WEIGHTS) -> int:
    """
    Heuristic score of a non-terminal board.

    Pure function of the board: calling it twice on the same state gives the
    same score.

    Args:
        state: Board state
        player: Maximizing player (1 or 2)
        weights: Scoring table (see config.EVAL_WEIGHTS)

    Returns:
        Score, positive when `player` stands better
    """
    opponent = other_player(player)
    board = padded(state)
    cells = board[WINDOW_CELLS]

    own = (cells == player).sum(axis=1)
    opp = (cells == opponent).sum(axis=1)
    empty = (cells == EMPTY).sum(axis=1)
    open_ends = (board[WINDOW_ENDS] == EMPTY).sum(axis=1)

    score = _positional_bias(state, player, weights)

    score += weights['own_three'] * np.count_nonzero((own == 3) & (empty == 1) & (open_ends >= 1))
    score += weights['opponent_three'] * np.count_nonzero((opp == 3) & (empty == 1) & (open_ends >= 1))
    score += weights['own_two'] * np.count_nonzero((own == 2) & (empty == 2) & (open_ends == 2))
    score += weights['opponent_two'] * np.count_nonzero((opp == 2) & (empty == 2) & (open_ends == 2))
    score += weights['own_one'] * np.count_nonzero((own == 1) & (empty == 3) & (open_ends == 2))
    score += weights['opponent_one'] * np.count_nonzero((opp == 1) & (empty == 3) & (open_ends == 2))

    # Two live lines at once are usually more than the opponent can stop
    if np.count_nonzero((own >= 2) & (empty >= 1) & (open_ends >= 1)) >= 2:
        score += weights['double_threat']
    if np.count_nonzero((opp >= 2) & (empty >= 1) & (open_ends >= 1)) >= 2:
        score -= weights['double_threat']

    return int(score)
