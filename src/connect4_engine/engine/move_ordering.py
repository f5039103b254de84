"""
Move ordering for the alpha-beta root.

Good move ordering is critical for alpha-beta pruning efficiency: searching
the likely best column first produces earlier cutoffs. Root candidates are
sorted by descending score, where

    score = history weight + static bonus for the center column

The history table is only written at the root (ply 0), so interior nodes keep
plain left-to-right order.
"""

import numpy as np

from connect4_engine.config import COLS, CENTER_COLUMN, SEARCH_CONFIG


class MoveOrdering:
    """
    History heuristic and killer slots for one game session.

    Unlike a per-search table, the history weights persist from move to move
    and are only cleared by reset() when a new game starts.
    """

    def __init__(self, center_bonus: int = SEARCH_CONFIG['center_bonus']):
        self.center_bonus = center_bonus

        # History heuristic: [column] -> weight (incremented by depth^2)
        self.history = np.zeros(COLS, dtype=np.int64)

        # Killer slots: iterative-deepening depth -> best root column at that depth
        self.killer_moves: dict[int, int] = {}

    def reset(self):
        """Reset history and killers for a new game."""
        self.history.fill(0)
        self.killer_moves = {}

    def update_history(self, move: int, depth: int):
        """Credit the column that produced the best root result at `depth`."""
        self.history[move] += depth * depth

    def update_killer(self, move: int, depth: int):
        self.killer_moves[depth] = move

    def order_root_moves(self, valid_moves: list[int]) -> list[int]:
        """
        Sort legal root columns, best candidates first.

        The sort is stable, so ties keep left-to-right order.
        """
        def priority(move: int) -> int:
            bonus = self.center_bonus if move == CENTER_COLUMN else 0
            return int(self.history[move]) + bonus

        return sorted(valid_moves, key=priority, reverse=True)
