"""
Hand-recorded opening tactics.

Each trap is a literal position, written relative to the side to move, with
the replies to try in order. The library is a heuristic seed: only exact
matches fire, and alternate move orders are not analysed.
"""

from dataclasses import dataclass
from typing import Optional

import numpy as np

from connect4_engine.config import CENTER_COLUMN
from connect4_engine.game.connect_four import ConnectFour, other_player

SELF = 'self'
OPPONENT = 'opponent'


@dataclass(frozen=True)
class TrapPattern:
    """
    Attributes:
        name: Short label used in logs
        disc_count: Exact number of discs on the board
        cells: ((row, col), owner) pairs that must all match, owner is SELF or OPPONENT
        replies: Columns to play, first legal one wins
    """
    name: str
    disc_count: int
    cells: tuple
    replies: tuple

    def matches(self, game: ConnectFour, state: np.ndarray, mover: int) -> bool:
        if game.count_discs(state) != self.disc_count:
            return False
        owners = {SELF: mover, OPPONENT: other_player(mover)}
        return all(state[row, col] == owners[owner] for (row, col), owner in self.cells)


# Opponent holds two adjacent bottom cells under our disc. Unless one end of
# the bottom row is taken now, a third disc there leaves two open ends.
KNOWN_TRAPS = (
    TrapPattern(
        name='adjacent-stack',
        disc_count=3,
        cells=(((5, 2), OPPONENT), ((5, 3), OPPONENT), ((4, 3), SELF)),
        replies=(1, 4),
    ),
)


def opening_move(game: ConnectFour, state: np.ndarray) -> Optional[int]:
    """Center column on an empty board."""
    if game.count_discs(state) == 0 and game.is_legal_move(state, CENTER_COLUMN):
        return CENTER_COLUMN
    return None


def match_trap(game: ConnectFour, state: np.ndarray, mover: int) -> Optional[tuple[TrapPattern, int]]:
    """
    Find the first known trap matching the board.

    Returns:
        (pattern, column) or None. When none of the pattern's replies is
        legal the first legal column is returned.
    """
    for pattern in KNOWN_TRAPS:
        if not pattern.matches(game, state, mover):
            continue
        for column in pattern.replies:
            if game.is_legal_move(state, column):
                return pattern, column
        valid_moves = game.get_valid_moves(state)
        if valid_moves:
            return pattern, valid_moves[0]
    return None
