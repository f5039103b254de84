"""
Zobrist hashing for Connect Four positions.

Zobrist hashing provides O(1) position lookup in transposition tables by
computing a near-unique hash for each board state. The hash can be updated
incrementally after each move, which the search does on the way down.

Implementation:
- Generate one random 64-bit key per (row, col, player) when a game starts
- Hash = XOR of all keys corresponding to occupied squares
- Incremental update: hash ^= key[row][col][player]
- An extra perspective key separates searches run for different players
"""

import numpy as np
from typing import Optional

from connect4_engine.config import ROWS, COLS
from connect4_engine.game.connect_four import PLAYER_ONE


class ZobristHasher:
    """
    Zobrist key table for one game session.

    Connect4 board: 6 rows x 7 columns x 2 players = 84 zobrist keys.
    Keys are held as Python ints so XOR stays exact and fast.
    """

    def __init__(self, seed: Optional[int] = None):
        """
        Args:
            seed: Random seed; None draws fresh keys for every session
        """
        self.row_count = ROWS
        self.column_count = COLS
        self.reseed(seed)

    def reseed(self, seed: Optional[int] = None):
        """Generate a new key table (start of a new game)."""
        rng = np.random.RandomState(seed)

        # [row][col][player_idx], player_idx = player - 1
        self.zobrist_table = rng.randint(
            0, 2**63 - 1,
            size=(self.row_count, self.column_count, 2),
            dtype=np.uint64
        ).tolist()

        # XORed in when player one is the maximizing side
        self.perspective_hash = int(rng.randint(0, 2**63 - 1, dtype=np.uint64))

    def hash_position(self, state: np.ndarray, maximizer: Optional[int] = None) -> int:
        """
        Compute the Zobrist hash of a board from scratch.

        Args:
            state: Board state (rows, cols) with values in {0, 1, 2}
            maximizer: Player the search scores for; None hashes pieces only

        Returns:
            64-bit hash value (int)
        """
        hash_value = 0
        for row, col in zip(*np.nonzero(state)):
            hash_value ^= self.zobrist_table[row][col][state[row, col] - 1]

        if maximizer == PLAYER_ONE:
            hash_value ^= self.perspective_hash

        return hash_value

    def incremental_hash(self, current_hash: int, row: int, col: int, player: int) -> int:
        """
        Hash after placing (or removing) one disc.

        XOR is its own inverse, so the same call undoes a placement.
        """
        return current_hash ^ self.zobrist_table[row][col][player - 1]
