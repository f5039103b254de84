import numpy as np
from dataclasses import dataclass, field
from typing import Iterable, Optional

from connect4_engine.config import ROWS, COLS, WIN_LENGTH


EMPTY = 0
PLAYER_ONE = 1
PLAYER_TWO = 2
PLAYERS = (PLAYER_ONE, PLAYER_TWO)

# (label, (row step, col step)); rows are indexed from the top
DIRECTIONS = (
    ('horizontal', (0, 1)),
    ('vertical', (1, 0)),
    ('diagonal-down', (1, 1)),
    ('diagonal-up', (-1, 1)),
)


class IllegalMoveError(ValueError):
    """Raised when a disc is dropped into a full or non-existent column."""


@dataclass(frozen=True)
class WinResult:
    """Outcome of a win check around the last placed disc."""
    won: bool
    cells: list[tuple[int, int]] = field(default_factory=list)
    direction: Optional[str] = None


def other_player(player: int) -> int:
    return PLAYER_TWO if player == PLAYER_ONE else PLAYER_ONE


def _freeze(state: np.ndarray) -> np.ndarray:
    state.flags.writeable = False
    return state


class ConnectFour:
    """
    Connect Four board model.

    Board: 6 rows x 7 columns, row 0 is the TOP of the board
    Cells: 0 = empty, 1 = player one, 2 = player two
    Actions: Column index (0-6) - disc drops to lowest empty row

    States are read-only numpy arrays. Every move produces a new snapshot,
    so search branches never alias each other's boards.
    """

    def __init__(self):
        self.row_count = ROWS
        self.column_count = COLS
        self.win_length = WIN_LENGTH

    def __repr__(self):
        return f"ConnectFour({self.row_count}x{self.column_count}, win={self.win_length})"

    def get_initial_state(self) -> np.ndarray:
        return _freeze(np.zeros((self.row_count, self.column_count), dtype=np.int8))

    def from_grid(self, grid) -> np.ndarray:
        """
        Build a board snapshot from any 6x7 grid-like object.

        Raises:
            ValueError: wrong shape, unknown cell values or floating discs
        """
        state = np.array(grid, dtype=np.int8)
        if state.shape != (self.row_count, self.column_count):
            raise ValueError(
                f"Board must be {self.row_count}x{self.column_count}, got {state.shape}"
            )
        if not np.isin(state, (EMPTY,) + PLAYERS).all():
            raise ValueError("Board cells must be 0, 1 or 2")

        # Gravity: once a column has an empty cell, everything above it is empty
        occupied = state != EMPTY
        floating = occupied[:-1] & ~occupied[1:]
        if floating.any():
            row, col = np.argwhere(floating)[0]
            raise ValueError(f"Floating disc at row {row}, column {col}")

        return _freeze(state)

    def from_moves(self, columns: Iterable[int], first_player: int = PLAYER_ONE) -> np.ndarray:
        """Replay alternating moves from an empty board."""
        state = self.get_initial_state()
        player = first_player
        for col in columns:
            state = self.apply_move(state, col, player)
            player = other_player(player)
        return state

    def lowest_empty_row(self, state: np.ndarray, column: int) -> Optional[int]:
        """
        Row where a disc dropped in `column` would land.

        Returns:
            Row index, or None if the column is full or out of range
        """
        if column < 0 or column >= self.column_count:
            return None
        for row in range(self.row_count - 1, -1, -1):
            if state[row, column] == EMPTY:
                return row
        return None

    def is_legal_move(self, state: np.ndarray, column: int) -> bool:
        return self.lowest_empty_row(state, column) is not None

    def get_valid_moves(self, state: np.ndarray) -> list[int]:
        """Legal columns, left to right (a column is legal if its top cell is empty)."""
        return np.flatnonzero(state[0] == EMPTY).tolist()

    def apply_move(self, state: np.ndarray, column: int, player: int) -> np.ndarray:
        """
        Drop a disc for `player` into `column`.

        Returns:
            New state with the disc placed; `state` itself is left untouched

        Raises:
            IllegalMoveError: column full or out of range
        """
        row = self.lowest_empty_row(state, column)
        if row is None:
            raise IllegalMoveError(f"Column {column} is not playable")

        next_state = state.copy()
        next_state[row, column] = player
        return _freeze(next_state)

    def check_win(self, state: np.ndarray, last_move: tuple[int, int]) -> WinResult:
        """
        Check whether the disc at `last_move` completes a line of four.

        Walks outward from the seed cell in both senses of every axis and
        reports the first axis that collects `win_length` same-player cells.

        Args:
            state: Board state
            last_move: (row, col) of the disc that was just placed

        Returns:
            WinResult with the connected cells and the direction label
        """
        row, column = last_move
        player = state[row, column]
        if player == EMPTY:
            return WinResult(False)

        for direction, (dr, dc) in DIRECTIONS:
            cells = [(row, column)]
            for sign in (-1, 1):
                r, c = row + sign * dr, column + sign * dc
                while (0 <= r < self.row_count and 0 <= c < self.column_count
                       and state[r, c] == player):
                    cells.append((r, c))
                    r += sign * dr
                    c += sign * dc
            if len(cells) >= self.win_length:
                return WinResult(True, cells, direction)

        return WinResult(False)

    def is_full(self, state: np.ndarray) -> bool:
        # Gravity guarantees a full top row means a full board
        return bool((state[0] != EMPTY).all())

    def winning_moves(self, state: np.ndarray, player: int) -> list[int]:
        """Columns where `player` would complete four in a row right now."""
        wins = []
        for column in self.get_valid_moves(state):
            row = self.lowest_empty_row(state, column)
            next_state = self.apply_move(state, column, player)
            if self.check_win(next_state, (row, column)).won:
                wins.append(column)
        return wins

    def count_discs(self, state: np.ndarray) -> int:
        return int(np.count_nonzero(state))
