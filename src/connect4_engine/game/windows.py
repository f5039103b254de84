"""
Precomputed line windows for vectorised board scans.

A window is a run of WIN_LENGTH cells along one axis. Every window is stored
as flat cell indices into `padded(state)`, together with the two cells just
beyond its ends and the axis it lies on. Index OFF_BOARD points at a sentinel
cell that is never empty, so:

- an end cell outside the board never counts as an open end
- the cell "below" a bottom-row cell counts as occupied (bottom row is playable)

Windows are ordered by axis (horizontal, vertical, diagonal-down, diagonal-up)
and then by their starting cell, top-left first.
"""

import numpy as np

from connect4_engine.config import ROWS, COLS, WIN_LENGTH
from connect4_engine.game.connect_four import DIRECTIONS


OFF_BOARD = ROWS * COLS
OFF_BOARD_VALUE = 3


def _on_board(row: int, col: int) -> bool:
    return 0 <= row < ROWS and 0 <= col < COLS


def _flat(row: int, col: int) -> int:
    return row * COLS + col if _on_board(row, col) else OFF_BOARD


def _build_windows():
    cells, ends, axes = [], [], []
    for axis, (_, (dr, dc)) in enumerate(DIRECTIONS):
        for row in range(ROWS):
            for col in range(COLS):
                last_row = row + dr * (WIN_LENGTH - 1)
                last_col = col + dc * (WIN_LENGTH - 1)
                if not _on_board(last_row, last_col):
                    continue
                cells.append([_flat(row + dr * i, col + dc * i) for i in range(WIN_LENGTH)])
                ends.append([
                    _flat(row - dr, col - dc),
                    _flat(row + dr * WIN_LENGTH, col + dc * WIN_LENGTH),
                ])
                axes.append(axis)
    return (
        np.array(cells, dtype=np.intp),
        np.array(ends, dtype=np.intp),
        np.array(axes, dtype=np.intp),
    )


WINDOW_CELLS, WINDOW_ENDS, WINDOW_AXES = _build_windows()

# Flat index of the cell directly beneath each board cell
CELL_BELOW = np.array(
    [_flat(row + 1, col) for row in range(ROWS) for col in range(COLS)],
    dtype=np.intp,
)


def padded(state: np.ndarray) -> np.ndarray:
    """Flatten a board and append the off-board sentinel cell."""
    return np.append(state.ravel(), np.int8(OFF_BOARD_VALUE))
