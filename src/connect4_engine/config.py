"""
Configuration for the Connect Four move-selection engine.
"""

from dataclasses import dataclass, replace
from typing import Optional


# Board geometry (the engine only supports the standard 6x7 / 4-in-a-row game)
ROWS = 6
COLS = 7
WIN_LENGTH = 4
CENTER_COLUMN = COLS // 2

# Search Configuration
SEARCH_CONFIG = {
    'time_limit_ms': 1500,              # Soft budget, checked between depths
    'hard_time_limit_ms': 3000,         # Abort a running depth pass after this
    'max_depth': 12,                    # Iterative deepening cap
    'tt_size_mb': 16,                   # Transposition table size
    'center_bonus': 100,                # Static root-ordering bonus for the center column
    'node_check_interval': 1024,        # Nodes between hard-deadline checks
}

# Evaluation weights
# Relative ordering matters more than magnitudes:
# block > double threat > open three > open two > open one
EVAL_WEIGHTS = {
    'center_column': 100,               # Lowest disc in the center column
    'side_column': 50,                  # Lowest disc in any other column
    'odd_row': 50,                      # Extra when that disc sits on an odd row
    'own_three': 1000,
    'opponent_three': -10000,           # ~10x the attack weight: opponent moves next
    'own_two': 200,
    'opponent_two': -200,
    'own_one': 50,
    'opponent_one': -50,
    'double_threat': 5000,
}

# Depth caps per difficulty level
DIFFICULTY_DEPTHS = {
    'easy': 3,
    'medium': 5,
    'hard': 7,
    'expert': SEARCH_CONFIG['max_depth'],
}


@dataclass
class EngineConfig:
    time_limit_ms: Optional[int] = SEARCH_CONFIG['time_limit_ms']
    hard_time_limit_ms: Optional[int] = SEARCH_CONFIG['hard_time_limit_ms']
    max_depth: int = SEARCH_CONFIG['max_depth']
    tt_size_mb: int = SEARCH_CONFIG['tt_size_mb']
    center_bonus: int = SEARCH_CONFIG['center_bonus']
    node_check_interval: int = SEARCH_CONFIG['node_check_interval']
    seed: Optional[int] = None

    @classmethod
    def for_difficulty(cls, level: str, **overrides) -> 'EngineConfig':
        """
        Build a config whose depth cap matches a named difficulty level.

        Args:
            level: One of DIFFICULTY_DEPTHS ('easy', 'medium', 'hard', 'expert')
            **overrides: Any other EngineConfig field

        Returns:
            EngineConfig
        """
        try:
            depth = DIFFICULTY_DEPTHS[level.lower()]
        except KeyError:
            raise ValueError(
                f"Unknown difficulty {level!r}, expected one of {sorted(DIFFICULTY_DEPTHS)}"
            ) from None
        return replace(cls(), max_depth=depth, **overrides)
