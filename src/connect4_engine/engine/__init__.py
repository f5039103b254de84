"""
Move-selection engine for Connect Four.

Components:
- Threat detection for open three-in-a-rows
- Static position evaluation
- Zobrist hashing for fast position lookup
- Transposition table for caching search results
- History-ordered alpha-beta minimax with iterative deepening
- Move selection: tactical rules first, search otherwise
"""

from connect4_engine.engine.threats import find_open_threats, threat_columns
from connect4_engine.engine.evaluator import evaluate
from connect4_engine.engine.zobrist import ZobristHasher
from connect4_engine.engine.transposition_table import TranspositionTable, BoundType, TTEntry
from connect4_engine.engine.move_ordering import MoveOrdering
from connect4_engine.engine.alphabeta import (
    AlphaBetaEngine,
    SearchResult,
    SearchTimeout,
    SCORE_WIN,
    SCORE_LOSS,
    SCORE_DRAW,
    WIN_THRESHOLD,
)
from connect4_engine.engine.tactics import TrapPattern, KNOWN_TRAPS
from connect4_engine.engine.move_selector import MoveSelector, MoveDecision, MoveReason, select_move

__all__ = [
    'find_open_threats',
    'threat_columns',
    'evaluate',
    'ZobristHasher',
    'TranspositionTable',
    'BoundType',
    'TTEntry',
    'MoveOrdering',
    'AlphaBetaEngine',
    'SearchResult',
    'SearchTimeout',
    'SCORE_WIN',
    'SCORE_LOSS',
    'SCORE_DRAW',
    'WIN_THRESHOLD',
    'TrapPattern',
    'KNOWN_TRAPS',
    'MoveSelector',
    'MoveDecision',
    'MoveReason',
    'select_move',
]
