"""
Move selection for the computer player.

Tactical rules are tried first, in order, and the alpha-beta search runs
only if none of them applies:

1. No legal column              -> draw, no move
2. Immediate win                -> take it
3. Empty board                  -> center column
4. Known opening trap           -> recorded reply
5. Opponent open threats        -> block a single threat, concede against two or more
6. Iterative-deepening search   -> recommended column
7. Anything illegal or missing  -> first legal column
"""

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Optional

import numpy as np

from connect4_engine.config import EngineConfig
from connect4_engine.game.connect_four import ConnectFour, PLAYERS, other_player
from connect4_engine.engine.alphabeta import AlphaBetaEngine, SearchResult
from connect4_engine.engine.tactics import opening_move, match_trap
from connect4_engine.engine.threats import threat_columns


logger = logging.getLogger(__name__)


class MoveReason(Enum):
    """Which rule produced a move decision."""
    DRAW = 'draw'           # Board full, no move
    WIN = 'win'             # Immediate four in a row
    OPENING = 'opening'     # First move of the game
    TRAP = 'trap'           # Known opening trap
    BLOCK = 'block'         # Blocked the opponent's only open threat
    CONCEDE = 'concede'     # Two or more open threats, position lost
    SEARCH = 'search'       # Alpha-beta recommendation
    FALLBACK = 'fallback'   # Search gave nothing usable


@dataclass
class MoveDecision:
    column: Optional[int]
    reason: MoveReason
    search_result: Optional[SearchResult] = None


class MoveSelector:
    """
    Computer player for one game session.

    Owns an AlphaBetaEngine, so transposition and history tables carry over
    from move to move until new_game() is called.
    """

    def __init__(self, engine: Optional[AlphaBetaEngine] = None, config: Optional[EngineConfig] = None):
        self.engine = engine or AlphaBetaEngine(config=config)
        self.game = self.engine.game

    def new_game(self, seed: Optional[int] = None):
        self.engine.new_game(seed)

    def decide(self, board, mover: int) -> MoveDecision:
        """
        Choose a column for `mover`.

        Args:
            board: 6x7 grid of {0, 1, 2}, row 0 at the top
            mover: Side to move (1 or 2), the computer

        Returns:
            MoveDecision; column is None only when the board is full

        Raises:
            ValueError: malformed board or mover
        """
        state = self._prepare(board, mover)

        decision = self._tactical_decision(state, mover)
        if decision is None:
            result = self.engine.search(state, mover)
            decision = self._search_decision(state, result)

        self._log(decision, mover)
        return decision

    async def decide_async(self, board, mover: int) -> MoveDecision:
        """Awaitable decide(); the search cedes to the event loop between depths."""
        state = self._prepare(board, mover)

        decision = self._tactical_decision(state, mover)
        if decision is None:
            result = await self.engine.search_async(state, mover)
            decision = self._search_decision(state, result)

        self._log(decision, mover)
        return decision

    def select_move(self, board, mover: int) -> Optional[int]:
        """Column to play, or None when the board is full (draw)."""
        return self.decide(board, mover).column

    async def select_move_async(self, board, mover: int) -> Optional[int]:
        return (await self.decide_async(board, mover)).column

    def _prepare(self, board, mover: int) -> np.ndarray:
        if mover not in PLAYERS:
            raise ValueError(f"Mover must be 1 or 2, got {mover!r}")
        return self.game.from_grid(board)

    def _tactical_decision(self, state: np.ndarray, mover: int) -> Optional[MoveDecision]:
        game = self.game
        valid_moves = game.get_valid_moves(state)
        if not valid_moves:
            return MoveDecision(None, MoveReason.DRAW)

        wins = game.winning_moves(state, mover)
        if wins:
            return MoveDecision(wins[0], MoveReason.WIN)

        column = opening_move(game, state)
        if column is not None:
            return MoveDecision(column, MoveReason.OPENING)

        trap = match_trap(game, state, mover)
        if trap is not None:
            pattern, column = trap
            logger.debug("Matched trap %s", pattern.name)
            return MoveDecision(column, MoveReason.TRAP)

        opponent = other_player(mover)
        threats = threat_columns(state, opponent)

        if len(threats) == 1:
            column = threats[0]
            after_block = game.apply_move(state, column, mover)
            if not game.winning_moves(after_block, opponent):
                return MoveDecision(column, MoveReason.BLOCK)
            logger.debug("Blocking column %d opens the cell above, searching instead", column)

        elif len(threats) >= 2:
            for column in valid_moves:
                after = game.apply_move(state, column, mover)
                if not game.winning_moves(after, opponent):
                    return MoveDecision(column, MoveReason.CONCEDE)
            return MoveDecision(valid_moves[0], MoveReason.CONCEDE)

        return None

    def _search_decision(self, state: np.ndarray, result: SearchResult) -> MoveDecision:
        column = result.best_move
        # Depth 0 means no pass finished and best_move is the engine's own fallback
        if column is None or result.depth_reached == 0 or not self.game.is_legal_move(state, column):
            return MoveDecision(self.game.get_valid_moves(state)[0], MoveReason.FALLBACK, result)
        if result.kept_shallower_move:
            logger.debug(
                "Depth %d preferred column %d (score %d), keeping column %d",
                result.depth_reached, result.last_pass_move, result.last_pass_score, column
            )
        return MoveDecision(column, MoveReason.SEARCH, result)

    def _log(self, decision: MoveDecision, mover: int):
        if decision.search_result is not None:
            result = decision.search_result
            logger.info(
                "Player %d plays column %s (%s, depth %d, score %d, %d nodes, %d ms)",
                mover, decision.column, decision.reason.value, result.depth_reached,
                result.score, result.nodes_searched, result.time_ms
            )
        else:
            logger.info("Player %d plays column %s (%s)", mover, decision.column, decision.reason.value)


def select_move(board, mover: int, selector: Optional[MoveSelector] = None) -> Optional[int]:
    """
    Choose a column for `mover` on `board`.

    Without a selector a fresh one is built for this call, so no cache
    survives between calls. Pass a MoveSelector to keep tables for a game.

    Returns:
        Column index 0-6, or None when the board is full
    """
    selector = selector or MoveSelector()
    return selector.select_move(board, mover)
