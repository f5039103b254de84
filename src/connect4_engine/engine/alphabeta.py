"""
Alpha-beta minimax search engine for Connect Four.

Key features:
- Minimax from the computer's (maximizing player's) point of view
- Alpha-beta pruning (cut branches that can't affect the final result)
- Iterative deepening (search depth 1, then 2, then 3... until time expires)
- Transposition table with bound types, keyed by incremental Zobrist hashes
- History-ordered root moves
- Time management: a soft budget checked between depths and a hard deadline
  that abandons a running pass

Algorithm overview:

    def minimax(state, depth, maximizing, alpha, beta, ply):
        if last move won:
            return +WIN - ply if the maximizer won else -WIN + ply
        if board full:
            return 0
        if depth == 0:
            return evaluate(state)

        if (cached := tt.probe(state, depth, alpha, beta)) is not None:
            return cached

        for move in legal_moves:
            score = minimax(play(state, move), depth-1, not maximizing, alpha, beta, ply+1)
            update best / alpha (max) or beta (min)
            if beta <= alpha:
                break

        tt.store(state, depth, best, bound_type)
        return best

Win scores are large *finite* sentinels so that the ply offset survives:
a win in 1 scores higher than a win in 3, and a loss in 5 higher than a
loss in 2.
"""

import asyncio
import logging
import time
from dataclasses import dataclass, field
from typing import Iterator, Optional

import numpy as np

from connect4_engine.config import EngineConfig, ROWS, COLS
from connect4_engine.game.connect_four import ConnectFour, other_player
from connect4_engine.engine.evaluator import evaluate
from connect4_engine.engine.move_ordering import MoveOrdering
from connect4_engine.engine.transposition_table import TranspositionTable, BoundType
from connect4_engine.engine.zobrist import ZobristHasher


logger = logging.getLogger(__name__)


# Sentinel values for win/loss/draw
SCORE_WIN = 10_000_000
SCORE_LOSS = -SCORE_WIN
SCORE_DRAW = 0
SCORE_INF = 100_000_000

# Any score beyond this is a forced result (no game lasts more than 42 plies)
WIN_THRESHOLD = SCORE_WIN - ROWS * COLS


class SearchTimeout(Exception):
    """Raised inside a depth pass when the hard deadline has passed."""


@dataclass
class SearchResult:
    """Result of an iterative-deepening search."""
    best_move: Optional[int]
    score: int
    depth_reached: int
    nodes_searched: int
    time_ms: int
    tt_stats: dict = field(default_factory=dict)

    # Outcome of the deepest completed pass, which may differ from best_move
    last_pass_move: Optional[int] = None
    last_pass_score: Optional[int] = None

    @property
    def kept_shallower_move(self) -> bool:
        """True when the deepest pass preferred another column but scored lower."""
        return self.last_pass_move is not None and self.last_pass_move != self.best_move

    @property
    def is_forced_win(self) -> bool:
        return self.score >= WIN_THRESHOLD

    @property
    def is_forced_loss(self) -> bool:
        return self.score <= -WIN_THRESHOLD


def _score_to_tt(score: int, ply: int) -> int:
    # Store forced results as distance from this node, not from the root
    if score >= WIN_THRESHOLD:
        return score + ply
    if score <= -WIN_THRESHOLD:
        return score - ply
    return score


def _score_from_tt(score: int, ply: int) -> int:
    if score >= WIN_THRESHOLD:
        return score - ply
    if score <= -WIN_THRESHOLD:
        return score + ply
    return score


class AlphaBetaEngine:
    """
    Alpha-beta search engine with iterative deepening.

    One engine serves one game session. It owns the Zobrist keys, the
    transposition table and the history table; nothing is shared between
    engines, so concurrent games never corrupt each other's caches. Only
    one search may run on an engine at a time.
    """

    def __init__(self, game: Optional[ConnectFour] = None, config: Optional[EngineConfig] = None):
        self.game = game or ConnectFour()
        self.config = config or EngineConfig()

        self.zobrist = ZobristHasher(seed=self.config.seed)
        self.tt = TranspositionTable(size_mb=self.config.tt_size_mb)
        self.move_ordering = MoveOrdering(center_bonus=self.config.center_bonus)

        # Search state
        self.nodes_searched = 0
        self.start_time = 0.0
        self.time_limit_ms: Optional[int] = None
        self.hard_time_limit_ms: Optional[int] = None
        self._maximizer = None

    def new_game(self, seed: Optional[int] = None):
        """Fresh Zobrist keys, empty transposition table and history."""
        self.zobrist.reseed(seed if seed is not None else self.config.seed)
        self.tt.clear()
        self.move_ordering.reset()

    def search(
        self,
        state: np.ndarray,
        player: int,
        time_limit_ms: Optional[int] = None,
        max_depth: Optional[int] = None
    ) -> SearchResult:
        """
        Run iterative deepening to completion and return the best column.

        Args:
            state: Current board state
            player: Player to move, searched as the maximizing side
            time_limit_ms: Soft budget override (None uses the config, 0 disables)
            max_depth: Depth cap override

        Returns:
            SearchResult; best_move is None only when no column is legal
        """
        result = None
        for result in self.iterate(state, player, time_limit_ms, max_depth):
            pass
        return result if result is not None else self._fallback_result(state)

    async def search_async(
        self,
        state: np.ndarray,
        player: int,
        time_limit_ms: Optional[int] = None,
        max_depth: Optional[int] = None
    ) -> SearchResult:
        """
        Awaitable search that yields to the event loop between depths.

        Cancelling the awaiting task stops the search at the next depth boundary.
        """
        result = None
        for result in self.iterate(state, player, time_limit_ms, max_depth):
            await asyncio.sleep(0)
        return result if result is not None else self._fallback_result(state)

    def iterate(
        self,
        state: np.ndarray,
        player: int,
        time_limit_ms: Optional[int] = None,
        max_depth: Optional[int] = None
    ) -> Iterator[SearchResult]:
        """
        Iterative-deepening driver.

        Yields the running best after every completed depth. A depth's
        result replaces the running best only if it scores higher.

        Stops when:
        - the soft time budget has elapsed at a depth boundary
        - the depth cap is exceeded
        - the running best is a forced win
        - the hard deadline aborts a pass (that pass is discarded)
        """
        self.start_time = time.perf_counter()
        self.time_limit_ms = self.config.time_limit_ms if time_limit_ms is None else time_limit_ms
        self.hard_time_limit_ms = self.config.hard_time_limit_ms
        self.nodes_searched = 0
        self._maximizer = player
        self.tt.new_search()

        effective_max_depth = max_depth if max_depth is not None else self.config.max_depth

        if not self.game.get_valid_moves(state):
            return

        root_hash = self.zobrist.hash_position(state, player)
        best_move = None
        best_score = -SCORE_INF

        for depth in range(1, effective_max_depth + 1):
            if depth > 1 and self._time_up():
                break

            try:
                score, move = self._search_root(state, root_hash, depth)
            except SearchTimeout:
                logger.debug("Depth %d abandoned after %d nodes", depth, self.nodes_searched)
                break

            # A deeper pass only wins by scoring higher. If it proves the running
            # best loses, that move is still kept; last_pass_* exposes the gap.
            if score > best_score:
                best_score = score
                best_move = move

            logger.debug(
                "depth=%d move=%d score=%d best=%d nodes=%d",
                depth, move, score, best_move, self.nodes_searched
            )
            result = self._result(best_move, best_score, depth)
            result.last_pass_move = move
            result.last_pass_score = score
            yield result

            if best_score >= WIN_THRESHOLD:
                break

    def _search_root(self, state: np.ndarray, root_hash: int, depth: int) -> tuple[int, int]:
        """
        Root node (ply 0): the only place that updates history and killers.

        Returns:
            (score, best_move)
        """
        maximizer = self._maximizer
        ordered_moves = self.move_ordering.order_root_moves(self.game.get_valid_moves(state))

        best_score = -SCORE_INF
        best_move = ordered_moves[0]
        alpha = -SCORE_INF
        beta = SCORE_INF

        for move in ordered_moves:
            row = self.game.lowest_empty_row(state, move)
            next_state = self.game.apply_move(state, move, maximizer)
            next_hash = self.zobrist.incremental_hash(root_hash, row, move, maximizer)

            score = self._minimax(
                next_state, next_hash, (row, move), depth - 1,
                maximizing=False, alpha=alpha, beta=beta, ply=1
            )

            if score > best_score:
                best_score = score
                best_move = move
            alpha = max(alpha, score)

        self.move_ordering.update_history(best_move, depth)
        self.move_ordering.update_killer(best_move, depth)

        return best_score, best_move

    def _minimax(
        self,
        state: np.ndarray,
        state_hash: int,
        last_move: tuple[int, int],
        depth: int,
        maximizing: bool,
        alpha: int,
        beta: int,
        ply: int
    ) -> int:
        """
        Alpha-beta minimax below the root.

        Args:
            state: Board state after `last_move`
            state_hash: Zobrist hash of `state` (perspective included)
            last_move: (row, col) of the disc just placed
            depth: Remaining depth
            maximizing: True if the maximizer is to move
            alpha: Alpha bound
            beta: Beta bound
            ply: Ply from root

        Returns:
            Score from the maximizer's perspective
        """
        self.nodes_searched += 1

        if self.nodes_searched % self.config.node_check_interval == 0 and self._hard_time_up():
            raise SearchTimeout()

        maximizer = self._maximizer

        # Only the player who just moved can have completed a line
        if self.game.check_win(state, last_move).won:
            if state[last_move] == maximizer:
                return SCORE_WIN - ply
            return SCORE_LOSS + ply

        valid_moves = self.game.get_valid_moves(state)
        if not valid_moves:
            return SCORE_DRAW

        if depth <= 0:
            return evaluate(state, maximizer)

        cached = self.tt.probe(state_hash, depth, _score_to_tt(alpha, ply), _score_to_tt(beta, ply))
        if cached is not None:
            return _score_from_tt(cached, ply)

        mover = maximizer if maximizing else other_player(maximizer)
        original_alpha, original_beta = alpha, beta
        best_score = -SCORE_INF if maximizing else SCORE_INF

        for move in valid_moves:
            row = self.game.lowest_empty_row(state, move)
            next_state = self.game.apply_move(state, move, mover)
            next_hash = self.zobrist.incremental_hash(state_hash, row, move, mover)

            score = self._minimax(
                next_state, next_hash, (row, move), depth - 1,
                not maximizing, alpha, beta, ply + 1
            )

            if maximizing:
                best_score = max(best_score, score)
                alpha = max(alpha, best_score)
            else:
                best_score = min(best_score, score)
                beta = min(beta, best_score)

            if beta <= alpha:
                break

        if best_score <= original_alpha:
            bound = BoundType.UPPER
        elif best_score >= original_beta:
            bound = BoundType.LOWER
        else:
            bound = BoundType.EXACT

        self.tt.store(state_hash, depth, _score_to_tt(best_score, ply), bound)

        return best_score

    def _result(self, best_move: Optional[int], score: int, depth: int) -> SearchResult:
        return SearchResult(
            best_move=best_move,
            score=score,
            depth_reached=depth,
            nodes_searched=self.nodes_searched,
            time_ms=self._elapsed_ms(),
            tt_stats=self.tt.get_stats()
        )

    def _fallback_result(self, state: np.ndarray) -> SearchResult:
        """No completed pass: first legal column (None on a full board)."""
        valid_moves = self.game.get_valid_moves(state)
        if valid_moves:
            logger.warning("No search depth completed, falling back to column %d", valid_moves[0])
        return self._result(valid_moves[0] if valid_moves else None, SCORE_DRAW, 0)

    def _elapsed_ms(self) -> int:
        return int((time.perf_counter() - self.start_time) * 1000)

    def _time_up(self) -> bool:
        """Soft budget, checked at depth boundaries only."""
        if not self.time_limit_ms:
            return False
        return self._elapsed_ms() >= self.time_limit_ms

    def _hard_time_up(self) -> bool:
        if not self.hard_time_limit_ms or not self.time_limit_ms:
            return False
        return self._elapsed_ms() >= max(self.hard_time_limit_ms, self.time_limit_ms)

    def get_stats(self) -> dict:
        """Get search statistics."""
        return {
            'nodes_searched': self.nodes_searched,
            'tt_stats': self.tt.get_stats(),
            'history': self.move_ordering.history.tolist(),
            'killer_moves': dict(self.move_ordering.killer_moves),
        }
