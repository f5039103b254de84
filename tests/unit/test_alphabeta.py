"""
Unit tests for alpha-beta search engine.

Tests verify:
1. Engine finds forced wins and prefers the quickest one
2. Zobrist hashing and the transposition table work correctly
3. History and killer bookkeeping happen at the root only, and persist per game
4. Iterative deepening respects depth caps and deadlines
5. The awaitable driver agrees with the synchronous one
"""

import asyncio
import itertools

import numpy as np

from connect4_engine.config import EngineConfig
from connect4_engine.game.connect_four import ConnectFour, PLAYER_ONE, PLAYER_TWO
from connect4_engine.engine import alphabeta
from connect4_engine.engine.alphabeta import AlphaBetaEngine, SCORE_WIN, SCORE_LOSS, WIN_THRESHOLD
from connect4_engine.engine.zobrist import ZobristHasher
from connect4_engine.engine.transposition_table import TranspositionTable, BoundType
from connect4_engine.engine.move_ordering import MoveOrdering


def empty_grid():
    return [[0] * 7 for _ in range(6)]


def make_engine(**overrides) -> AlphaBetaEngine:
    config = EngineConfig(time_limit_ms=0, tt_size_mb=1, seed=1234, **overrides)
    return AlphaBetaEngine(config=config)


class TestZobristHashing:
    """Test Zobrist hashing correctness."""

    def test_hash_uniqueness(self):
        game = ConnectFour()
        zobrist = ZobristHasher(seed=42)

        state1 = game.get_initial_state()
        state2 = game.apply_move(state1, 3, PLAYER_ONE)
        state3 = game.apply_move(state2, 3, PLAYER_TWO)

        hashes = {zobrist.hash_position(s) for s in (state1, state2, state3)}
        assert len(hashes) == 3

    def test_incremental_hash(self):
        """Incremental hash should match full recomputation."""
        game = ConnectFour()
        zobrist = ZobristHasher(seed=42)

        state = game.from_moves([3, 2, 4])
        base = zobrist.hash_position(state, maximizer=PLAYER_TWO)

        row = game.lowest_empty_row(state, 3)
        state_after = game.apply_move(state, 3, PLAYER_TWO)

        assert zobrist.incremental_hash(base, row, 3, PLAYER_TWO) == \
            zobrist.hash_position(state_after, maximizer=PLAYER_TWO)

    def test_perspective_changes_hash(self):
        game = ConnectFour()
        zobrist = ZobristHasher(seed=42)
        state = game.from_moves([3, 3])

        assert zobrist.hash_position(state, PLAYER_ONE) != zobrist.hash_position(state, PLAYER_TWO)

    def test_reseed(self):
        game = ConnectFour()
        state = game.from_moves([0, 1, 2])

        a = ZobristHasher(seed=7)
        b = ZobristHasher(seed=7)
        assert a.hash_position(state) == b.hash_position(state)

        b.reseed(8)
        assert a.hash_position(state) != b.hash_position(state)

    def test_collision_rate(self):
        """Hash collisions should be rare on random positions."""
        game = ConnectFour()
        zobrist = ZobristHasher(seed=42)
        rng = np.random.RandomState(0)

        boards = {}
        for _ in range(2000):
            state = game.get_initial_state()
            player = PLAYER_ONE
            for _ in range(rng.randint(10, 21)):
                valid_moves = game.get_valid_moves(state)
                if not valid_moves:
                    break
                state = game.apply_move(state, int(rng.choice(valid_moves)), player)
                player = 3 - player
            boards[state.tobytes()] = zobrist.hash_position(state)

        assert len(set(boards.values())) == len(boards)


class TestTranspositionTable:
    """Test transposition table functionality."""

    def test_store_and_probe(self):
        tt = TranspositionTable(size_mb=1)

        tt.store(12345, depth=5, score=100, bound=BoundType.EXACT)

        assert tt.probe(12345, depth=3, alpha=-1000, beta=1000) == 100

    def test_depth_requirement(self):
        """Should not return entry if stored depth is too shallow."""
        tt = TranspositionTable(size_mb=1)

        tt.store(12345, depth=3, score=50, bound=BoundType.EXACT)

        assert tt.probe(12345, depth=5, alpha=-1000, beta=1000) is None

    def test_bound_types(self):
        """Different bound types should respect alpha-beta window."""
        tt = TranspositionTable(size_mb=1)

        tt.store(1, depth=5, score=100, bound=BoundType.LOWER)
        assert tt.probe(1, depth=4, alpha=-1000, beta=90) == 100
        assert tt.probe(1, depth=4, alpha=-1000, beta=110) is None

        tt.store(2, depth=5, score=-100, bound=BoundType.UPPER)
        assert tt.probe(2, depth=4, alpha=-90, beta=1000) == -100
        assert tt.probe(2, depth=4, alpha=-110, beta=1000) is None

    def test_keeps_deeper_entry(self):
        tt = TranspositionTable(size_mb=1)

        tt.store(9, depth=6, score=10, bound=BoundType.EXACT)
        tt.store(9, depth=2, score=99, bound=BoundType.EXACT)

        assert tt.probe(9, depth=1, alpha=-1000, beta=1000) == 10

    def test_clear(self):
        tt = TranspositionTable(size_mb=1)
        tt.store(9, depth=1, score=1, bound=BoundType.EXACT)

        tt.clear()

        assert len(tt) == 0
        assert tt.probe(9, depth=1, alpha=-1000, beta=1000) is None


class TestMoveOrdering:

    def test_center_first_without_history(self):
        ordering = MoveOrdering(center_bonus=100)
        assert ordering.order_root_moves([0, 1, 2, 3, 4, 5, 6]) == [3, 0, 1, 2, 4, 5, 6]

    def test_history_outranks_center(self):
        ordering = MoveOrdering(center_bonus=100)
        ordering.update_history(5, depth=11)  # 121

        assert ordering.order_root_moves([0, 3, 5]) == [5, 3, 0]

    def test_reset(self):
        ordering = MoveOrdering()
        ordering.update_history(2, depth=3)
        ordering.update_killer(2, depth=3)

        ordering.reset()

        assert ordering.history.sum() == 0
        assert ordering.killer_moves == {}


class TestAlphaBetaEngine:
    """Test alpha-beta search engine."""

    def test_finds_immediate_win(self):
        """X X X _ on the bottom row: column 3 wins at ply 1."""
        game = ConnectFour()
        engine = make_engine(max_depth=6)

        grid = empty_grid()
        grid[5] = [1, 1, 1, 0, 0, 0, 0]
        grid[4] = [2, 2, 0, 0, 0, 0, 0]
        state = game.from_grid(grid)

        result = engine.search(state, player=PLAYER_ONE)

        assert result.best_move == 3
        assert result.score == SCORE_WIN - 1
        assert result.is_forced_win
        assert result.depth_reached == 1  # Stops as soon as a forced win is found

    def test_blocks_opponent_win(self):
        game = ConnectFour()
        engine = make_engine(max_depth=2)

        grid = empty_grid()
        grid[5] = [2, 2, 2, 0, 0, 1, 0]
        grid[4] = [1, 0, 0, 0, 0, 0, 0]
        state = game.from_grid(grid)

        result = engine.search(state, player=PLAYER_ONE)

        assert result.best_move == 3

    def test_win_in_three_keeps_ply_offset(self):
        """_ X X _ _ : column 3 makes an open three that cannot be stopped."""
        game = ConnectFour()
        engine = make_engine(max_depth=5)

        grid = empty_grid()
        grid[5] = [0, 1, 1, 0, 0, 0, 0]
        grid[4] = [0, 2, 2, 0, 0, 0, 0]
        state = game.from_grid(grid)

        result = engine.search(state, player=PLAYER_ONE)

        assert result.best_move == 3
        assert result.score == SCORE_WIN - 3
        assert result.depth_reached == 3
        assert result.score >= WIN_THRESHOLD

    def test_empty_board_prefers_center(self):
        engine = make_engine(max_depth=1)
        game = engine.game

        result = engine.search(game.get_initial_state(), player=PLAYER_TWO)

        assert result.best_move == 3
        assert result.score == 250

    def test_iterative_deepening_depth_cap(self):
        game = ConnectFour()
        state = game.from_moves([3, 3])

        shallow = make_engine().search(state, player=PLAYER_ONE, max_depth=2)
        deep = make_engine().search(state, player=PLAYER_ONE, max_depth=4)

        assert shallow.depth_reached == 2
        assert deep.depth_reached == 4
        assert deep.nodes_searched > shallow.nodes_searched

    def test_iterate_yields_each_depth(self):
        game = ConnectFour()
        engine = make_engine()

        depths = [r.depth_reached for r in engine.iterate(game.from_moves([3]), PLAYER_TWO, max_depth=3)]

        assert depths == [1, 2, 3]

    def test_transposition_table_usage(self):
        """TT entries are reused on a repeated search."""
        game = ConnectFour()
        engine = make_engine(max_depth=4)

        state = game.from_moves([3, 3])

        engine.search(state, player=PLAYER_ONE)
        result = engine.search(state, player=PLAYER_ONE)

        assert result.tt_stats['hits'] > 0
        assert result.tt_stats['hit_rate'] > 0.0

    def test_history_updated_once_per_depth(self):
        game = ConnectFour()
        engine = make_engine(max_depth=3)

        engine.search(game.from_moves([3, 3]), player=PLAYER_ONE)
        stats = engine.get_stats()

        assert sum(stats['history']) == 1 + 4 + 9
        assert sorted(stats['killer_moves']) == [1, 2, 3]

    def test_history_persists_until_new_game(self):
        game = ConnectFour()
        engine = make_engine(max_depth=2)

        engine.search(game.from_moves([3, 3]), player=PLAYER_ONE)
        engine.search(game.from_moves([3, 3, 2, 4]), player=PLAYER_ONE)
        assert sum(engine.get_stats()['history']) == 2 * (1 + 4)

        engine.new_game()
        assert sum(engine.get_stats()['history']) == 0
        assert len(engine.tt) == 0

    def test_handles_full_board(self):
        game = ConnectFour()
        engine = make_engine()

        grid = [[1 if (r + c) % 2 else 2 for c in range(7)] for r in range(6)]
        result = engine.search(game.from_grid(grid), player=PLAYER_ONE)

        assert result.best_move is None
        assert result.depth_reached == 0

    def test_hard_deadline_falls_back_to_first_legal_column(self, monkeypatch):
        """Every clock reading is 10s later, so depth 1 is abandoned at its first node."""
        clock = itertools.count(step=10.0)
        monkeypatch.setattr(alphabeta.time, 'perf_counter', lambda: next(clock))

        game = ConnectFour()
        engine = AlphaBetaEngine(config=EngineConfig(node_check_interval=1, tt_size_mb=1))

        state = game.from_moves([0, 0, 0, 0, 0, 0, 3])  # Column 0 is full
        result = engine.search(state, player=PLAYER_TWO)

        assert result.best_move == game.get_valid_moves(state)[0] == 1
        assert result.depth_reached == 0
        assert result.last_pass_move is None
        assert engine.nodes_searched == 1

    def test_hard_deadline_in_async_search(self, monkeypatch):
        clock = itertools.count(step=10.0)
        monkeypatch.setattr(alphabeta.time, 'perf_counter', lambda: next(clock))

        game = ConnectFour()
        engine = AlphaBetaEngine(config=EngineConfig(node_check_interval=1, tt_size_mb=1))

        state = game.from_moves([3, 3, 4])
        result = asyncio.run(engine.search_async(state, player=PLAYER_TWO))

        assert result.best_move == 0
        assert result.depth_reached == 0

    def test_deeper_loss_does_not_replace_running_best(self):
        """
        Player two must block (5, 3), which lets player one finish row 4.
        Depth 2 proves every column loses, so the depth-1 choice is kept and
        the losing pass is only visible through last_pass_*.
        """
        game = ConnectFour()
        engine = make_engine(max_depth=2)

        grid = empty_grid()
        grid[5] = [1, 1, 1, 0, 2, 0, 2]
        grid[4] = [1, 1, 1, 0, 2, 0, 2]
        grid[3][0] = 2
        state = game.from_grid(grid)

        first, second = list(engine.iterate(state, player=PLAYER_TWO))

        assert second.best_move == first.best_move
        assert second.score == first.score
        assert not second.is_forced_loss
        assert second.last_pass_score == SCORE_LOSS + 2
        assert second.last_pass_move == 3  # Center is searched first and every reply scores the same
        assert second.kept_shallower_move == (first.best_move != 3)

    def test_search_async_matches_sync(self):
        game = ConnectFour()
        state = game.from_moves([3, 2, 3])

        sync_result = make_engine(max_depth=3).search(state, player=PLAYER_TWO)
        async_result = asyncio.run(make_engine(max_depth=3).search_async(state, player=PLAYER_TWO))

        assert async_result.best_move == sync_result.best_move
        assert async_result.score == sync_result.score
        assert async_result.depth_reached == 3
