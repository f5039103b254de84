#!/usr/bin/env python3
"""
Demo: Alpha-Beta Engine

Walks through the engine on a few hand-made positions and shows search
statistics, timing and the rule the move selector used.
"""

from rich.console import Console
from rich.table import Table

from connect4_engine import ConnectFour, EngineConfig, MoveSelector, AlphaBetaEngine
from connect4_engine.engine import find_open_threats, evaluate

console = Console()

SYMBOLS = {1: 'X', 2: 'O', 0: '.'}


def print_board(game, state):
    """Pretty print Connect4 board."""
    lines = ["  0 1 2 3 4 5 6", "  " + "-" * 13]
    for row in range(game.row_count):
        lines.append(f"{row}|" + " ".join(SYMBOLS[int(state[row, col])] for col in range(game.column_count)) + "|")
    lines.append("  " + "-" * 13)
    console.print("\n".join(lines), highlight=False)


def grid_with(cells):
    grid = [[0] * 7 for _ in range(6)]
    for (row, col), player in cells.items():
        grid[row][col] = player
    return grid


def demo_winning_move():
    console.rule("DEMO 1: Finding Immediate Winning Move")

    game = ConnectFour()
    engine = AlphaBetaEngine(game, EngineConfig(tt_size_mb=16))

    # X X X _ _ _ _  (row 5)
    state = game.from_grid(grid_with({(5, 0): 1, (5, 1): 1, (5, 2): 1, (4, 0): 2, (4, 1): 2}))
    print_board(game, state)

    result = engine.search(state, player=1, time_limit_ms=1000)

    console.print(f"✓ Best move: column {result.best_move}")
    console.print(f"✓ Score: {result.score:,} (forced win: {result.is_forced_win})")
    console.print(f"✓ Depth reached: {result.depth_reached} | Nodes: {result.nodes_searched:,} | Time: {result.time_ms}ms")

    row = game.lowest_empty_row(state, result.best_move)
    win = game.check_win(game.apply_move(state, result.best_move, 1), (row, result.best_move))
    console.print(f"✓ Wins along the {win.direction} axis: {win.cells}\n")


def demo_threats_and_block():
    console.rule("DEMO 2: Blocking Opponent's Winning Threat")

    game = ConnectFour()
    selector = MoveSelector(config=EngineConfig(tt_size_mb=16))

    # Vertical three in column 0, player two to move
    state = game.from_grid(grid_with({(5, 0): 1, (4, 0): 1, (3, 0): 1}))
    print_board(game, state)

    console.print(f"Open threats for X: {find_open_threats(state, 1)}")
    console.print(f"Static evaluation for O: {evaluate(state, 2):,}")

    decision = selector.decide(state, 2)
    console.print(f"✓ O plays column {decision.column} ({decision.reason.value})\n")


def demo_iterative_deepening():
    console.rule("DEMO 3: Iterative Deepening")

    game = ConnectFour()
    engine = AlphaBetaEngine(game, EngineConfig(time_limit_ms=0, max_depth=9, tt_size_mb=64))
    state = game.from_moves([3, 3, 2])
    print_board(game, state)

    table = Table(title="Depth by depth (O to move)")
    table.add_column("Depth", justify="right")
    table.add_column("Best move", justify="right")
    table.add_column("Score", justify="right")
    table.add_column("Nodes", justify="right")
    table.add_column("Time (ms)", justify="right")
    table.add_column("TT hit rate", justify="right")

    for result in engine.iterate(state, player=2):
        table.add_row(
            str(result.depth_reached),
            str(result.best_move),
            f"{result.score:,}",
            f"{result.nodes_searched:,}",
            str(result.time_ms),
            f"{result.tt_stats['hit_rate']:.1%}",
        )

    console.print(table)
    console.print(f"History weights after search: {engine.get_stats()['history']}\n")


def demo_time_budgets():
    console.rule("DEMO 4: Time Budget vs Depth")

    game = ConnectFour()
    state = game.from_moves([3, 3, 2, 4])

    table = Table()
    table.add_column("Budget (ms)", justify="right")
    table.add_column("Depth", justify="right")
    table.add_column("Best move", justify="right")
    table.add_column("Nodes", justify="right")
    table.add_column("Nodes/sec", justify="right")

    for budget in (50, 200, 1000):
        engine = AlphaBetaEngine(game, EngineConfig(time_limit_ms=budget, hard_time_limit_ms=2 * budget))
        result = engine.search(state, player=1)
        table.add_row(
            str(budget),
            str(result.depth_reached),
            str(result.best_move),
            f"{result.nodes_searched:,}",
            f"{int(result.nodes_searched / max(result.time_ms, 1) * 1000):,}",
        )

    console.print(table)


def main():
    console.print("[bold]Alpha-Beta Engine Demo[/bold]\n")
    demo_winning_move()
    demo_threats_and_block()
    demo_iterative_deepening()
    demo_time_budgets()


if __name__ == "__main__":
    main()
