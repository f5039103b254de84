#!/usr/bin/env python3
"""
Play Connect Four against the alpha-beta engine.
You play as Red (🔴), the engine plays as Yellow (🟡).

Usage:
    python play_connect4.py [--difficulty easy|medium|hard|expert] [--engine-first] [-v]
"""
import argparse
import logging

from rich.console import Console
from rich.logging import RichHandler
from rich.panel import Panel
from rich.prompt import Prompt
from rich.text import Text

from connect4_engine import ConnectFour, EngineConfig, MoveSelector
from connect4_engine.config import DIFFICULTY_DEPTHS
from connect4_engine.game import PLAYER_ONE, PLAYER_TWO, other_player

console = Console()

SYMBOLS = {0: "⚪", PLAYER_ONE: "🔴", PLAYER_TWO: "🟡"}


def render_board(board, highlight=()):
    """Board as rich Text, winning cells shown in bold reverse video."""
    text = Text("  " + "  ".join(str(i) for i in range(board.shape[1])) + "\n")
    for r, row in enumerate(board):
        text.append("| ")
        for c, cell in enumerate(row):
            style = "bold reverse" if (r, c) in highlight else ""
            text.append(SYMBOLS[int(cell)], style=style)
            text.append(" ")
        text.append("|\n")
    return text


def ask_column(game, board):
    valid_cols = game.get_valid_moves(board)
    while True:
        answer = Prompt.ask(f"🔴 Your move {valid_cols} or 'q' to quit").strip().lower()
        if answer == 'q':
            return None
        try:
            col = int(answer)
        except ValueError:
            console.print("[red]❌ Enter a number 0-6[/red]")
            continue
        if col not in valid_cols:
            console.print(f"[red]❌ Invalid column! Choose from: {valid_cols}[/red]")
            continue
        return col


def main():
    parser = argparse.ArgumentParser(description="Play Connect Four against the alpha-beta engine")
    parser.add_argument("--difficulty", choices=sorted(DIFFICULTY_DEPTHS), default="hard")
    parser.add_argument("--engine-first", action="store_true", help="Let the engine open the game")
    parser.add_argument("--time-limit-ms", type=int, default=None, help="Soft search budget per move")
    parser.add_argument("-v", "--verbose", action="store_true", help="Show engine decisions")
    args = parser.parse_args()

    logging.basicConfig(
        level=logging.INFO if args.verbose else logging.WARNING,
        format="%(message)s",
        handlers=[RichHandler(console=console, show_path=False)],
    )

    overrides = {}
    if args.time_limit_ms is not None:
        overrides['time_limit_ms'] = args.time_limit_ms
    config = EngineConfig.for_difficulty(args.difficulty, **overrides)

    game = ConnectFour()
    selector = MoveSelector(config=config)
    selector.new_game()

    human = PLAYER_TWO if args.engine_first else PLAYER_ONE
    computer = other_player(human)
    SYMBOLS[human], SYMBOLS[computer] = "🔴", "🟡"

    console.print(Panel(
        f"🎮 Connect Four vs alpha-beta ({args.difficulty}, depth {config.max_depth})\n"
        f"You are 🔴, the engine is 🟡. Enter a column number to drop your disc.",
        border_style="blue",
    ))

    board = game.get_initial_state()
    current = PLAYER_ONE

    while True:
        console.print(render_board(board))

        if current == human:
            col = ask_column(game, board)
            if col is None:
                console.print("👋 Thanks for playing!")
                return
        else:
            with console.status("🟡 Engine is thinking..."):
                decision = selector.decide(board, computer)
            if decision.column is None:
                console.print("🤝 Game Over - Draw!")
                return
            col = decision.column
            detail = decision.reason.value
            if decision.search_result is not None:
                result = decision.search_result
                detail += f", depth {result.depth_reached}, {result.nodes_searched:,} nodes, {result.time_ms} ms"
            console.print(f"🟡 Engine plays column {col} [dim]({detail})[/dim]")

        row = game.lowest_empty_row(board, col)
        board = game.apply_move(board, col, current)

        win = game.check_win(board, (row, col))
        if win.won:
            console.print(render_board(board, highlight=set(win.cells)))
            if current == human:
                console.print(Panel("🎉 YOU WIN! Congratulations! 🎉", border_style="green"))
            else:
                console.print(Panel(f"🟡 Engine wins ({win.direction})", border_style="yellow"))
            return
        if game.is_full(board):
            console.print(render_board(board))
            console.print("🤝 Game Over - Draw!")
            return

        current = other_player(current)


if __name__ == "__main__":
    main()
