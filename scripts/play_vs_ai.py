#!/usr/bin/env python3
"""Play Pressure against the AI in the console, with optional logging & replay."""

import argparse
import json
import logging
import sys
from pathlib import Path
from typing import Dict, List

from pressure import Game, GameConfig, load_game_config
from pressure.core import GameResult, Move, encode_move, find_move
from pressure.core.errors import ConfigError, InvalidMoveError


def format_board(game: Game) -> str:
    return game.snapshot.grid.render()


def describe_move(move: Move) -> str:
    (fr, fc), (tr, tc) = move.from_pos, move.to_pos
    verb = "pushes" if move.kind == "push" else "moves"
    return f"({fr},{fc}) {verb} {move.direction.label} -> ({tr},{tc})"


def prompt_human_move(game: Game) -> object:
    """Return a legal move, or one of the strings "undo" / "redo"."""
    moves = game.legal_moves()
    size = game.config.board_size
    by_index = {encode_move(move, size): move for move in moves}
    print("Legal moves:")
    for idx, move in by_index.items():
        print(f"  {idx}: {describe_move(move)}")
    while True:
        raw = input("Move index (u = undo, r = redo, q = quit): ").strip().lower()
        if raw in {"q", "quit", "exit"}:
            print("Quitting.")
            sys.exit(0)
        if raw in {"u", "undo"}:
            return "undo"
        if raw in {"r", "redo"}:
            return "redo"
        if not raw.isdigit():
            print("Please enter a number.")
            continue
        idx = int(raw)
        if idx in by_index:
            return by_index[idx]
        print("Not a legal move index, try again.")


def save_log(log: Dict, path: Path) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json.dumps(log, ensure_ascii=False, indent=2))
    print(f"Saved game log to {path}.")


def replay_logged_game(log_path: Path, *, verbose: bool = True) -> Dict[str, object]:
    data = json.loads(log_path.read_text())
    moves = data.get("moves", [])
    board_size = data.get("metadata", {}).get("board_size", 5)
    game = Game()
    game.start(GameConfig(board_size=board_size))
    if verbose:
        print("Replaying logged game.")
        print(format_board(game))
    for entry in moves:
        snapshot = game.snapshot
        move = find_move(snapshot.grid, snapshot.current_player, int(entry["action_index"]))
        if move is None:
            raise InvalidMoveError(f"Logged move {entry.get('move_index')} is not legal in the replayed position.")
        game.play_move(move)
        if verbose:
            actor = entry.get("actor", "unknown")
            player = entry.get("player", "?")
            print(f"{actor} ({player}): {describe_move(move)}")
            print(format_board(game))
    result = game.snapshot.result
    summary = {
        "result": result.value,
        "reason": game.snapshot.win_reason,
        "moves": len(moves),
        "board": game.snapshot.grid.colors.tolist(),
    }
    if verbose:
        print("Replay finished.")
        print(f"Result: {summary['result']}")
    return summary


def history_log(game: Game) -> List[Dict]:
    """Committed moves as JSON records; undone moves are not included."""
    records = []
    for index, entry in enumerate(game.history.entries):
        records.append(
            {
                "move_index": index,
                "actor": "ai" if entry.context.is_committed_ai_move else "human",
                "player": entry.player.label,
                "action_index": encode_move(entry.move, game.config.board_size),
                **entry.move.as_dict(),
            }
        )
    return records


def build_config(args: argparse.Namespace) -> GameConfig:
    data = load_game_config(args.config).as_dict()
    overrides = {
        "board_size": args.board_size,
        "white_player_type": args.white,
        "black_player_type": args.black,
        "white_ai_level": args.white_level,
        "black_ai_level": args.black_level,
    }
    data.update({key: value for key, value in overrides.items() if value is not None})
    return GameConfig.from_dict(data)


def play_interactive(args: argparse.Namespace) -> None:
    config = build_config(args)
    game = Game()
    game.start(config)

    while game.is_active and game.snapshot.ply_count < args.max_ply:
        color = game.current_player
        print("\nCurrent board:")
        print(format_board(game))
        print(f"To move: {color.label}")

        if game.is_ai_turn():
            task = game.begin_ai_turn()
            game.finish_ai_turn()
            move = game.history.entries[-1].move
            print(f"AI ({color.label}, depth {task.depth}): {describe_move(move)}")
            continue

        choice = prompt_human_move(game)
        if choice in ("undo", "redo"):
            done = game.undo() if choice == "undo" else game.redo()
            # Step back past the AI reply so the human is to move again.
            if choice == "undo" and done and game.is_ai_turn():
                game.undo()
            print(f"{choice} {'done' if done else 'not available'}.")
            continue
        game.play_move(choice)

    print("\nFinal board:")
    print(format_board(game))
    result = game.snapshot.result
    if result == GameResult.ONGOING:
        print("Ply limit reached, no winner.")
    else:
        print(f"{game.snapshot.winner.label} wins: {game.snapshot.win_reason}")

    if args.log_file:
        metadata = {
            **config.as_dict(),
            "max_ply": args.max_ply,
            "result": result.value,
        }
        save_log({"metadata": metadata, "moves": history_log(game)}, Path(args.log_file))


def main() -> None:
    parser = argparse.ArgumentParser(description="Play Pressure in the console against the AI.")
    parser.add_argument("--config", type=str, default="configs/game.yaml")
    parser.add_argument("--board-size", type=int)
    parser.add_argument("--white", choices=["human", "ai"])
    parser.add_argument("--black", choices=["human", "ai"])
    parser.add_argument("--white-level", type=int)
    parser.add_argument("--black-level", type=int)
    parser.add_argument("--max-ply", type=int, default=400)
    parser.add_argument("--log-file", type=str)
    parser.add_argument("--replay-log", type=str, help="Replay a logged game and exit")
    parser.add_argument("--replay-quiet", action="store_true")
    parser.add_argument("--verbose", action="store_true", help="Enable debug logging")
    args = parser.parse_args()

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    if args.replay_log:
        replay_logged_game(Path(args.replay_log), verbose=not args.replay_quiet)
        return

    try:
        play_interactive(args)
    except ConfigError as exc:
        parser.error(str(exc))


if __name__ == "__main__":
    main()
