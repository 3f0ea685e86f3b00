#!/usr/bin/env python3
"""Pit two AI levels against each other and report the tally."""

import argparse
import json
import logging

from tqdm.auto import tqdm

from pressure.evaluation import evaluate_levels


def main() -> None:
    parser = argparse.ArgumentParser()
    parser.add_argument("--white-level", type=int, default=1)
    parser.add_argument("--black-level", type=int, default=3)
    parser.add_argument("--episodes", type=int, default=10)
    parser.add_argument("--max-ply", type=int, default=200)
    parser.add_argument("--board-size", type=int, default=5)
    parser.add_argument("--seed", type=int)
    parser.add_argument("--verbose", action="store_true")
    args = parser.parse_args()

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    with tqdm(total=args.episodes, desc="Games") as bar:
        result = evaluate_levels(
            args.white_level,
            args.black_level,
            episodes=args.episodes,
            max_ply=args.max_ply,
            board_size=args.board_size,
            seed=args.seed,
            progress=lambda episode, outcome: bar.update(1),
        )

    output = {
        "games": result.games_played,
        "white_level": args.white_level,
        "black_level": args.black_level,
        "white_wins": result.white_wins,
        "black_wins": result.black_wins,
        "draws": result.draws,
        "average_length": result.average_length,
        "white_winrate": result.winrate_white(),
        "black_winrate": result.winrate_black(),
    }
    print(json.dumps(output, indent=2))


if __name__ == "__main__":
    main()
