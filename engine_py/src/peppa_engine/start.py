#!/usr/bin/env python3
"""Run a headless game where every seat is played by a bot"""

import argparse
import asyncio
import logging
import os

from .constants import AI_HAL, AI_LABELS, AI_MIXED, AI_TYPES, PASS_SEQUENCES, ROUND_OPTIONS, SCORE_OPTIONS
from .ranking import get_standings, score_table
from .rules import HEADLESS_TIMING, create_config
from .scheduler import GameSession


def print_score_table(session: GameSession):
    state = session.state
    names = [p.name for p in state.players]
    print("Round Dir " + " ".join(f"{n[:10]:>10}" for n in names))
    for row in score_table(state):
        points = " ".join(f"{row['points'][p.id]:>10}" for p in state.players)
        print(f"{row['round']:>5} {row['direction']:>3} {points}")

    standings = get_standings(state)
    totals = " ".join(f"{p.score:>10}" for p in state.players)
    print(f"{'Total':>9} {totals}")
    for player in sorted(state.players, key=lambda p: standings[p.id]):
        print(f"{standings[player.id]}. {player.name} ({AI_LABELS[player.ai_type or AI_HAL]}): {player.score}")


def main() -> None:
    parser = argparse.ArgumentParser(description="Play a full game of Peppa with bots in every seat.")
    parser.add_argument(
        "--ai",
        choices=AI_TYPES + [AI_MIXED],
        default=AI_MIXED,
        help="Strategy of the three bot seats.",
    )
    parser.add_argument(
        "--rounds",
        type=int,
        choices=ROUND_OPTIONS,
        default=8,
        help="Number of rounds to play.",
    )
    parser.add_argument(
        "--max-score",
        type=int,
        choices=SCORE_OPTIONS,
        default=100,
        help="Absolute score that ends the game early.",
    )
    parser.add_argument(
        "--sequence",
        choices=list(PASS_SEQUENCES),
        default="DSC-",
        help="Pass-direction cycle.",
    )
    parser.add_argument(
        "--name",
        default=os.getenv("PEPPA_PLAYER_NAME", "Charlie Bartom"),
        help="Name of seat 0 (played by the baseline bot).",
    )
    parser.add_argument(
        "--seed",
        type=int,
        default=None,
        help="Random seed for reproducibility.",
    )
    args = parser.parse_args()

    logging.basicConfig(
        level=os.getenv("LOG_LEVEL", "INFO").upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    config = create_config(
        player_name=args.name,
        ai_type=args.ai,
        max_rounds=args.rounds,
        max_score=args.max_score,
        pass_sequence_name=args.sequence,
    )
    session = GameSession(config, seed=args.seed, timing=HEADLESS_TIMING, autopilot=True)
    asyncio.run(session.play_until_game_over())

    print(session.state.game_log[-1])
    print_score_table(session)


if __name__ == "__main__":
    main()
