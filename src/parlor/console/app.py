"""Play a parlor match in the terminal against three computer opponents.

Usage:
    parlor
    parlor --advanced --name Alice
    parlor --seed <64 hex chars> --rounds 4 --log-dir logs

Options fall back to PARLOR_* environment variables (see ConsoleSettings).
"""

from __future__ import annotations

import argparse
import sys

import structlog

from parlor.console.input_source import ConsoleInputSource
from parlor.console.renderer import ConsoleRenderer
from parlor.console.settings import ConsoleSettings
from parlor.logic.enums import SkillTier
from parlor.logic.game import final_standings, run_match
from parlor.logic.settings import GameSettings
from parlor.logic.types import SeatConfig
from shared.logging import resolve_log_level, setup_logging

logger = structlog.get_logger()

HUMAN_SEAT = 0
COMPUTER_NAMES = ("East Wind", "North Star", "West Lake")


def build_roster(player_name: str) -> list[SeatConfig]:
    """Human in seat 0, computers in seats 1-3."""
    roster = [SeatConfig(name=name) for name in COMPUTER_NAMES]
    roster.insert(HUMAN_SEAT, SeatConfig(name=player_name, is_human=True))
    return roster


def _build_parser(defaults: ConsoleSettings) -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="parlor", description="Four-seat tile game against three computer players")
    parser.add_argument(
        "--advanced",
        action="store_true",
        default=defaults.advanced,
        help="Play against advanced computer opponents",
    )
    parser.add_argument("--seed", default=defaults.seed, help="Match seed (64 hex chars) for a reproducible match")
    parser.add_argument(
        "--rounds",
        type=int,
        default=defaults.rounds,
        help=f"Round after which the match ends unless the house wins (default: {defaults.rounds})",
    )
    parser.add_argument("--name", default=defaults.player_name, help="Your name at the table")
    parser.add_argument("--log-dir", default=defaults.log_dir, help="Directory for a timestamped log file")
    return parser


def main(argv: list[str] | None = None) -> int:
    defaults = ConsoleSettings()
    args = _build_parser(defaults).parse_args(argv)
    if args.rounds < 1:
        print("--rounds must be at least 1", file=sys.stderr)
        return 2

    setup_logging(log_dir=args.log_dir, level=resolve_log_level(defaults.log_level), stream=sys.stderr)

    roster = build_roster(args.name)
    renderer = ConsoleRenderer(HUMAN_SEAT, [seat.name for seat in roster])
    input_source = ConsoleInputSource(renderer)
    skill_tier = SkillTier.ADVANCED if args.advanced else SkillTier.BASIC

    try:
        match = run_match(
            roster,
            input_source,
            settings=GameSettings(termination_round=args.rounds),
            seed=args.seed,
            skill_tier=skill_tier,
            listener=renderer,
            on_round_end=renderer.render_standings,
        )
    except ValueError as e:
        print(f"Cannot start match: {e}", file=sys.stderr)
        return 2
    except KeyboardInterrupt:
        print()
        return 130

    print()
    print("Final standings:")
    for place, standing in enumerate(final_standings(match), start=1):
        print(f"  {place}. {standing.name}: {standing.score}")
    logger.info("match closed", seed=match.seed)
    return 0


if __name__ == "__main__":
    sys.exit(main())
