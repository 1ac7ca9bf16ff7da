#!/usr/bin/env python3
"""
Print a day's Snakle puzzle: number, seed, target, kiwis and the board.

Usage:
    python show_daily.py
    python show_daily.py --date 2025-03-07
    python show_daily.py --date 2025-03-07 --debug

Every client derives the same puzzle from the UTC date, so this is what
anyone playing that day will see.
"""

import argparse
import logging
import os
import sys
from datetime import datetime, timezone

# Add backend to path for imports
sys.path.append(os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from config import load_settings  # noqa: E402
from domain.constants import DAILY, INITIAL_SNAKE, UP  # noqa: E402
from domain.daily import daily_seed, daily_number, time_to_next_puzzle  # noqa: E402
from domain.game_state import GameState  # noqa: E402
from domain.mode_profile import daily_profile  # noqa: E402

logger = logging.getLogger(__name__)


def parse_date(value: str) -> datetime:
    try:
        parsed = datetime.strptime(value, "%Y-%m-%d")
    except ValueError:
        raise argparse.ArgumentTypeError(f"Expected YYYY-MM-DD, got '{value}'")
    return parsed.replace(tzinfo=timezone.utc)


def describe_daily(when: datetime, debug: bool = False) -> str:
    """Text block describing the puzzle for the UTC day containing `when`."""
    seed = daily_seed(when)
    logger.debug("Describing daily %s (debug=%s)", seed, debug)
    profile = daily_profile(seed, debug=debug)
    first_fruit = next(
        (cell for cell in profile.fruit_sequence
         if cell not in profile.walls and cell not in INITIAL_SNAKE),
        None,
    )
    state = GameState(
        phase="START",
        mode=DAILY,
        snake=list(INITIAL_SNAKE),
        direction=UP,
        fruit=first_fruit,
        kiwi=None,
        walls=profile.walls,
        score=0,
        bonus_score=0,
        lives=0,
        elapsed_time=0,
        target_fruits=profile.target_fruits,
        total_kiwis=profile.total_kiwis,
        kiwi_count=0,
        countdown=0,
        speed=profile.speed_for_score(0),
        fruit_index=0,
        daily_number=daily_number(when),
    )
    lines = [
        f"Snakle #{state.daily_number} (seed {seed})",
        f"Target: {profile.target_fruits} fruits",
        f"Kiwis: {profile.total_kiwis}",
        f"Walls: {len(profile.walls)}",
        f"Speed step: {profile.speed_increment} ms per fruit",
        "",
        state.print_board(),
    ]
    return "\n".join(lines)


def main():
    parser = argparse.ArgumentParser(
        description="Show the Snakle daily puzzle for a date",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=__doc__
    )
    parser.add_argument(
        "--date",
        type=parse_date,
        default=None,
        help="UTC date as YYYY-MM-DD (default: today)"
    )
    parser.add_argument(
        "--debug",
        action="store_true",
        help="Show the debug puzzle (3 fruits, 1 kiwi, single wall)"
    )
    args = parser.parse_args()

    settings = load_settings()
    logging.basicConfig(
        level=settings.log_level,
        format="%(asctime)s [%(levelname)s] %(message)s",
    )

    when = args.date or datetime.now(timezone.utc)
    print(describe_daily(when, debug=args.debug or settings.debug))
    if args.date is None:
        print(f"\nNext puzzle in {time_to_next_puzzle(when)}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
