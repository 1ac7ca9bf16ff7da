"""
Deterministic fruit candidates and the puzzle parameters drawn alongside them.
"""

import random
from dataclasses import dataclass
from typing import Optional, Tuple

from .constants import (
    GRID_SIZE,
    MIN_FRUITS, MAX_FRUITS,
    KIWI_DAY_CHANCE, MIN_DAILY_KIWIS, MAX_DAILY_KIWIS,
    DAILY_SEQUENCE_LENGTH,
    DEBUG_TARGET_FRUITS, DEBUG_TOTAL_KIWIS,
)
from .rng import SeededRNG

Point = Tuple[int, int]


@dataclass(frozen=True)
class DailyPuzzle:
    """
    Everything a day's seed decides apart from the wall layout.

    Attributes:
        seed: the daily key the puzzle was drawn from
        target_fruits: fruits needed for victory
        total_kiwis: bonus items scheduled for the day (0 on non-kiwi days)
        fruit_sequence: candidate fruit cells in spawn order
    """
    seed: str
    target_fruits: int
    total_kiwis: int
    fruit_sequence: Tuple[Point, ...]


def generate_sequence(rng: SeededRNG, length: int) -> Tuple[Point, ...]:
    """Draw `length` candidate cells, x before y, from the rng's current position."""
    return tuple(
        (rng.next_int(0, GRID_SIZE - 1), rng.next_int(0, GRID_SIZE - 1))
        for _ in range(length)
    )


def build_daily_puzzle(seed: str, debug: bool = False) -> DailyPuzzle:
    """
    Draw the puzzle for a daily seed.

    The draw order is part of the puzzle's identity: target count, then the
    kiwi-day roll, then (only on kiwi days) the kiwi count, then the fruit
    sequence. Reordering any of these changes every later fruit.

    With debug set the target and kiwi count are fixed small values and are
    not drawn, so the sequence starts at the seed's first draw.
    """
    rng = SeededRNG(seed)

    if debug:
        target = DEBUG_TARGET_FRUITS
        total_kiwis = DEBUG_TOTAL_KIWIS
    else:
        target = rng.next_int(MIN_FRUITS, MAX_FRUITS)
        total_kiwis = 0
        if rng.next() < KIWI_DAY_CHANCE:
            total_kiwis = rng.next_int(MIN_DAILY_KIWIS, MAX_DAILY_KIWIS)

    sequence = generate_sequence(rng, DAILY_SEQUENCE_LENGTH)

    return DailyPuzzle(
        seed=seed,
        target_fruits=target,
        total_kiwis=total_kiwis,
        fruit_sequence=sequence,
    )


def random_sequence(length: int, rng: Optional[random.Random] = None) -> Tuple[Point, ...]:
    """Non-deterministic candidates for modes that are not shared puzzles."""
    rng = rng or random.Random()
    return tuple(
        (rng.randrange(GRID_SIZE), rng.randrange(GRID_SIZE))
        for _ in range(length)
    )
