"""
Mode profiles: the policies that make Daily, Classic and Tutorial differ.

The session never branches on the mode name directly; it asks its profile
what the target is, when a kiwi is due, what a kiwi is worth, what to
persist and what a death costs.
"""

import logging
import random
from dataclasses import dataclass
from typing import FrozenSet, Iterable, Optional, Tuple

from .constants import (
    DAILY, CLASSIC, TUTORIAL, VALID_MODES,
    INITIAL_SPEED, MIN_SPEED, SPEED_DECREMENT,
    CLASSIC_SEQUENCE_LENGTH, TUTORIAL_SEQUENCE_LENGTH,
    CLASSIC_KIWI_EVERY, KIWI_BONUS_POINTS,
    DEBUG_WALLS, DEBUG_TARGET_FRUITS, DEBUG_TOTAL_KIWIS,
)
from .fruit_sequence import build_daily_puzzle, generate_sequence, random_sequence
from .level_generator import generate_level
from .rng import SeededRNG

logger = logging.getLogger(__name__)

Point = Tuple[int, int]


def speed_increment_for_target(target: int) -> int:
    """Per-fruit speed-up that spreads the full speed range over the target."""
    return max(1, (INITIAL_SPEED - MIN_SPEED) // target)


def clamp_speed(speed: int) -> int:
    return max(MIN_SPEED, min(INITIAL_SPEED, speed))


@dataclass(frozen=True)
class ModeProfile:
    """
    Attributes:
        mode: DAILY, CLASSIC or TUTORIAL
        seed: seed the layout/sequence came from (None for unseeded modes)
        walls: obstacle cells for the whole session
        fruit_sequence: candidate fruit cells in spawn order
        target_fruits: fruits for victory, None when endless
        total_kiwis: kiwi quota, None when kiwis recur without limit
        speed_increment: ms removed from the tick interval per fruit
        kiwi_bonus_points: points a kiwi is worth
        kiwi_grows: whether eating a kiwi also lengthens the snake
        persists_daily: write the daily record for this session
        marks_tutorial: set the tutorial flag on victory
        tracks_high_score: keep the classic high score up to date
        death_resets_progress: a death starts a fresh run instead of continuing
    """
    mode: str
    seed: Optional[str]
    walls: FrozenSet[Point]
    fruit_sequence: Tuple[Point, ...]
    target_fruits: Optional[int]
    total_kiwis: Optional[int]
    speed_increment: int
    kiwi_bonus_points: int = KIWI_BONUS_POINTS
    kiwi_grows: bool = False
    persists_daily: bool = False
    marks_tutorial: bool = False
    tracks_high_score: bool = False
    death_resets_progress: bool = False
    kiwi_every: int = CLASSIC_KIWI_EVERY

    @property
    def has_target(self) -> bool:
        return self.target_fruits is not None

    def speed_for_score(self, score: int) -> int:
        """Tick interval after `score` fruits, clamped to the allowed range."""
        return clamp_speed(INITIAL_SPEED - score * self.speed_increment)

    def kiwi_thresholds(self) -> Tuple[int, ...]:
        """
        Cursor positions at which a kiwi becomes due in finite-target modes.

        The target is split into (quota + 1) equal stretches and one kiwi is
        offered at the end of each stretch but the last.
        """
        if not self.has_target or not self.total_kiwis:
            return ()
        interval = self.target_fruits // (self.total_kiwis + 1)
        return tuple(interval * k for k in range(1, self.total_kiwis + 1))

    def due_kiwi(self, fruit_index: int, score: int, used: Iterable[int]) -> Optional[int]:
        """
        Return the key of a kiwi that should spawn now, or None.

        Finite-target modes key kiwis by their slot number once the fruit
        cursor reaches the slot's threshold. Endless modes key them by the
        score, one per positive multiple of `kiwi_every`.
        """
        used = set(used)
        if self.has_target:
            for slot, threshold in enumerate(self.kiwi_thresholds(), start=1):
                if slot not in used and fruit_index >= threshold:
                    return slot
            return None

        if score > 0 and score % self.kiwi_every == 0 and score not in used:
            return score
        return None

    def passed_kiwis(self, fruit_index: int) -> Tuple[int, ...]:
        """Slots whose threshold lies strictly before a resumed cursor."""
        return tuple(
            slot for slot, threshold in enumerate(self.kiwi_thresholds(), start=1)
            if threshold < fruit_index
        )


def daily_profile(seed: str, debug: bool = False) -> ModeProfile:
    puzzle = build_daily_puzzle(seed, debug=debug)
    walls = DEBUG_WALLS if debug else generate_level(seed)
    return ModeProfile(
        mode=DAILY,
        seed=seed,
        walls=walls,
        fruit_sequence=puzzle.fruit_sequence,
        target_fruits=puzzle.target_fruits,
        total_kiwis=puzzle.total_kiwis,
        speed_increment=speed_increment_for_target(puzzle.target_fruits),
        persists_daily=True,
    )


def classic_profile(seed: Optional[str] = None) -> ModeProfile:
    """Endless mode on a fresh random layout; pass a seed to pin it."""
    if seed is None:
        seed = str(random.random())
    walls = generate_level(seed)
    sequence = generate_sequence(SeededRNG(seed), CLASSIC_SEQUENCE_LENGTH)
    return ModeProfile(
        mode=CLASSIC,
        seed=seed,
        walls=walls,
        fruit_sequence=sequence,
        target_fruits=None,
        total_kiwis=None,
        speed_increment=SPEED_DECREMENT,
        kiwi_grows=True,
        tracks_high_score=True,
        death_resets_progress=True,
    )


def tutorial_profile(rng: Optional[random.Random] = None) -> ModeProfile:
    return ModeProfile(
        mode=TUTORIAL,
        seed=None,
        walls=frozenset(),
        fruit_sequence=random_sequence(TUTORIAL_SEQUENCE_LENGTH, rng),
        target_fruits=DEBUG_TARGET_FRUITS,
        total_kiwis=DEBUG_TOTAL_KIWIS,
        speed_increment=speed_increment_for_target(DEBUG_TARGET_FRUITS),
        marks_tutorial=True,
    )


def build_profile(
    mode: str,
    day_seed: str,
    debug: bool = False,
    classic_seed: Optional[str] = None,
    rng: Optional[random.Random] = None
) -> ModeProfile:
    """
    Build the profile for a mode.

    Raises:
        ValueError: If the mode is not recognized.
    """
    if mode not in VALID_MODES:
        available = ", ".join(sorted(VALID_MODES))
        raise ValueError(f"Unknown mode '{mode}'. Available modes: {available}")

    if mode == DAILY:
        profile = daily_profile(day_seed, debug=debug)
    elif mode == CLASSIC:
        profile = classic_profile(classic_seed)
    else:
        profile = tutorial_profile(rng)

    logger.info(
        "Built %s profile: seed=%r walls=%d target=%s kiwis=%s",
        profile.mode, profile.seed, len(profile.walls),
        profile.target_fruits, profile.total_kiwis,
    )
    return profile
