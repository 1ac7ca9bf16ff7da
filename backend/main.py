"""
Snakle game session: one orchestrator for Daily, Classic and Tutorial play.

The session owns the snake, the puzzle for the chosen mode, the timers and
the persisted progress. A host (UI, CLI, tests) feeds it inputs, moves its
virtual clock forward with advance(), and renders get_state().
"""

import argparse
import json
import logging
import random
import sys
from datetime import datetime, timezone
from typing import Callable, Optional, Set, Tuple

from config import load_settings
from data_access import (
    DailyRecord,
    KeyValueRepository,
    InMemoryKeyValueRepository,
    SqliteKeyValueRepository,
    load_daily_record,
    save_daily_record,
    get_classic_high_score,
    update_classic_high_score,
    has_played_tutorial,
    mark_tutorial_played,
)
from domain.constants import (
    INITIAL_SPEED,
    DAILY, VALID_MODES, VALID_MOVES,
    START, COUNTDOWN, PLAYING, DEATH, VICTORY,
    COUNTDOWN_START, COUNTDOWN_STEP_MS, ELAPSED_TICK_MS,
    FRUIT_LOOKAHEAD, RANDOM_SPAWN_ATTEMPTS, KIWI_LIFETIME_MS,
)
from domain.daily import daily_seed, daily_number, time_to_next_puzzle
from domain.game_state import GameState
from domain.mode_profile import ModeProfile, build_profile, clamp_speed
from domain.snake import Snake
from players import Player, get_player_class, AVAILABLE_VARIANTS
from services.scheduler import ScheduledTask, TaskScheduler

logger = logging.getLogger(__name__)

Point = Tuple[int, int]


class GameSession:
    """
    Manages:
      - Mode selection and the mode's profile (walls, fruits, policies)
      - The snake and the live fruit / kiwi
      - Score, bonus score, lives, elapsed time and speed
      - The START -> COUNTDOWN -> PLAYING -> DEATH/VICTORY lifecycle
      - Timers (countdown, tick, elapsed clock, kiwi expiry)
      - Daily record, classic high score and tutorial flag persistence
    """

    def __init__(
        self,
        store: Optional[KeyValueRepository] = None,
        debug: bool = False,
        now: Optional[Callable[[], datetime]] = None,
        scheduler: Optional[TaskScheduler] = None,
        rng: Optional[random.Random] = None,
        classic_seed: Optional[str] = None
    ):
        self.store = store if store is not None else InMemoryKeyValueRepository()
        self.debug = debug
        self.now = now or (lambda: datetime.now(timezone.utc))
        self.scheduler = scheduler or TaskScheduler()
        self.rng = rng or random.Random()
        self.classic_seed = classic_seed

        self.mode = DAILY
        self.phase = START
        self.profile: Optional[ModeProfile] = None
        self.date_key: Optional[str] = None
        self.practice = False

        self.snake = Snake()
        self.fruit: Optional[Point] = None
        self.kiwi: Optional[Point] = None
        self.countdown = COUNTDOWN_START

        self.lives = 0
        self._reset_run()

        self.has_played_tutorial = has_played_tutorial(self.store)
        self.high_score = get_classic_high_score(self.store)

        self._countdown_task: Optional[ScheduledTask] = None
        self._tick_task: Optional[ScheduledTask] = None
        self._elapsed_task: Optional[ScheduledTask] = None
        self._kiwi_task: Optional[ScheduledTask] = None

    # ------------------------------------------------------------------
    # Inputs
    # ------------------------------------------------------------------

    def select_mode(self, mode: str) -> None:
        """
        Choose the mode for the next begin(). Abandons any session in progress.

        Raises:
            ValueError: If the mode is not recognized.
        """
        if mode not in VALID_MODES:
            available = ", ".join(sorted(VALID_MODES))
            raise ValueError(f"Unknown mode '{mode}'. Available modes: {available}")
        if self.phase != START:
            logger.info("Switching mode from %s to %s; abandoning current session", self.mode, mode)
            self._abandon()
        self.mode = mode

    def begin(self, mode: Optional[str] = None) -> None:
        """Start the selected mode: build its puzzle, resume or short-circuit, count down."""
        if mode is not None:
            self.select_mode(mode)
        if self.phase != START:
            logger.debug("begin() ignored in phase %s", self.phase)
            return

        now = self.now()
        self.date_key = daily_seed(now)
        self.profile = build_profile(
            self.mode,
            self.date_key,
            debug=self.debug,
            classic_seed=self.classic_seed,
            rng=self.rng,
        )
        self.practice = False
        self.lives = 0
        self._reset_run()
        self.snake.reset()
        self.fruit = None
        self.kiwi = None

        if self.profile.persists_daily:
            record = load_daily_record(self.store, self.date_key)
            if record is not None and record.completed:
                logger.info("Daily %s already completed; showing result", self.date_key)
                self._restore(record)
                self.phase = VICTORY
                return
            if record is not None:
                self._resume(record)
                self._persist_daily()

        self._start_countdown()

    def change_direction(self, direction: str) -> None:
        """Request a turn; applied (or rejected as a reversal) on the next tick."""
        if direction not in VALID_MOVES:
            raise ValueError(f"Unknown direction '{direction}'")
        if self.phase != PLAYING:
            logger.debug("Direction %s ignored in phase %s", direction, self.phase)
            return
        self.snake.change_direction(direction)

    def dismiss_death(self) -> None:
        """Leave the death screen and count down into a new attempt."""
        if self.phase != DEATH:
            logger.debug("dismiss_death() ignored in phase %s", self.phase)
            return

        self._cancel_kiwi()
        if self.profile.death_resets_progress:
            self._reset_run()
            self.fruit = None
        self.snake.reset()
        if self.fruit is not None and self.fruit in self.snake:
            self.fruit = None
        self._start_countdown()

    def replay(self) -> None:
        """Play the same mode again from zero after a victory."""
        if self.phase != VICTORY:
            logger.debug("replay() ignored in phase %s", self.phase)
            return

        if self.profile.persists_daily:
            # Today's result is already on record; further runs are practice
            self.practice = True
        self.lives = 0
        self._reset_run()
        self.snake.reset()
        self.fruit = None
        self.kiwi = None
        self._start_countdown()

    def return_to_menu(self) -> None:
        """Drop the session and go back to mode selection."""
        self._abandon()

    def advance(self, ms: int) -> None:
        """Let `ms` milliseconds of session time pass, firing due timers."""
        self.scheduler.advance(ms)

    # ------------------------------------------------------------------
    # Output
    # ------------------------------------------------------------------

    @property
    def walls(self) -> frozenset:
        return self.profile.walls if self.profile else frozenset()

    @property
    def target_fruits(self) -> Optional[int]:
        return self.profile.target_fruits if self.profile else None

    @property
    def total_kiwis(self) -> Optional[int]:
        return self.profile.total_kiwis if self.profile else None

    @property
    def total_score(self) -> int:
        return self.score + self.bonus_score

    def get_state(self) -> GameState:
        """Return a snapshot of the session for rendering."""
        is_daily = self.profile is not None and self.profile.persists_daily
        now = self.now()
        return GameState(
            phase=self.phase,
            mode=self.mode,
            snake=list(self.snake.positions),
            direction=self.snake.direction,
            fruit=self.fruit,
            kiwi=self.kiwi,
            walls=self.walls,
            score=self.score,
            bonus_score=self.bonus_score,
            lives=self.lives,
            elapsed_time=self.elapsed_time,
            target_fruits=self.target_fruits,
            total_kiwis=self.total_kiwis,
            kiwi_count=self.kiwi_count,
            countdown=self.countdown,
            speed=self.speed,
            fruit_index=self.fruit_index,
            daily_number=daily_number(now) if is_daily else None,
            next_puzzle_in=time_to_next_puzzle(now) if is_daily and self.phase == VICTORY else None,
            grid_size=self.snake.grid_size,
        )

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    def _reset_run(self) -> None:
        """Zero the per-run counters (lives are a session counter and are kept)."""
        self.score = 0
        self.bonus_score = 0
        self.kiwi_count = 0
        self.fruit_index = 0
        self.speed = INITIAL_SPEED
        self.elapsed_time = 0
        self._elapsed_base_ms = 0
        self._play_started_at: Optional[int] = None
        self._kiwis_used: Set[int] = set()

    def _restore(self, record: DailyRecord) -> None:
        self.score = record.score
        self.lives = record.lives
        self.elapsed_time = record.elapsedTime
        self._elapsed_base_ms = record.elapsedTime * 1000
        self.kiwi_count = record.kiwiCount
        self.bonus_score = record.kiwiCount * self.profile.kiwi_bonus_points
        self.fruit_index = record.score
        self.speed = self.profile.speed_for_score(record.score)

    def _resume(self, record: DailyRecord) -> None:
        """Continue an interrupted daily run, charging one life for the interruption."""
        self._restore(record)
        self.lives = record.lives + 1
        # Eaten kiwis are spent even when their slot is not behind the cursor
        self._kiwis_used = set(self.profile.passed_kiwis(self.fruit_index))
        self._kiwis_used.update(range(1, record.kiwiCount + 1))
        logger.info(
            "Resuming daily %s at %d/%d fruits, lives %d",
            self.date_key, self.score, self.profile.target_fruits, self.lives,
        )

    def _abandon(self) -> None:
        self.scheduler.cancel_all()
        self._countdown_task = self._tick_task = self._elapsed_task = self._kiwi_task = None
        self.phase = START
        self.profile = None
        self.practice = False
        self.lives = 0
        self._reset_run()
        self.snake.reset()
        self.fruit = None
        self.kiwi = None
        self.countdown = COUNTDOWN_START

    def _start_countdown(self) -> None:
        # A countdown left over from a rapid restart must never fire
        if self._countdown_task is not None:
            self._countdown_task.cancel()
        self.phase = COUNTDOWN
        self.countdown = COUNTDOWN_START
        self._countdown_task = self.scheduler.call_every(
            COUNTDOWN_STEP_MS, self._countdown_step, name="countdown"
        )

    def _countdown_step(self) -> None:
        self.countdown -= 1
        if self.countdown <= 0:
            self._countdown_task.cancel()
            self._countdown_task = None
            self._enter_playing()

    def _enter_playing(self) -> None:
        self.phase = PLAYING
        if self._play_started_at is None:
            self._play_started_at = self.scheduler.now()
        if self.fruit is None:
            self._spawn_fruit()
        self._check_kiwi()
        self._tick_task = self.scheduler.call_every(lambda: self.speed, self._tick, name="tick")
        self._elapsed_task = self.scheduler.call_every(ELAPSED_TICK_MS, self._update_elapsed, name="elapsed")

    def _stop_play_timers(self) -> None:
        for task in (self._tick_task, self._elapsed_task):
            if task is not None:
                task.cancel()
        self._tick_task = None
        self._elapsed_task = None

    def _update_elapsed(self) -> None:
        if self._play_started_at is None:
            return
        played_ms = self._elapsed_base_ms + self.scheduler.now() - self._play_started_at
        self.elapsed_time = played_ms // 1000

    # ------------------------------------------------------------------
    # Simulation
    # ------------------------------------------------------------------

    def _tick(self) -> None:
        """
        One simulation step:
          1) Move the snake (self collision first)
          2) Fruit: grow, score, speed up, victory or next fruit
          3) Walls
          4) Kiwi
          5) Retry a failed fruit spawn, offer a due kiwi
        """
        if self.phase != PLAYING:
            return

        if not self.snake.move():
            self._die("self")
            return

        head = self.snake.head

        if self.fruit is not None and head == self.fruit:
            self.snake.grow()
            self.score += 1
            self.speed = clamp_speed(self.speed - self.profile.speed_increment)
            self.fruit = None

            if self.profile.has_target and self.score >= self.profile.target_fruits:
                self._win()
                return

            self._spawn_fruit()
            self._persist_daily()

        if head in self.walls:
            self._die("wall")
            return

        if self.kiwi is not None and head == self.kiwi:
            self._eat_kiwi()

        if self.fruit is None:
            self._spawn_fruit()
        self._check_kiwi()

    def _die(self, reason: str) -> None:
        self.lives += 1
        self._update_elapsed()
        self._stop_play_timers()
        self.phase = DEATH
        logger.info("Snake died (%s) at score %d; lives %d", reason, self.score, self.lives)

        self._persist_daily()
        if self.profile.tracks_high_score:
            if update_classic_high_score(self.store, self.total_score):
                self.high_score = self.total_score

    def _win(self) -> None:
        self._update_elapsed()
        self.scheduler.cancel_all()
        self._countdown_task = self._tick_task = self._elapsed_task = self._kiwi_task = None
        self.kiwi = None
        self.phase = VICTORY
        logger.info(
            "Victory in %s: %d fruits, lives %d, %ds",
            self.mode, self.score, self.lives, self.elapsed_time,
        )

        self._persist_daily(completed=True)
        if self.profile.marks_tutorial and not self.has_played_tutorial:
            mark_tutorial_played(self.store)
            self.has_played_tutorial = True

    def _persist_daily(self, completed: bool = False) -> None:
        if not self.profile.persists_daily or self.practice:
            return
        record = DailyRecord(
            score=self.score,
            lives=self.lives,
            elapsedTime=self.elapsed_time,
            kiwiCount=self.kiwi_count,
            completed=completed,
            targetFruits=self.profile.target_fruits,
            totalKiwis=self.profile.total_kiwis,
        )
        save_daily_record(self.store, self.date_key, record)

    # ------------------------------------------------------------------
    # Spawning
    # ------------------------------------------------------------------

    def _occupied(self) -> Set[Point]:
        return set(self.snake.positions) | set(self.walls)

    def _random_free_cell(self, occupied: Set[Point]) -> Optional[Point]:
        """Up to RANDOM_SPAWN_ATTEMPTS uniform draws; None if all land on something."""
        size = self.snake.grid_size
        for _ in range(RANDOM_SPAWN_ATTEMPTS):
            cell = (self.rng.randrange(size), self.rng.randrange(size))
            if cell not in occupied:
                return cell
        return None

    def _spawn_fruit(self) -> bool:
        """
        Place the next fruit from the sequence.

        Looks ahead up to FRUIT_LOOKAHEAD candidates for one not on the snake,
        a wall or the kiwi; falls back to random placement. On failure no
        fruit is placed and the next tick tries again.
        """
        occupied = self._occupied()
        if self.kiwi is not None:
            occupied.add(self.kiwi)

        sequence = self.profile.fruit_sequence
        cursor = self.fruit_index
        if sequence:
            for _ in range(FRUIT_LOOKAHEAD):
                candidate = sequence[cursor % len(sequence)]
                cursor += 1
                if candidate not in occupied:
                    self.fruit = candidate
                    self.fruit_index = cursor
                    return True
            self.fruit_index = cursor

        self.fruit = self._random_free_cell(occupied)
        if self.fruit is None:
            logger.debug("Fruit spawn failed at cursor %d; retrying next tick", self.fruit_index)
            return False
        logger.debug("Fruit sequence exhausted at cursor %d; placed %s at random", cursor, self.fruit)
        return True

    def _check_kiwi(self) -> None:
        if self.phase != PLAYING or self.kiwi is not None:
            return
        key = self.profile.due_kiwi(self.fruit_index, self.score, self._kiwis_used)
        if key is None:
            return

        # A due kiwi is offered once, whether or not it finds a cell
        self._kiwis_used.add(key)
        occupied = self._occupied()
        if self.fruit is not None:
            occupied.add(self.fruit)
        cell = self._random_free_cell(occupied)
        if cell is None:
            logger.debug("No room for kiwi %s; skipping it", key)
            return

        self.kiwi = cell
        self._cancel_kiwi_timer()
        self._kiwi_task = self.scheduler.call_later(KIWI_LIFETIME_MS, self._expire_kiwi, name="kiwi")
        logger.debug("Kiwi %s spawned at %s", key, cell)

    def _expire_kiwi(self) -> None:
        self._kiwi_task = None
        self.kiwi = None

    def _eat_kiwi(self) -> None:
        self._cancel_kiwi()
        self.kiwi_count += 1
        self.bonus_score += self.profile.kiwi_bonus_points
        if self.profile.kiwi_grows:
            self.snake.grow()
        self._persist_daily()

    def _cancel_kiwi_timer(self) -> None:
        if self._kiwi_task is not None:
            self._kiwi_task.cancel()
            self._kiwi_task = None

    def _cancel_kiwi(self) -> None:
        self._cancel_kiwi_timer()
        self.kiwi = None

    def __repr__(self):
        return (
            f"<GameSession mode={self.mode} phase={self.phase} score={self.score}"
            f"/{self.target_fruits} lives={self.lives}>"
        )


# -------------------------------
# Headless play
# -------------------------------

def play_session(
    session: GameSession,
    player: Player,
    mode: Optional[str] = None,
    max_ticks: int = 5000,
    max_deaths: int = 3
) -> GameState:
    """
    Drive a session with a scripted player until victory, too many deaths or
    the tick budget runs out.

    Each loop asks the player for a direction, then advances the clock by
    exactly one tick interval so every call simulates one move.
    """
    session.begin(mode)

    ticks = 0
    while ticks < max_ticks:
        if session.phase == COUNTDOWN:
            session.advance(COUNTDOWN_STEP_MS)
        elif session.phase == PLAYING:
            session.change_direction(player.get_move(session.get_state()))
            session.advance(session.speed)
            ticks += 1
        elif session.phase == DEATH and session.lives < max_deaths:
            session.dismiss_death()
        else:
            break

    state = session.get_state()
    logger.info("Headless %s run ended in %s after %d ticks", session.mode, state.phase, ticks)
    return state


def main():
    parser = argparse.ArgumentParser(
        description="Play a headless Snakle session with a scripted player."
    )
    parser.add_argument("--mode", type=str.upper, choices=sorted(VALID_MODES), default=DAILY,
                        help="Game mode to play")
    parser.add_argument("--player", type=str, choices=AVAILABLE_VARIANTS, default="greedy",
                        help="Scripted player that steers the snake")
    parser.add_argument("--max-ticks", type=int, default=5000,
                        help="Stop after this many simulation steps")
    parser.add_argument("--max-deaths", type=int, default=3,
                        help="Stop once this many lives have been used")
    parser.add_argument("--db", type=str, default=None,
                        help="SQLite file for persisted progress (in-memory if omitted)")
    parser.add_argument("--seed", type=int, default=None,
                        help="Seed for kiwi placement and the random player")
    parser.add_argument("--debug", action="store_true",
                        help="Tiny debug puzzle: 3 fruits, 1 kiwi")
    parser.add_argument("--board", action="store_true",
                        help="Print the final board as well as the JSON summary")
    args = parser.parse_args()

    settings = load_settings()
    logging.basicConfig(
        level=settings.log_level,
        format="%(asctime)s [%(levelname)s] %(message)s",
    )

    db_path = args.db or settings.db_path
    store = SqliteKeyValueRepository(db_path) if db_path else InMemoryKeyValueRepository()
    rng = random.Random(args.seed)

    session = GameSession(store=store, debug=args.debug or settings.debug, rng=rng)
    player = get_player_class(args.player)(rng=random.Random(args.seed))

    state = play_session(
        session, player, mode=args.mode,
        max_ticks=args.max_ticks, max_deaths=args.max_deaths,
    )

    if args.board:
        print(state.print_board())
    summary = state.to_dict()
    summary.pop("walls")
    summary["high_score"] = session.high_score
    print(json.dumps(summary, indent=2))
    return 0


if __name__ == "__main__":
    sys.exit(main())
