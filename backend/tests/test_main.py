"""
Tests for main.py - the Snakle game session.

Sessions run on a virtual clock with a pinned date (2024-01-01, puzzle #1)
and a seeded random source, so every timer and spawn is reproducible.
"""

import dataclasses
import json
import os
import random
import sys
from datetime import datetime, timezone

import pytest

# Add backend to path for imports
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from main import GameSession, play_session  # noqa: E402
import main  # noqa: E402
from config import Settings  # noqa: E402
from data_access import (  # noqa: E402
    DailyRecord,
    InMemoryKeyValueRepository,
    load_daily_record,
    save_daily_record,
    get_classic_high_score,
    has_played_tutorial,
)
from domain.constants import (  # noqa: E402
    DAILY, CLASSIC, TUTORIAL,
    START, COUNTDOWN, PLAYING, DEATH, VICTORY,
    DOWN, INITIAL_SNAKE, INITIAL_SPEED, MIN_SPEED, LEFT,
)
from domain.snake import Snake  # noqa: E402
from players import GreedyPlayer  # noqa: E402

NOW = datetime(2024, 1, 1, 12, 0, tzinfo=timezone.utc)
DATE_KEY = "2024-1-1"
COUNTDOWN_MS = 3000


def make_session(store=None, debug=True, **kwargs):
    return GameSession(
        store=store if store is not None else InMemoryKeyValueRepository(),
        debug=debug,
        now=lambda: NOW,
        rng=random.Random(0),
        **kwargs
    )


def start_playing(session, mode=DAILY):
    session.begin(mode)
    session.advance(COUNTDOWN_MS)
    assert session.phase == PLAYING


def put_wall_ahead(session):
    ahead = session.snake.next_head()
    session.profile = dataclasses.replace(session.profile, walls=frozenset({ahead}))
    if session.fruit == ahead:
        session.fruit = None


def eat_fruit_ahead(session):
    session.fruit = session.snake.next_head()
    session.advance(session.speed)


class TestCountdown:
    """Tests for START -> COUNTDOWN -> PLAYING."""

    def test_initial_phase(self):
        session = make_session()
        assert session.phase == START
        assert session.get_state().phase == START

    def test_countdown_steps(self):
        session = make_session()
        session.begin(DAILY)
        assert session.phase == COUNTDOWN
        assert session.countdown == 3

        session.advance(1000)
        assert session.countdown == 2
        session.advance(1999)
        assert session.phase == COUNTDOWN
        assert session.countdown == 1

        session.advance(1)
        assert session.phase == PLAYING
        assert session.fruit is not None

    def test_no_movement_during_countdown(self):
        session = make_session()
        session.begin(DAILY)
        session.advance(2999)
        assert list(session.snake.positions) == INITIAL_SNAKE

    def test_rapid_restart_leaves_no_stale_countdown(self):
        """A countdown from an abandoned session never fires into the next one."""
        session = make_session()
        session.begin(DAILY)
        session.advance(1500)
        session.return_to_menu()
        assert session.scheduler.pending == 0

        session.begin(DAILY)
        session.advance(1600)
        assert session.countdown == 2
        session.advance(1399)
        assert session.phase == COUNTDOWN
        session.advance(1)
        assert session.phase == PLAYING

    def test_first_fruit_comes_from_the_sequence(self):
        session = make_session()
        start_playing(session)
        assert session.fruit == (12, 17)
        assert session.fruit_index == 1

    def test_inputs_ignored_outside_playing(self):
        session = make_session()
        session.begin(DAILY)
        session.change_direction(LEFT)
        assert session.snake.pending_direction is None

    def test_unknown_direction_rejected(self):
        session = make_session()
        with pytest.raises(ValueError):
            session.change_direction("SIDEWAYS")

    def test_unknown_mode_rejected(self):
        session = make_session()
        with pytest.raises(ValueError, match="Unknown mode"):
            session.select_mode("ARCADE")


class TestPlaying:
    """Tests for ticks, fruit, kiwis and deaths in the daily mode."""

    def test_snake_moves_each_tick(self):
        session = make_session()
        start_playing(session)
        session.advance(INITIAL_SPEED)
        assert session.snake.head == (10, 9)
        assert len(session.snake) == 3

    def test_eating_fruit(self):
        session = make_session()
        start_playing(session)
        eat_fruit_ahead(session)

        assert session.score == 1
        assert session.speed == INITIAL_SPEED - 23
        assert session.fruit is not None
        assert session.fruit not in session.snake
        assert session.fruit_index >= 2

        session.advance(session.speed)
        assert len(session.snake) == 4

        record = load_daily_record(session.store, DATE_KEY)
        assert record.score == 1
        assert record.completed is False

    def test_wall_death(self):
        session = make_session()
        start_playing(session)
        put_wall_ahead(session)
        session.advance(session.speed)

        assert session.phase == DEATH
        assert session.lives == 1
        record = load_daily_record(session.store, DATE_KEY)
        assert record.lives == 1
        assert record.targetFruits == 3
        assert record.totalKiwis == 1

    def test_snake_frozen_after_death(self):
        session = make_session()
        start_playing(session)
        put_wall_ahead(session)
        session.advance(session.speed)
        body = list(session.snake.positions)
        session.advance(2000)
        assert list(session.snake.positions) == body

    def test_self_collision_death(self):
        session = make_session()
        start_playing(session)
        session.snake = Snake([(3, 3), (4, 3), (4, 4), (3, 4), (2, 4)], direction=LEFT)
        session.change_direction(DOWN)
        session.advance(session.speed)

        assert session.phase == DEATH
        assert session.snake.death_reason == "self"
        assert session.lives == 1

    def test_dismiss_death_counts_down_again(self):
        session = make_session()
        start_playing(session)
        eat_fruit_ahead(session)
        put_wall_ahead(session)
        session.advance(session.speed)
        assert session.phase == DEATH

        session.dismiss_death()
        assert session.phase == COUNTDOWN
        assert list(session.snake.positions) == INITIAL_SNAKE
        assert session.kiwi is None
        assert session.score == 1

        session.profile = dataclasses.replace(session.profile, walls=frozenset())
        session.advance(COUNTDOWN_MS)
        assert session.phase == PLAYING
        assert session.lives == 1

    def test_kiwi_expires(self):
        session = make_session()
        start_playing(session)
        assert session.kiwi is not None

        # Somewhere the snake's column never reaches
        session.kiwi = (0, 0)
        session.advance(4999)
        assert session.kiwi == (0, 0)
        session.advance(1)
        assert session.kiwi is None

        session.advance(1000)
        assert session.kiwi is None

    def test_eating_kiwi(self):
        session = make_session()
        start_playing(session)
        assert session.kiwi is not None

        session.kiwi = session.snake.next_head()
        session.advance(session.speed)

        assert session.kiwi is None
        assert session.kiwi_count == 1
        assert session.bonus_score == 5
        assert session.score == 0
        assert session.total_score == 5
        assert load_daily_record(session.store, DATE_KEY).kiwiCount == 1

        # Daily kiwis do not grow the snake
        session.advance(session.speed)
        assert len(session.snake) == 3

    def test_elapsed_time(self):
        session = make_session()
        start_playing(session)
        session.kiwi = None
        session.advance(2500)
        assert session.elapsed_time == 2


class TestVictoryAndRecords:
    """Tests for victory, the daily record and replays."""

    def test_debug_daily_victory(self):
        session = make_session()
        start_playing(session)
        for _ in range(3):
            eat_fruit_ahead(session)

        assert session.phase == VICTORY
        assert session.scheduler.pending == 0
        assert session.kiwi is None

        record = load_daily_record(session.store, DATE_KEY)
        assert record.completed is True
        assert record.score == 3

        state = session.get_state()
        assert state.daily_number == 1
        assert state.next_puzzle_in == "12h 0m 0s"

    def test_completed_record_short_circuits(self):
        store = InMemoryKeyValueRepository()
        save_daily_record(store, DATE_KEY, DailyRecord(
            score=3, lives=2, elapsedTime=40, kiwiCount=1,
            completed=True, targetFruits=3, totalKiwis=1,
        ))
        session = make_session(store)
        session.begin(DAILY)

        assert session.phase == VICTORY
        assert session.score == 3
        assert session.lives == 2
        assert session.elapsed_time == 40
        assert session.total_score == 8
        assert session.scheduler.pending == 0

    def test_corrupted_record_starts_fresh(self):
        store = InMemoryKeyValueRepository({"daily:" + DATE_KEY: "}{"})
        session = make_session(store)
        session.begin(DAILY)
        assert session.phase == COUNTDOWN
        assert session.score == 0
        assert session.lives == 0

    def test_resume_charges_a_life(self):
        store = InMemoryKeyValueRepository()
        save_daily_record(store, DATE_KEY, DailyRecord(
            score=1, lives=1, elapsedTime=12, kiwiCount=0,
            completed=False, targetFruits=3, totalKiwis=1,
        ))
        session = make_session(store)
        session.begin(DAILY)

        assert session.phase == COUNTDOWN
        assert session.lives == 2
        assert session.score == 1
        assert session.fruit_index == 1
        assert session.elapsed_time == 12
        assert session.speed == INITIAL_SPEED - 23

        session.advance(COUNTDOWN_MS)
        assert session.fruit == (12, 0)
        assert session.fruit_index == 2

    def test_each_resume_costs_a_life(self):
        """Interrupting again before any progress still charges the penalty."""
        store = InMemoryKeyValueRepository()
        save_daily_record(store, DATE_KEY, DailyRecord(
            score=1, lives=1, elapsedTime=12, kiwiCount=0,
            completed=False, targetFruits=3, totalKiwis=1,
        ))
        seen = []
        for _ in range(3):
            session = make_session(store)
            session.begin(DAILY)
            session.advance(1500)
            seen.append(session.lives)
            session.return_to_menu()

        assert seen == [2, 3, 4]
        assert load_daily_record(store, DATE_KEY).lives == 4

    def test_resume_does_not_offer_an_eaten_kiwi_again(self):
        """A kiwi eaten before the interruption stays spent after resuming."""
        store = InMemoryKeyValueRepository()
        session = make_session(store)
        start_playing(session)
        assert session.kiwi is not None
        session.kiwi = session.snake.next_head()
        session.advance(session.speed)
        assert load_daily_record(store, DATE_KEY).kiwiCount == 1

        resumed = make_session(store)
        resumed.begin(DAILY)
        resumed.advance(COUNTDOWN_MS)
        assert resumed.kiwi_count == 1
        assert resumed.kiwi is None

        resumed.advance(2000)
        assert resumed.kiwi is None
        assert resumed.kiwi_count <= resumed.total_kiwis

    def test_replay_is_practice(self):
        store = InMemoryKeyValueRepository()
        done = DailyRecord(score=3, lives=0, elapsedTime=9, kiwiCount=0,
                           completed=True, targetFruits=3, totalKiwis=1)
        save_daily_record(store, DATE_KEY, done)
        session = make_session(store)
        session.begin(DAILY)
        session.replay()

        assert session.phase == COUNTDOWN
        assert session.score == 0
        session.advance(COUNTDOWN_MS)
        put_wall_ahead(session)
        session.advance(session.speed)

        assert session.phase == DEATH
        assert load_daily_record(store, DATE_KEY) == done

    def test_return_to_menu_cancels_everything(self):
        session = make_session()
        start_playing(session)
        session.return_to_menu()
        assert session.phase == START
        assert session.scheduler.pending == 0
        assert session.profile is None
        assert session.walls == frozenset()

    def test_switching_mode_abandons_session(self):
        session = make_session()
        start_playing(session)
        session.select_mode(TUTORIAL)
        assert session.phase == START
        assert session.scheduler.pending == 0


class TestOtherModes:
    """Tests for Classic and Tutorial."""

    def test_tutorial_victory_sets_flag(self):
        store = InMemoryKeyValueRepository()
        session = make_session(store, debug=False)
        start_playing(session, TUTORIAL)
        assert session.walls == frozenset()
        assert session.target_fruits == 3

        for _ in range(3):
            eat_fruit_ahead(session)

        assert session.phase == VICTORY
        assert has_played_tutorial(store) is True
        assert load_daily_record(store, DATE_KEY) is None
        assert session.get_state().daily_number is None

    def test_classic_death_records_high_score_and_resets(self):
        store = InMemoryKeyValueRepository()
        session = make_session(store, debug=False, classic_seed="fixed-run")
        start_playing(session, CLASSIC)
        assert session.target_fruits is None

        eat_fruit_ahead(session)
        assert session.score == 1
        assert session.speed == INITIAL_SPEED - 2

        session.fruit = None
        put_wall_ahead(session)
        session.advance(session.speed)

        assert session.phase == DEATH
        assert session.high_score == 1
        assert get_classic_high_score(store) == 1
        assert load_daily_record(store, DATE_KEY) is None

        session.dismiss_death()
        assert session.score == 0
        assert session.bonus_score == 0
        assert session.speed == INITIAL_SPEED
        assert session.lives == 1

    def test_classic_kiwi_grows(self):
        session = make_session(debug=False, classic_seed="fixed-run")
        start_playing(session, CLASSIC)
        session.fruit = (0, 0)
        session.kiwi = session.snake.next_head()
        session.advance(session.speed)
        session.advance(session.speed)

        assert session.bonus_score == 5
        assert len(session.snake) == 4

    def test_speed_never_below_minimum(self):
        session = make_session(debug=False, classic_seed="fixed-run")
        start_playing(session, CLASSIC)
        session.profile = dataclasses.replace(session.profile, walls=frozenset(), speed_increment=30)

        for _ in range(3):
            eat_fruit_ahead(session)

        assert session.score == 3
        assert session.speed == MIN_SPEED


class TestHeadlessPlay:
    """Tests for play_session() and the CLI entry point."""

    def test_greedy_player_completes_debug_daily(self):
        store = InMemoryKeyValueRepository()
        session = make_session(store)
        state = play_session(session, GreedyPlayer(rng=random.Random(0)), mode=DAILY)

        assert state.phase == VICTORY
        assert state.score == 3
        record = load_daily_record(store, DATE_KEY)
        assert record.completed is True
        assert record.score == 3

    def test_tick_budget_stops_the_run(self):
        session = make_session(debug=False, classic_seed="fixed-run")
        state = play_session(session, GreedyPlayer(rng=random.Random(0)), mode=CLASSIC, max_ticks=5)
        assert state.phase == PLAYING

    def test_main_prints_summary(self, monkeypatch, capsys):
        monkeypatch.setattr(sys, "argv", ["main.py", "--mode", "daily", "--debug", "--seed", "3"])
        monkeypatch.setattr(main, "load_settings", lambda: Settings())

        assert main.main() == 0

        summary = json.loads(capsys.readouterr().out)
        assert summary["mode"] == DAILY
        assert summary["phase"] == VICTORY
        assert summary["target_fruits"] == 3
        assert "walls" not in summary
        assert summary["high_score"] == 0
