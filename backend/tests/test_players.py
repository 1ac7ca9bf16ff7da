"""
Tests for scripted players and the GameState snapshot they read.
"""

import os
import random
import sys

import pytest

# Add backend to path for imports
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from domain.constants import UP, DOWN, LEFT, RIGHT, VALID_MOVES, DAILY, PLAYING  # noqa: E402
from domain.game_state import GameState  # noqa: E402
from players import (  # noqa: E402
    Player,
    RandomPlayer,
    GreedyPlayer,
    get_player_class,
    list_variants,
    AVAILABLE_VARIANTS,
)
from players.base import safe_moves, step  # noqa: E402


def make_state(snake, fruit=None, kiwi=None, walls=frozenset(), direction=UP):
    return GameState(
        phase=PLAYING,
        mode=DAILY,
        snake=snake,
        direction=direction,
        fruit=fruit,
        kiwi=kiwi,
        walls=frozenset(walls),
        score=2,
        bonus_score=5,
        lives=1,
        elapsed_time=30,
        target_fruits=12,
        total_kiwis=1,
        kiwi_count=1,
        countdown=0,
        speed=120,
        fruit_index=3,
        daily_number=7,
    )


class TestGameState:
    """Tests for the GameState snapshot."""

    def test_total_score(self):
        assert make_state([(5, 5)]).total_score == 7

    def test_to_dict(self):
        data = make_state([(5, 5), (5, 6)], fruit=(1, 2), walls={(3, 3)}).to_dict()
        assert data["phase"] == PLAYING
        assert data["snake"] == [(5, 5), (5, 6)]
        assert data["fruit"] == (1, 2)
        assert data["walls"] == [(3, 3)]
        assert data["daily_number"] == 7

    def test_print_board(self):
        state = make_state([(2, 1), (2, 2)], fruit=(0, 0), kiwi=(4, 0), walls={(1, 3)})
        rows = state.print_board().split("\n")

        assert len(rows) == 21
        assert rows[0].split()[1:] == ["F", ".", ".", ".", "K"] + ["."] * 15
        assert rows[1].split()[3] == "H"
        assert rows[2].split()[3] == "o"
        assert rows[3].split()[2] == "#"
        assert rows[-1].split()[:3] == ["0", "1", "2"]

    def test_repr(self):
        assert "score=2/12" in repr(make_state([(5, 5)]))


class TestHelpers:
    """Tests for the shared move helpers."""

    def test_step_wraps(self):
        assert step((0, 0), LEFT, 20) == (19, 0)
        assert step((0, 0), UP, 20) == (0, 19)
        assert step((19, 19), RIGHT, 20) == (0, 19)
        assert step((19, 19), DOWN, 20) == (19, 0)

    def test_safe_moves_exclude_walls_and_body(self):
        state = make_state([(5, 5), (5, 6)], walls={(4, 5)})
        assert set(safe_moves(state)) == {UP, RIGHT}


class TestRandomPlayer:
    """Tests for RandomPlayer."""

    def test_returns_valid_move(self):
        player = RandomPlayer(rng=random.Random(1))
        assert player.get_move(make_state([(5, 5), (5, 6)])) in VALID_MOVES

    def test_only_safe_move(self):
        walls = {(4, 5), (6, 5), (5, 4)}
        player = RandomPlayer(rng=random.Random(1))
        state = make_state([(5, 5), (4, 4)], walls=walls)
        for _ in range(20):
            assert player.get_move(state) == DOWN

    def test_boxed_in_still_moves(self):
        walls = {(4, 5), (6, 5), (5, 4), (5, 6)}
        player = RandomPlayer(rng=random.Random(1))
        assert player.get_move(make_state([(5, 5)], walls=walls)) in VALID_MOVES


class TestGreedyPlayer:
    """Tests for GreedyPlayer."""

    def test_heads_for_fruit(self):
        player = GreedyPlayer(rng=random.Random(0))
        assert player.get_move(make_state([(5, 5), (5, 6)], fruit=(5, 2))) == UP
        assert player.get_move(make_state([(5, 5), (5, 6)], fruit=(8, 5))) == RIGHT

    def test_uses_wrap_around(self):
        player = GreedyPlayer(rng=random.Random(0))
        state = make_state([(1, 5), (2, 5)], fruit=(18, 5), direction=LEFT)
        assert player.get_move(state) == LEFT

    def test_routes_around_walls(self):
        player = GreedyPlayer(rng=random.Random(0))
        state = make_state([(5, 5), (5, 6)], fruit=(5, 3), walls={(5, 4)})
        assert player.get_move(state) in (LEFT, RIGHT)

    def test_targets_kiwi_without_fruit(self):
        player = GreedyPlayer(rng=random.Random(0))
        state = make_state([(5, 5), (5, 6)], kiwi=(2, 5))
        assert player.get_move(state) == LEFT

    def test_falls_back_when_unreachable(self):
        walls = {(4, 5), (6, 5), (5, 4)}
        player = GreedyPlayer(rng=random.Random(0))
        state = make_state([(5, 5), (5, 6)], fruit=(0, 0), walls=walls)
        assert player.get_move(state) in VALID_MOVES


class TestVariantRegistry:
    """Tests for the player registry."""

    def test_default_is_greedy(self):
        assert get_player_class() is GreedyPlayer
        assert get_player_class("  ") is GreedyPlayer

    def test_lookup_is_case_insensitive(self):
        assert get_player_class("Random") is RandomPlayer

    def test_unknown_variant(self):
        with pytest.raises(ValueError, match="Unknown player variant"):
            get_player_class("oracle")

    def test_every_variant_is_a_player(self):
        for key in AVAILABLE_VARIANTS:
            assert issubclass(get_player_class(key), Player)
        assert [v["key"] for v in list_variants()] == AVAILABLE_VARIANTS

    def test_base_player_is_abstract(self):
        with pytest.raises(NotImplementedError):
            Player().get_move(make_state([(5, 5)]))
