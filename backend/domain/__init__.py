"""
Domain entities for the Snakle game engine.

This module contains the puzzle generators and game entities that are
independent of infrastructure concerns (storage, timers, rendering).
"""

from .constants import (
    UP, DOWN, LEFT, RIGHT, VALID_MOVES, DIRECTIONS, OPPOSITES,
    GRID_SIZE, INITIAL_SPEED, MIN_SPEED,
    DAILY, CLASSIC, TUTORIAL, VALID_MODES,
    START, COUNTDOWN, PLAYING, DEATH, VICTORY,
)
from .rng import SeededRNG
from .daily import daily_seed, daily_number, time_to_next_puzzle, format_time
from .level_generator import generate_level, is_connected
from .fruit_sequence import DailyPuzzle, build_daily_puzzle
from .mode_profile import ModeProfile, build_profile
from .snake import Snake
from .game_state import GameState

__all__ = [
    'UP', 'DOWN', 'LEFT', 'RIGHT', 'VALID_MOVES', 'DIRECTIONS', 'OPPOSITES',
    'GRID_SIZE', 'INITIAL_SPEED', 'MIN_SPEED',
    'DAILY', 'CLASSIC', 'TUTORIAL', 'VALID_MODES',
    'START', 'COUNTDOWN', 'PLAYING', 'DEATH', 'VICTORY',
    'SeededRNG',
    'daily_seed', 'daily_number', 'time_to_next_puzzle', 'format_time',
    'generate_level', 'is_connected',
    'DailyPuzzle', 'build_daily_puzzle',
    'ModeProfile', 'build_profile',
    'Snake',
    'GameState',
]
