"""
Data access layer for Snakle.

This module provides the key-value repositories and the functions that
load and save daily progress, the classic high score and the tutorial flag.
"""

from .daily_progress import (
    DailyRecord,
    daily_key,
    load_daily_record,
    save_daily_record,
    get_classic_high_score,
    update_classic_high_score,
    has_played_tutorial,
    mark_tutorial_played,
)
from .repositories import (
    KeyValueRepository,
    SqliteKeyValueRepository,
    InMemoryKeyValueRepository,
)

__all__ = [
    'DailyRecord',
    'daily_key',
    'load_daily_record',
    'save_daily_record',
    'get_classic_high_score',
    'update_classic_high_score',
    'has_played_tutorial',
    'mark_tutorial_played',
    'KeyValueRepository',
    'SqliteKeyValueRepository',
    'InMemoryKeyValueRepository',
]
