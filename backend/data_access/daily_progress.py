"""
Persisted player progress: the daily record, the classic high score and the
tutorial flag.

Every function takes the key-value repository explicitly. Reads treat
missing, malformed or corrupted values as absent; writes are best-effort and
never raise into the game loop.
"""

import json
import logging
import sqlite3
from dataclasses import dataclass, asdict
from typing import Any, Dict, Optional

from domain.constants import (
    DAILY_KEY_PREFIX,
    CLASSIC_HIGH_SCORE_KEY,
    HAS_PLAYED_TUTORIAL_KEY,
)
from .repositories import KeyValueRepository

logger = logging.getLogger(__name__)

_STORE_ERRORS = (sqlite3.Error, OSError, TypeError, ValueError)

_INT_FIELDS = ("score", "lives", "elapsedTime", "kiwiCount", "targetFruits", "totalKiwis")


@dataclass
class DailyRecord:
    """
    One day's progress, stored under `daily:<dateKey>`.

    Field names match the stored JSON so records written by the web client
    load unchanged.
    """
    score: int = 0
    lives: int = 0
    elapsedTime: int = 0
    kiwiCount: int = 0
    completed: bool = False
    targetFruits: int = 0
    totalKiwis: int = 0

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)

    @classmethod
    def from_dict(cls, data: Any) -> Optional["DailyRecord"]:
        """Build a record from decoded JSON, or None if it does not fit the shape."""
        if not isinstance(data, dict):
            return None
        values: Dict[str, Any] = {}
        for name in _INT_FIELDS:
            value = data.get(name)
            # bool is an int subclass; a flag in a count slot is malformed
            if not isinstance(value, int) or isinstance(value, bool) or value < 0:
                return None
            values[name] = value
        completed = data.get("completed")
        if not isinstance(completed, bool):
            return None
        values["completed"] = completed
        return cls(**values)


def daily_key(date_key: str) -> str:
    return f"{DAILY_KEY_PREFIX}{date_key}"


def _read(store: KeyValueRepository, key: str) -> Optional[str]:
    try:
        return store.get(key)
    except _STORE_ERRORS as e:
        logger.warning("Could not read %s: %s", key, e)
        return None


def _write(store: KeyValueRepository, key: str, value: Any) -> bool:
    try:
        store.set(key, json.dumps(value))
    except _STORE_ERRORS as e:
        logger.warning("Could not write %s: %s", key, e)
        return False
    return True


def _read_json(store: KeyValueRepository, key: str) -> Any:
    raw = _read(store, key)
    if raw is None:
        return None
    try:
        return json.loads(raw)
    except ValueError:
        logger.warning("Ignoring corrupted value under %s", key)
        return None


def load_daily_record(store: KeyValueRepository, date_key: str) -> Optional[DailyRecord]:
    """
    Load the record for a day.

    Returns:
        The record, or None when absent, unreadable or malformed.
    """
    key = daily_key(date_key)
    data = _read_json(store, key)
    if data is None:
        return None
    record = DailyRecord.from_dict(data)
    if record is None:
        logger.warning("Ignoring malformed daily record under %s: %r", key, data)
    return record


def save_daily_record(store: KeyValueRepository, date_key: str, record: DailyRecord) -> bool:
    """Write the record for a day. Returns False if the write failed."""
    return _write(store, daily_key(date_key), record.to_dict())


def get_classic_high_score(store: KeyValueRepository) -> int:
    value = _read_json(store, CLASSIC_HIGH_SCORE_KEY)
    if isinstance(value, int) and not isinstance(value, bool) and value >= 0:
        return value
    return 0


def update_classic_high_score(store: KeyValueRepository, score: int) -> bool:
    """
    Raise the stored high score if `score` beats it.

    Returns:
        True if a new high score was recorded.
    """
    if score <= get_classic_high_score(store):
        return False
    if _write(store, CLASSIC_HIGH_SCORE_KEY, score):
        logger.info("New classic high score: %d", score)
        return True
    return False


def has_played_tutorial(store: KeyValueRepository) -> bool:
    return _read_json(store, HAS_PLAYED_TUTORIAL_KEY) is True


def mark_tutorial_played(store: KeyValueRepository) -> bool:
    return _write(store, HAS_PLAYED_TUTORIAL_KEY, True)
