"""
Runtime settings read from the environment (and a local .env file).
"""

import os
from dataclasses import dataclass
from typing import Optional

from dotenv import load_dotenv

_TRUTHY = {"1", "true", "yes", "on"}


def _env_flag(name: str, default: bool = False) -> bool:
    value = os.getenv(name)
    if value is None:
        return default
    return value.strip().lower() in _TRUTHY


@dataclass(frozen=True)
class Settings:
    """
    Attributes:
        debug: force the tiny debug puzzle (3 fruits, 1 kiwi, one wall)
        db_path: SQLite file for persisted progress, None for the default
        log_level: level name passed to logging.basicConfig
    """
    debug: bool = False
    db_path: Optional[str] = None
    log_level: str = "INFO"


def load_settings() -> Settings:
    load_dotenv()
    return Settings(
        debug=_env_flag("SNAKLE_DEBUG"),
        db_path=os.getenv("SNAKLE_DB_PATH") or None,
        log_level=os.getenv("SNAKLE_LOG_LEVEL", "INFO").upper(),
    )
