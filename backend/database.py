"""
Database configuration and schema management for Snakle.

The game only needs a small key-value table; this module provides the
SQLite connection and creates that table.
"""

import logging
import os
import sqlite3
from pathlib import Path
from typing import Optional

logger = logging.getLogger(__name__)


def get_database_path(db_path: Optional[str] = None) -> str:
    """
    Determine the database path.

    Returns:
        Path to the SQLite database file.
        - explicit db_path argument, if given
        - SNAKLE_DB_PATH environment variable, if set
        - backend/snakle.db otherwise
    """
    if db_path:
        return db_path
    env_path = os.getenv('SNAKLE_DB_PATH')
    if env_path:
        return env_path
    backend_dir = Path(__file__).parent
    return str(backend_dir / 'snakle.db')


def get_connection(db_path: Optional[str] = None) -> sqlite3.Connection:
    """
    Get a database connection with appropriate settings.

    Returns:
        sqlite3.Connection: Database connection with row factory enabled.
    """
    conn = sqlite3.connect(get_database_path(db_path))
    conn.row_factory = sqlite3.Row  # Enable column access by name
    return conn


def init_database(db_path: Optional[str] = None) -> None:
    """
    Initialize the schema.
    Safe to call multiple times (uses IF NOT EXISTS).
    """
    path = get_database_path(db_path)
    logger.info("Initializing database at: %s", path)

    parent = Path(path).parent
    if str(parent) and not parent.exists():
        os.makedirs(parent, exist_ok=True)

    conn = get_connection(path)
    cursor = conn.cursor()
    try:
        cursor.execute("""
            CREATE TABLE IF NOT EXISTS kv_store (
                key TEXT PRIMARY KEY,
                value TEXT NOT NULL,
                updated_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP
            )
        """)
        conn.commit()
    finally:
        cursor.close()
        conn.close()
