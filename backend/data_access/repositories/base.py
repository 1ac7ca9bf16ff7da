"""
Base repositories with connection management.

Provides a context manager for database connections that handles:
- Automatic connection cleanup
- Transaction commit on success
- Transaction rollback on failure
"""

from contextlib import contextmanager
from typing import Generator, Any, Optional

from database import get_connection, init_database


class KeyValueRepository:
    """
    Interface for the string key-value store the game persists into.

    Values are strings; callers own their encoding.
    """

    def get(self, key: str) -> Optional[str]:
        """Return the stored value, or None when the key is absent."""
        raise NotImplementedError

    def set(self, key: str, value: str) -> None:
        """Store a value, replacing any previous one."""
        raise NotImplementedError

    def delete(self, key: str) -> None:
        """Remove a key; absent keys are ignored."""
        raise NotImplementedError


class BaseRepository:
    """
    Base class for SQLite-backed repositories.

    Provides connection management via context manager pattern.
    Subclasses should use self.connection() to get database connections.
    """

    def __init__(self, db_path: Optional[str] = None, create_schema: bool = True):
        self.db_path = db_path
        if create_schema:
            init_database(db_path)

    @contextmanager
    def connection(self, auto_commit: bool = True) -> Generator[Any, None, None]:
        """
        Context manager for database connections.

        Automatically handles:
        - Opening a connection to the configured database
        - Committing on successful exit (if auto_commit=True)
        - Rolling back on exception
        - Closing the connection in all cases

        Args:
            auto_commit: If True, commit transaction on successful exit.

        Yields:
            A tuple of (connection, cursor) for database operations.

        Example:
            with self.connection() as (conn, cursor):
                cursor.execute("SELECT value FROM kv_store WHERE key = ?", (key,))
                row = cursor.fetchone()
        """
        conn = get_connection(self.db_path)
        cursor = conn.cursor()
        try:
            yield conn, cursor
            if auto_commit:
                conn.commit()
        except Exception:
            conn.rollback()
            raise
        finally:
            cursor.close()
            conn.close()

    @contextmanager
    def read_connection(self) -> Generator[Any, None, None]:
        """
        Context manager for read-only operations.

        Same as connection() but with auto_commit=False since
        read operations don't need commits.
        """
        with self.connection(auto_commit=False) as handles:
            yield handles
