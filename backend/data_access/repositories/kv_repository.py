"""
Key-value repositories: SQLite for real use, in-memory for tests and
throwaway sessions.
"""

from typing import Dict, Optional

from .base import BaseRepository, KeyValueRepository


class SqliteKeyValueRepository(BaseRepository, KeyValueRepository):
    """
    Repository for the kv_store table.
    """

    def get(self, key: str) -> Optional[str]:
        with self.read_connection() as (conn, cursor):
            cursor.execute("SELECT value FROM kv_store WHERE key = ?", (key,))
            row = cursor.fetchone()
        return row["value"] if row else None

    def set(self, key: str, value: str) -> None:
        with self.connection() as (conn, cursor):
            cursor.execute("""
                INSERT INTO kv_store (key, value, updated_at)
                VALUES (?, ?, CURRENT_TIMESTAMP)
                ON CONFLICT(key) DO UPDATE SET
                    value = excluded.value,
                    updated_at = CURRENT_TIMESTAMP
            """, (key, value))

    def delete(self, key: str) -> None:
        with self.connection() as (conn, cursor):
            cursor.execute("DELETE FROM kv_store WHERE key = ?", (key,))


class InMemoryKeyValueRepository(KeyValueRepository):
    """
    Dictionary-backed store; contents live as long as the object.
    """

    def __init__(self, initial: Optional[Dict[str, str]] = None):
        self.data: Dict[str, str] = dict(initial or {})

    def get(self, key: str) -> Optional[str]:
        return self.data.get(key)

    def set(self, key: str, value: str) -> None:
        self.data[key] = value

    def delete(self, key: str) -> None:
        self.data.pop(key, None)
