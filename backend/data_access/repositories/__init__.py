"""
Repository pattern implementations for data access.

This module provides a clean abstraction over the key-value storage the
game persists into, with proper connection management.
"""

from .base import BaseRepository, KeyValueRepository
from .kv_repository import SqliteKeyValueRepository, InMemoryKeyValueRepository

__all__ = [
    'BaseRepository',
    'KeyValueRepository',
    'SqliteKeyValueRepository',
    'InMemoryKeyValueRepository',
]
