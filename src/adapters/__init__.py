"""Adapters for external systems.

This module contains implementations of the counter store protocol
for the supported storage backends.
"""

from src.adapters.factory import create_repository
from src.adapters.memory_repository import MemoryRepository
from src.adapters.sqlite_repository import SQLiteRepository

__all__ = [
    "MemoryRepository",
    "SQLiteRepository",
    "create_repository",
]
