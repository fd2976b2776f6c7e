"""Repository factory for creating counter store implementations.

Supported backends:
- "sqlite": Production SQLite-backed repository
- "memory": In-memory repository for testing

Example:
    repo = create_repository("sqlite", db_path="emote_tracker.db")
    repo = create_repository("memory")
"""

from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING, Union

from src.adapters.sqlite_repository import SQLiteRepository

if TYPE_CHECKING:
    from src.adapters.memory_repository import MemoryRepository

RepositoryType = Union["SQLiteRepository", "MemoryRepository"]


def create_repository(backend: str, **kwargs: str | Path) -> RepositoryType:
    """Create a repository instance based on the specified backend.

    Args:
        backend: "sqlite" (requires db_path kwarg) or "memory".
        **kwargs: Backend-specific configuration options.

    Returns:
        A repository instance of the appropriate type.

    Raises:
        ValueError: If the backend is not supported or required kwargs are missing.
    """
    if backend == "sqlite":
        db_path = kwargs.get("db_path")
        if db_path is None:
            raise ValueError("'db_path' is required for sqlite backend")
        return SQLiteRepository(db_path)

    if backend == "memory":
        # Only needed for testing
        from src.adapters.memory_repository import MemoryRepository

        return MemoryRepository()

    raise ValueError(
        f"Unsupported backend: {backend!r}. Supported backends: 'sqlite', 'memory'"
    )
