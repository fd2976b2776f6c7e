"""Shared pytest fixtures for emote-tracker tests."""

from collections.abc import AsyncGenerator

import pytest
import pytest_asyncio

from src.adapters.memory_repository import MemoryRepository
from src.adapters.sqlite_repository import SQLiteRepository
from src.core.live_cache import LiveListCache
from tests.mocks.clock import FakeClock

# Configure pytest-asyncio to use auto mode for async tests
pytest_plugins = ["pytest_asyncio"]

GUILD_ID = 111111111111111111
OTHER_GUILD_ID = 222222222222222222


@pytest.fixture
def clock() -> FakeClock:
    """Provide a clock that only advances when a test moves it.

    Returns:
        FakeClock: A clock starting at 2024-01-01 12:00 UTC.
    """
    return FakeClock()


@pytest_asyncio.fixture
async def sqlite_repo(clock: FakeClock) -> AsyncGenerator[SQLiteRepository, None]:
    """Provide a connected in-memory SQLite repository.

    The repository shares the test's FakeClock, so first_used/last_used
    values are deterministic.

    Yields:
        SQLiteRepository: A fresh repository with an empty schema.
    """
    async with SQLiteRepository(":memory:", clock=clock) as repository:
        yield repository


@pytest_asyncio.fixture
async def memory_repo(clock: FakeClock) -> AsyncGenerator[MemoryRepository, None]:
    """Provide a connected in-memory repository.

    Yields:
        MemoryRepository: A fresh, empty repository.
    """
    async with MemoryRepository(clock=clock) as repository:
        yield repository


@pytest.fixture
def live_cache(clock: FakeClock) -> LiveListCache:
    """Provide an empty live list cache driven by the test clock."""
    return LiveListCache(clock=clock)
