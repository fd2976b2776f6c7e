"""Unit tests for MemoryRepository.

The in-memory store backs the router and dispatcher tests, so these tests
check it agrees with SQLiteRepository on counting, flooring and ordering.
"""

import pytest

from src.adapters import MemoryRepository, SQLiteRepository, create_repository
from src.core.errors import ItemNotFoundError
from src.ports.repositories import AsyncUsageRepository, ItemKind
from tests.conftest import GUILD_ID, OTHER_GUILD_ID
from tests.mocks.clock import FakeClock


class TestLifecycle:
    """Tests for connect/close."""

    async def test_requires_connection(self) -> None:
        """Test that calls before connect() raise RuntimeError."""
        repo = MemoryRepository()

        with pytest.raises(RuntimeError, match="not connected"):
            await repo.upsert_touch(ItemKind.EMOJI, GUILD_ID, 1, "a")

    async def test_context_manager(self) -> None:
        """Test that the context manager toggles the connection flag."""
        repo = MemoryRepository()
        async with repo:
            assert repo.is_connected
        assert not repo.is_connected

    def test_satisfies_protocol(self) -> None:
        """Test that MemoryRepository is usable where the protocol is expected."""
        repo: AsyncUsageRepository = MemoryRepository()
        assert hasattr(repo, "paged_list_filtered")


class TestCounting:
    """Tests for upsert/decrement/reset semantics."""

    async def test_touch_increments(
        self, memory_repo: MemoryRepository, clock: FakeClock
    ) -> None:
        """Test first_used is kept and last_used moves on repeat touches."""
        first = clock.now
        await memory_repo.upsert_touch(ItemKind.EMOJI, GUILD_ID, 1, "wave")
        later = clock.advance(minutes=1)
        await memory_repo.upsert_touch(ItemKind.EMOJI, GUILD_ID, 1, "wave2")

        [item] = await memory_repo.paged_list(ItemKind.EMOJI, GUILD_ID, 0, 25)

        assert item.usage_count == 2
        assert item.name == "wave2"
        assert item.first_used == first
        assert item.last_used == later

    async def test_decrement_floors_at_zero(self, memory_repo: MemoryRepository) -> None:
        """Test that decrement never drops below zero."""
        await memory_repo.upsert_touch(ItemKind.EMOJI, GUILD_ID, 1, "wave")
        await memory_repo.decrement_touch(ItemKind.EMOJI, GUILD_ID, 1)
        await memory_repo.decrement_touch(ItemKind.EMOJI, GUILD_ID, 1)

        [item] = await memory_repo.paged_list(ItemKind.EMOJI, GUILD_ID, 0, 25)
        assert item.usage_count == 0

    async def test_decrement_missing_raises(self, memory_repo: MemoryRepository) -> None:
        """Test that an untracked decrement raises ItemNotFoundError."""
        with pytest.raises(ItemNotFoundError):
            await memory_repo.decrement_touch(ItemKind.STICKER, GUILD_ID, 1)

    async def test_reset_scoped_to_server(self, memory_repo: MemoryRepository) -> None:
        """Test that reset leaves other servers untouched."""
        await memory_repo.upsert_touch(ItemKind.EMOJI, GUILD_ID, 1, "a")
        await memory_repo.upsert_touch(ItemKind.STICKER, GUILD_ID, 2, "b")
        await memory_repo.upsert_touch(ItemKind.EMOJI, OTHER_GUILD_ID, 1, "a")

        await memory_repo.reset_server(GUILD_ID)

        assert await memory_repo.count(ItemKind.EMOJI, GUILD_ID) == 0
        assert await memory_repo.count(ItemKind.STICKER, GUILD_ID) == 0
        assert await memory_repo.count(ItemKind.EMOJI, OTHER_GUILD_ID) == 1


class TestOrdering:
    """Tests for listing order."""

    async def test_paged_list_desc(
        self, memory_repo: MemoryRepository, clock: FakeClock
    ) -> None:
        """Test count DESC then last_used DESC with offset/limit."""
        await memory_repo.upsert_touch(ItemKind.EMOJI, GUILD_ID, 1, "a")
        clock.advance(seconds=1)
        await memory_repo.upsert_touch(ItemKind.EMOJI, GUILD_ID, 2, "b")
        await memory_repo.upsert_touch(ItemKind.EMOJI, GUILD_ID, 3, "c")
        await memory_repo.upsert_touch(ItemKind.EMOJI, GUILD_ID, 3, "c")

        items = await memory_repo.paged_list(ItemKind.EMOJI, GUILD_ID, 1, 2)

        assert [item.name for item in items] == ["b", "a"]

    async def test_filtered_asc(self, memory_repo: MemoryRepository, clock: FakeClock) -> None:
        """Test least-used ordering restricted to allowed ids."""
        await memory_repo.upsert_touch(ItemKind.EMOJI, GUILD_ID, 1, "a")
        await memory_repo.upsert_touch(ItemKind.EMOJI, GUILD_ID, 1, "a")
        clock.advance(seconds=1)
        await memory_repo.upsert_touch(ItemKind.EMOJI, GUILD_ID, 2, "b")
        await memory_repo.upsert_touch(ItemKind.EMOJI, GUILD_ID, 3, "gone")

        items = await memory_repo.paged_list_filtered(ItemKind.EMOJI, GUILD_ID, [1, 2], 25)

        assert [item.name for item in items] == ["b", "a"]


class TestRepositoryFactory:
    """Tests for create_repository."""

    def test_creates_sqlite(self, tmp_path) -> None:
        """Test the sqlite backend."""
        repo = create_repository("sqlite", db_path=tmp_path / "x.db")
        assert isinstance(repo, SQLiteRepository)

    def test_sqlite_requires_path(self) -> None:
        """Test the sqlite backend without db_path."""
        with pytest.raises(ValueError, match="db_path"):
            create_repository("sqlite")

    def test_creates_memory(self) -> None:
        """Test the memory backend."""
        assert isinstance(create_repository("memory"), MemoryRepository)

    def test_unknown_backend(self) -> None:
        """Test that unknown backends are rejected."""
        with pytest.raises(ValueError, match="Unsupported backend"):
            create_repository("postgres")
