"""In-memory implementation of the usage counter store for testing.

All data is stored in a dictionary keyed by (kind, server_id, item_id).
This adapter is designed for testing: fast, isolated, and no persistence.
It mirrors the ordering and flooring semantics of SQLiteRepository.
"""

from collections.abc import Callable, Collection
from dataclasses import replace
from datetime import UTC, datetime
from typing import Any

from src.core.errors import ItemNotFoundError
from src.ports.repositories import ItemKind, TrackedItem


class MemoryRepository:
    """In-memory implementation of AsyncUsageRepository.

    The class supports the async context manager protocol for compatibility
    with SQLiteRepository, but no actual resources need to be managed.

    Example:
        async with MemoryRepository() as repo:
            await repo.upsert_touch(ItemKind.EMOJI, 1, 111, "foo")
    """

    def __init__(self, clock: Callable[[], datetime] | None = None) -> None:
        """Initialize the repository with empty storage.

        Args:
            clock: Returns the current time. Defaults to the UTC wall clock.
        """
        self._connected: bool = False
        self._clock = clock or (lambda: datetime.now(UTC))
        self._items: dict[tuple[ItemKind, int, int], TrackedItem] = {}

    async def __aenter__(self) -> "MemoryRepository":
        """Async context manager entry: connect to the repository."""
        await self.connect()
        return self

    async def __aexit__(
        self,
        exc_type: type | None,
        exc_val: BaseException | None,
        exc_tb: Any,
    ) -> None:
        """Async context manager exit: close the repository."""
        await self.close()

    @property
    def is_connected(self) -> bool:
        return self._connected

    async def connect(self) -> None:
        """Connect to the repository (no-op for in-memory)."""
        self._connected = True

    async def close(self) -> None:
        """Close the repository (no-op for in-memory)."""
        self._connected = False

    def _ensure_connected(self) -> None:
        if not self._connected:
            raise RuntimeError(
                "Repository not connected. Call connect() or use async context manager."
            )

    def _server_items(self, kind: ItemKind, server_id: int) -> list[TrackedItem]:
        return [
            item
            for (item_kind, item_server, _), item in self._items.items()
            if item_kind == kind and item_server == server_id
        ]

    async def upsert_touch(
        self, kind: ItemKind, server_id: int, item_id: int, name: str
    ) -> None:
        self._ensure_connected()
        now = self._clock()
        key = (kind, server_id, item_id)
        existing = self._items.get(key)
        if existing is None:
            self._items[key] = TrackedItem(
                kind=kind,
                server_id=server_id,
                item_id=item_id,
                name=name,
                usage_count=1,
                first_used=now,
                last_used=now,
            )
        else:
            self._items[key] = replace(
                existing,
                name=name,
                usage_count=existing.usage_count + 1,
                last_used=now,
            )

    async def decrement_touch(self, kind: ItemKind, server_id: int, item_id: int) -> None:
        self._ensure_connected()
        key = (kind, server_id, item_id)
        existing = self._items.get(key)
        if existing is None:
            raise ItemNotFoundError(server_id, item_id)
        self._items[key] = replace(
            existing,
            usage_count=max(0, existing.usage_count - 1),
            last_used=self._clock(),
        )

    async def reset_server(self, server_id: int) -> None:
        self._ensure_connected()
        for key in [key for key in self._items if key[1] == server_id]:
            del self._items[key]

    async def count(self, kind: ItemKind, server_id: int) -> int:
        self._ensure_connected()
        return len(self._server_items(kind, server_id))

    async def paged_list(
        self, kind: ItemKind, server_id: int, offset: int, limit: int
    ) -> list[TrackedItem]:
        """Return one page ordered by usage_count DESC, last_used DESC."""
        self._ensure_connected()
        items = sorted(
            self._server_items(kind, server_id),
            key=lambda item: (item.usage_count, item.last_used),
            reverse=True,
        )
        return items[offset : offset + limit]

    async def paged_list_filtered(
        self,
        kind: ItemKind,
        server_id: int,
        allowed_item_ids: Collection[int],
        limit: int,
    ) -> list[TrackedItem]:
        """Return allowed items ordered by usage_count ASC, last_used ASC."""
        self._ensure_connected()
        allowed = set(allowed_item_ids)
        items = sorted(
            (i for i in self._server_items(kind, server_id) if i.item_id in allowed),
            key=lambda item: (item.usage_count, item.last_used),
        )
        return items[:limit]
