"""Repository protocols for usage counter persistence.

This module defines the interface (Protocol) for the counter store.
Implementations can use SQLite or any other storage backend satisfying the
same query contract. All types are platform-agnostic (no Discord types).
"""

from collections.abc import Collection
from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Protocol

# =============================================================================
# Data Classes
# =============================================================================


class ItemKind(Enum):
    """Category of tracked item. Each kind has its own counter table."""

    EMOJI = "emoji"
    STICKER = "sticker"


@dataclass
class TrackedItem:
    """Aggregate usage counter for one item in one server.

    Attributes:
        kind: Whether the item is a custom emoji or a sticker.
        server_id: Platform ID of the server (guild) the counter belongs to.
        item_id: Platform ID of the emoji or sticker.
        name: Display name at the time of the last observation.
        usage_count: Number of observed uses, never negative.
        first_used: When the counter was created. Never changes afterwards.
        last_used: When the counter was last incremented or decremented.
    """

    kind: ItemKind
    server_id: int
    item_id: int
    name: str
    usage_count: int
    first_used: datetime
    last_used: datetime


# =============================================================================
# Repository Protocols
# =============================================================================


class AsyncUsageRepository(Protocol):
    """Protocol for the per-server usage counter store.

    Counters are keyed by (kind, server_id, item_id). Every operation raises
    StoreError on backend failure; none is retried internally.
    """

    async def connect(self) -> None:
        """Open the backend and make sure the schema exists."""
        ...

    async def close(self) -> None:
        """Release backend resources."""
        ...

    async def upsert_touch(
        self, kind: ItemKind, server_id: int, item_id: int, name: str
    ) -> None:
        """Record one use of an item.

        Creates the counter with usage_count=1 if absent. Otherwise increments
        the count, overwrites the name and sets last_used to now.
        """
        ...

    async def decrement_touch(self, kind: ItemKind, server_id: int, item_id: int) -> None:
        """Reverse one use of an item, never going below zero.

        Raises:
            ItemNotFoundError: If the item was never tracked for the server.
        """
        ...

    async def reset_server(self, server_id: int) -> None:
        """Delete every counter of the server across all kinds."""
        ...

    async def count(self, kind: ItemKind, server_id: int) -> int:
        """Return the number of distinct tracked items of a kind."""
        ...

    async def paged_list(
        self, kind: ItemKind, server_id: int, offset: int, limit: int
    ) -> list[TrackedItem]:
        """Return one page of counters, most used first.

        Ordered by usage_count DESC, then last_used DESC. An offset past the
        end yields an empty list.
        """
        ...

    async def paged_list_filtered(
        self,
        kind: ItemKind,
        server_id: int,
        allowed_item_ids: Collection[int],
        limit: int,
    ) -> list[TrackedItem]:
        """Return the least used counters among the allowed item IDs.

        Ordered by usage_count ASC, then last_used ASC.
        """
        ...
