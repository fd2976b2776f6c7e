"""Time-boxed cache of each server's live emoji list.

The live list is the set of custom emoji a server currently has, as reported
by the platform. It filters historically tracked items that have since been
deleted. Fetching it is an external API call, so results are kept per server
until their TTL elapses.

Example:
    cache = LiveListCache(ttl=timedelta(hours=24))
    emojis = await cache.get(guild_id, fetch_guild_emojis)
"""

import asyncio
from collections.abc import Awaitable, Callable, Sequence
from dataclasses import dataclass
from datetime import UTC, datetime, timedelta

from src.core.errors import LiveListFetchError
from src.core.logging import get_logger

logger = get_logger(__name__)

DEFAULT_TTL = timedelta(hours=24)


@dataclass(frozen=True)
class LiveItem:
    """An item currently present in a server."""

    item_id: int
    name: str


LiveItemsFetcher = Callable[[int], Awaitable[Sequence[LiveItem]]]


@dataclass
class CachedLiveList:
    """Cache entry for one server."""

    items: list[LiveItem]
    expires_at: datetime


class LiveListCache:
    """Read-through cache holding one live list per server.

    A single lock covers the whole map, so the check-fetch-store sequence
    runs for one server at a time. Concurrent reads for other servers wait
    while a refresh is in flight; refreshes are rare (once per TTL per server).
    Expired entries are overwritten on the next read and never evicted.
    """

    def __init__(
        self,
        ttl: timedelta = DEFAULT_TTL,
        fetch_timeout: float | None = None,
        clock: Callable[[], datetime] | None = None,
    ) -> None:
        """Initialize an empty cache.

        Args:
            ttl: How long a fetched list stays valid.
            fetch_timeout: Upper bound in seconds for one external fetch.
                None leaves the fetch unbounded.
            clock: Returns the current time. Defaults to the UTC wall clock.
        """
        self._ttl = ttl
        self._fetch_timeout = fetch_timeout
        self._clock = clock or (lambda: datetime.now(UTC))
        self._entries: dict[int, CachedLiveList] = {}
        self._lock = asyncio.Lock()

    @property
    def size(self) -> int:
        """Number of servers with an entry, expired or not."""
        return len(self._entries)

    async def get(self, server_id: int, fetch: LiveItemsFetcher) -> list[LiveItem]:
        """Return the live list of a server, fetching it on miss or expiry.

        Args:
            server_id: The server to look up.
            fetch: External call listing the server's current items.

        Returns:
            The cached or freshly fetched items.

        Raises:
            LiveListFetchError: If the fetch fails or exceeds fetch_timeout.
                Nothing is cached in that case.
        """
        async with self._lock:
            now = self._clock()
            cached = self._entries.get(server_id)
            if cached is not None and now < cached.expires_at:
                logger.debug("live_list_cache_hit", server_id=server_id)
                return cached.items

            logger.debug(
                "live_list_cache_miss",
                server_id=server_id,
                expired=cached is not None,
            )
            items = await self._fetch(server_id, fetch)
            self._entries[server_id] = CachedLiveList(
                items=items, expires_at=self._clock() + self._ttl
            )
            logger.info("live_list_refreshed", server_id=server_id, item_count=len(items))
            return items

    async def _fetch(self, server_id: int, fetch: LiveItemsFetcher) -> list[LiveItem]:
        try:
            if self._fetch_timeout is None:
                return list(await fetch(server_id))
            async with asyncio.timeout(self._fetch_timeout):
                return list(await fetch(server_id))
        except TimeoutError as ex:
            logger.warning(
                "live_list_fetch_timed_out",
                server_id=server_id,
                timeout_seconds=self._fetch_timeout,
            )
            raise LiveListFetchError.from_exception(
                ex, f"Live list fetch for server {server_id} timed out"
            ) from ex
        except Exception as ex:
            logger.warning("live_list_fetch_failed", server_id=server_id, error=str(ex))
            raise LiveListFetchError.from_exception(ex) from ex

    def invalidate(self, server_id: int) -> None:
        """Drop the entry of a server so the next read refetches."""
        self._entries.pop(server_id, None)
