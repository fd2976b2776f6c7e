"""SQLite implementation of the usage counter store.

All methods are async, wrapping synchronous sqlite3 calls with asyncio.to_thread.
The class supports both file-based and in-memory (:memory:) databases.

Emoji and sticker counters live in two tables of identical shape. Queries are
written once as templates and expanded per ItemKind with the table and column
names below.
"""

import asyncio
import sqlite3
from collections.abc import Callable, Collection
from datetime import UTC, datetime
from pathlib import Path
from typing import Any, TypeVar, cast

from src.core.errors import ItemNotFoundError, StoreError
from src.core.logging import get_logger
from src.ports.repositories import ItemKind, TrackedItem

logger = get_logger(__name__)

T = TypeVar("T")

# Timestamps are stored as UTC text; fixed width keeps ORDER BY chronological
TIMESTAMP_FORMAT = "%Y-%m-%d %H:%M:%S.%f"

# kind -> (table, id column, name column)
_TABLES: dict[ItemKind, tuple[str, str, str]] = {
    ItemKind.EMOJI: ("emojis", "emote_id", "emote_name"),
    ItemKind.STICKER: ("stickers", "sticker_id", "sticker_name"),
}

# =============================================================================
# SQL Schema Definitions
# =============================================================================

_CREATE_EMOJIS_TABLE = """
CREATE TABLE IF NOT EXISTS emojis (
    server_id BIGINT,
    emote_id BIGINT,
    emote_name TEXT NOT NULL,
    usage_count INTEGER DEFAULT 1,
    first_used DATETIME DEFAULT CURRENT_TIMESTAMP,
    last_used DATETIME DEFAULT CURRENT_TIMESTAMP,
    PRIMARY KEY(server_id, emote_id)
);
"""

_CREATE_STICKERS_TABLE = """
CREATE TABLE IF NOT EXISTS stickers (
    server_id BIGINT,
    sticker_id BIGINT,
    sticker_name TEXT NOT NULL,
    usage_count INTEGER DEFAULT 1,
    first_used DATETIME DEFAULT CURRENT_TIMESTAMP,
    last_used DATETIME DEFAULT CURRENT_TIMESTAMP,
    PRIMARY KEY(server_id, sticker_id)
);
"""

_CREATE_EMOJIS_INDEX = """
CREATE INDEX IF NOT EXISTS idx_emojis_server_id_emote_id_usage_count
ON emojis(server_id, emote_id, usage_count);
"""

_CREATE_STICKERS_INDEX = """
CREATE INDEX IF NOT EXISTS idx_stickers_server_id_sticker_id_usage_count
ON stickers(server_id, sticker_id, usage_count);
"""

# =============================================================================
# SQL Query Templates
# =============================================================================

_UPSERT_TOUCH = """
INSERT INTO {table} (server_id, {id_col}, {name_col}, usage_count, first_used, last_used)
VALUES (?, ?, ?, 1, ?, ?)
ON CONFLICT(server_id, {id_col}) DO UPDATE SET
    usage_count = usage_count + 1,
    {name_col} = excluded.{name_col},
    last_used = excluded.last_used
;
"""

_DECREMENT_TOUCH = """
UPDATE {table}
SET usage_count = MAX(0, usage_count - 1),
    last_used = ?
WHERE server_id = ? AND {id_col} = ?
;
"""

_DELETE_SERVER = """
DELETE FROM {table} WHERE server_id = ?;
"""

_COUNT_ITEMS = """
SELECT COUNT(*) AS count FROM {table} WHERE server_id = ?;
"""

_SELECT_PAGE = """
SELECT
    server_id,
    {id_col} AS item_id,
    {name_col} AS item_name,
    usage_count,
    first_used,
    last_used
FROM {table}
WHERE server_id = ?
ORDER BY usage_count DESC, last_used DESC
LIMIT ? OFFSET ?
;
"""

_SELECT_LEAST_USED = """
SELECT
    server_id,
    {id_col} AS item_id,
    {name_col} AS item_name,
    usage_count,
    first_used,
    last_used
FROM {table}
WHERE server_id = ?
AND {id_col} IN ({placeholders})
ORDER BY usage_count ASC, last_used ASC
LIMIT ?
;
"""


def _sql(template: str, kind: ItemKind, **extra: str) -> str:
    """Expand a query template with the table and columns of a kind."""
    table, id_col, name_col = _TABLES[kind]
    return template.format(table=table, id_col=id_col, name_col=name_col, **extra)


def format_timestamp(value: datetime) -> str:
    """Render a datetime as stored UTC text."""
    if value.tzinfo is not None:
        value = value.astimezone(UTC).replace(tzinfo=None)
    return value.strftime(TIMESTAMP_FORMAT)


def parse_timestamp(value: str) -> datetime:
    """Parse stored timestamp text back into an aware UTC datetime.

    Accepts both the application format and SQLite's CURRENT_TIMESTAMP form.
    """
    return datetime.fromisoformat(value).replace(tzinfo=UTC)


# =============================================================================
# Repository Implementation
# =============================================================================


class SQLiteRepository:
    """SQLite implementation of AsyncUsageRepository.

    The repository manages a single SQLite connection shared by all
    operations. Calls are serialized through an asyncio.Lock so concurrent
    event handlers never interleave statements on the shared connection.
    Each counter mutation is one upsert/update statement, which is the
    atomicity boundary for concurrent touches.

    Example:
        async with SQLiteRepository("emote_tracker.db") as repo:
            await repo.upsert_touch(ItemKind.EMOJI, guild_id, emoji_id, "blobwave")

    For testing, use `:memory:` as the db_path:
        repo = SQLiteRepository(":memory:")
        await repo.connect()
    """

    def __init__(
        self,
        db_path: str | Path,
        clock: Callable[[], datetime] | None = None,
    ) -> None:
        """Initialize the repository with a database path.

        Args:
            db_path: Path to the SQLite database file, or ":memory:" for
                an in-memory database (useful for testing).
            clock: Returns the current time for first_used/last_used.
                Defaults to the UTC wall clock.
        """
        self._db_path = str(db_path)
        self._clock = clock or (lambda: datetime.now(UTC))
        self._connection: sqlite3.Connection | None = None
        self._lock = asyncio.Lock()

    async def __aenter__(self) -> "SQLiteRepository":
        """Async context manager entry: connect to the database."""
        await self.connect()
        return self

    async def __aexit__(
        self,
        exc_type: type | None,
        exc_val: BaseException | None,
        exc_tb: Any,
    ) -> None:
        """Async context manager exit: close the database connection."""
        await self.close()

    @property
    def is_connected(self) -> bool:
        """Whether a database connection is currently open."""
        return self._connection is not None

    async def connect(self) -> None:
        """Connect to the database and initialize the schema.

        This method must be called before using any repository methods,
        unless using the async context manager.
        """
        logger.debug("connecting_to_database", path=self._db_path)
        try:
            self._connection = await asyncio.to_thread(self._connect_sync)
        except sqlite3.Error as ex:
            raise StoreError.from_exception(ex, f"Failed to open database: {ex}") from ex
        await self._initialize_schema()
        logger.info("database_initialized", path=self._db_path)

    def _connect_sync(self) -> sqlite3.Connection:
        """Synchronous connection setup.

        check_same_thread=False is required because statements run in
        asyncio.to_thread() workers; the repository lock keeps access sequential.
        """
        conn = sqlite3.connect(self._db_path, check_same_thread=False)
        conn.row_factory = sqlite3.Row
        return conn

    async def _initialize_schema(self) -> None:
        """Create tables and indexes if they don't exist."""
        conn = self._ensure_connected()

        def init_sync() -> None:
            conn.execute(_CREATE_EMOJIS_TABLE)
            conn.execute(_CREATE_STICKERS_TABLE)
            conn.execute(_CREATE_EMOJIS_INDEX)
            conn.execute(_CREATE_STICKERS_INDEX)
            conn.commit()

        await self._run("initialize_schema", init_sync)

    async def close(self) -> None:
        """Close the database connection."""
        if self._connection is not None:
            logger.debug("closing_database_connection")
            await asyncio.to_thread(self._connection.close)
            self._connection = None

    def _ensure_connected(self) -> sqlite3.Connection:
        """Ensure the database is connected and return the connection."""
        if self._connection is None:
            raise RuntimeError(
                "Database not connected. Call connect() or use async context manager."
            )
        return self._connection

    async def _run(self, operation: str, func: Callable[[], T]) -> T:
        """Run a synchronous database call off the event loop.

        sqlite3 errors are wrapped into StoreError and propagated.
        """
        async with self._lock:
            try:
                return await asyncio.to_thread(func)
            except sqlite3.Error as ex:
                logger.error("database_operation_failed", operation=operation, error=str(ex))
                raise StoreError.from_exception(ex, f"{operation} failed: {ex}") from ex

    def _now(self) -> str:
        return format_timestamp(self._clock())

    @staticmethod
    def _row_to_item(kind: ItemKind, row: sqlite3.Row) -> TrackedItem:
        """Convert a database row to a TrackedItem."""
        return TrackedItem(
            kind=kind,
            server_id=row["server_id"],
            item_id=row["item_id"],
            name=row["item_name"],
            usage_count=row["usage_count"],
            first_used=parse_timestamp(row["first_used"]),
            last_used=parse_timestamp(row["last_used"]),
        )

    # =========================================================================
    # Counter mutations
    # =========================================================================

    async def upsert_touch(
        self, kind: ItemKind, server_id: int, item_id: int, name: str
    ) -> None:
        """Record one use of an item, creating its counter on first sight."""
        conn = self._ensure_connected()
        now = self._now()
        query = _sql(_UPSERT_TOUCH, kind)

        def upsert_sync() -> None:
            conn.execute(query, (server_id, item_id, name, now, now))
            conn.commit()

        await self._run("upsert_touch", upsert_sync)
        logger.debug(
            "item_touched",
            kind=kind.value,
            server_id=server_id,
            item_id=item_id,
            item_name=name,
        )

    async def decrement_touch(self, kind: ItemKind, server_id: int, item_id: int) -> None:
        """Reverse one use of an item, flooring the count at zero.

        Raises:
            ItemNotFoundError: If no counter exists for the item.
            StoreError: If the update fails.
        """
        conn = self._ensure_connected()
        now = self._now()
        query = _sql(_DECREMENT_TOUCH, kind)

        def update_sync() -> int:
            cursor = conn.execute(query, (now, server_id, item_id))
            conn.commit()
            return cursor.rowcount

        rows_affected = await self._run("decrement_touch", update_sync)
        if rows_affected == 0:
            raise ItemNotFoundError(server_id, item_id)
        logger.debug("item_untouched", kind=kind.value, server_id=server_id, item_id=item_id)

    async def reset_server(self, server_id: int) -> None:
        """Delete all counters of a server, emoji and stickers, atomically."""
        conn = self._ensure_connected()
        queries = [_sql(_DELETE_SERVER, kind) for kind in ItemKind]

        def delete_sync() -> None:
            # One transaction: either both kinds are cleared or neither is
            with conn:
                for query in queries:
                    conn.execute(query, (server_id,))

        await self._run("reset_server", delete_sync)
        logger.info("server_counts_reset", server_id=server_id)

    # =========================================================================
    # Counter reads
    # =========================================================================

    async def count(self, kind: ItemKind, server_id: int) -> int:
        """Return the number of tracked items of a kind for a server."""
        conn = self._ensure_connected()
        query = _sql(_COUNT_ITEMS, kind)

        def query_sync() -> int:
            row = conn.execute(query, (server_id,)).fetchone()
            return cast(int, row["count"]) if row else 0

        return await self._run("count", query_sync)

    async def paged_list(
        self, kind: ItemKind, server_id: int, offset: int, limit: int
    ) -> list[TrackedItem]:
        """Return one page of counters ordered by count, then recency."""
        conn = self._ensure_connected()
        query = _sql(_SELECT_PAGE, kind)

        def query_sync() -> list[sqlite3.Row]:
            return conn.execute(query, (server_id, limit, offset)).fetchall()

        rows = await self._run("paged_list", query_sync)
        return [self._row_to_item(kind, row) for row in rows]

    async def paged_list_filtered(
        self,
        kind: ItemKind,
        server_id: int,
        allowed_item_ids: Collection[int],
        limit: int,
    ) -> list[TrackedItem]:
        """Return the least used counters restricted to the allowed IDs."""
        if not allowed_item_ids:
            return []

        conn = self._ensure_connected()
        item_ids = list(allowed_item_ids)
        placeholders = ",".join("?" for _ in item_ids)
        query = _sql(_SELECT_LEAST_USED, kind, placeholders=placeholders)

        def query_sync() -> list[sqlite3.Row]:
            return conn.execute(query, (server_id, *item_ids, limit)).fetchall()

        rows = await self._run("paged_list_filtered", query_sync)
        return [self._row_to_item(kind, row) for row in rows]
