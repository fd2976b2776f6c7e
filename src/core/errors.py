"""Error types and classification for the usage tracker.

Errors fall into a small taxonomy that decides how callers react:

- parse errors (bad emoji ids, malformed page tokens) never leave the core;
- not-found (decrement of an untracked item) is logged and ignored;
- store errors propagate to the handler, which logs them and, for
  user-initiated commands, answers with a generic failure message;
- live-list fetch errors behave like store errors for the least-used command.

Example:
    from src.core.errors import StoreError, classify_error

    try:
        await repo.upsert_touch(ItemKind.EMOJI, guild_id, emoji_id, name)
    except StoreError as ex:
        logger.error("emoji_track_failed", category=classify_error(ex).name)
"""

import asyncio
import sqlite3
from enum import Enum, auto


class ErrorCategory(Enum):
    """Classification of error types for handling decisions."""

    PARSE = auto()  # Malformed input from text or UI state
    NOT_FOUND = auto()  # Counter row does not exist
    STORE = auto()  # Database connectivity or constraint failure
    EXTERNAL_FETCH = auto()  # Live item list could not be fetched
    TIMEOUT = auto()  # Bounded operation expired
    UNKNOWN = auto()  # Unclassified error


class TrackerError(Exception):
    """Base class for errors raised by the usage tracker core.

    Attributes:
        category: The error category used for logging and handling.
        original_error: The underlying exception, if any.
    """

    category: ErrorCategory = ErrorCategory.UNKNOWN

    def __init__(self, message: str, original_error: Exception | None = None) -> None:
        super().__init__(message)
        self.original_error = original_error

    @classmethod
    def from_exception(cls, ex: Exception, message: str | None = None) -> "TrackerError":
        """Wrap an existing exception, keeping it as the original error."""
        return cls(message or str(ex), original_error=ex)


class StoreError(TrackerError):
    """The counter store failed to execute an operation."""

    category = ErrorCategory.STORE


class ItemNotFoundError(TrackerError):
    """A decrement targeted a (server, item) pair that was never tracked."""

    category = ErrorCategory.NOT_FOUND

    def __init__(self, server_id: int, item_id: int) -> None:
        super().__init__(f"Item {item_id} is not tracked for server {server_id}")
        self.server_id = server_id
        self.item_id = item_id


class LiveListFetchError(TrackerError):
    """The external live item list could not be retrieved."""

    category = ErrorCategory.EXTERNAL_FETCH

    @property
    def timed_out(self) -> bool:
        """Whether the fetch failed because its time bound expired."""
        return isinstance(self.original_error, (TimeoutError, asyncio.TimeoutError))


def classify_error(error: BaseException) -> ErrorCategory:
    """Classify an exception into an error category.

    Args:
        error: The exception to classify.

    Returns:
        The ErrorCategory that best matches the error.
    """
    if isinstance(error, LiveListFetchError) and error.timed_out:
        return ErrorCategory.TIMEOUT
    if isinstance(error, TrackerError):
        return error.category
    if isinstance(error, (TimeoutError, asyncio.TimeoutError)):
        return ErrorCategory.TIMEOUT
    if isinstance(error, sqlite3.Error):
        return ErrorCategory.STORE
    if isinstance(error, ValueError):
        return ErrorCategory.PARSE
    return ErrorCategory.UNKNOWN
