"""Tests for error types and classification."""

import asyncio
import sqlite3

from src.core.errors import (
    ErrorCategory,
    ItemNotFoundError,
    LiveListFetchError,
    StoreError,
    TrackerError,
    classify_error,
)


class TestTrackerError:
    """Tests for the error hierarchy."""

    def test_from_exception_keeps_original(self) -> None:
        """Should wrap the cause and reuse its message by default."""
        cause = sqlite3.OperationalError("database is locked")

        error = StoreError.from_exception(cause)

        assert str(error) == "database is locked"
        assert error.original_error is cause
        assert error.category is ErrorCategory.STORE

    def test_from_exception_custom_message(self) -> None:
        error = StoreError.from_exception(ValueError("x"), "count failed")

        assert str(error) == "count failed"

    def test_item_not_found_carries_ids(self) -> None:
        error = ItemNotFoundError(server_id=1, item_id=2)

        assert error.server_id == 1
        assert error.item_id == 2
        assert "2" in str(error)
        assert isinstance(error, TrackerError)

    def test_live_fetch_timed_out(self) -> None:
        assert LiveListFetchError.from_exception(TimeoutError()).timed_out
        assert LiveListFetchError.from_exception(asyncio.TimeoutError()).timed_out
        assert not LiveListFetchError.from_exception(RuntimeError("403")).timed_out
        assert not LiveListFetchError("no cause").timed_out


class TestClassifyError:
    """Tests for classify_error."""

    def test_tracker_errors_use_their_category(self) -> None:
        assert classify_error(StoreError("x")) is ErrorCategory.STORE
        assert classify_error(ItemNotFoundError(1, 2)) is ErrorCategory.NOT_FOUND
        assert (
            classify_error(LiveListFetchError.from_exception(RuntimeError("403")))
            is ErrorCategory.EXTERNAL_FETCH
        )

    def test_timed_out_fetch_is_timeout(self) -> None:
        error = LiveListFetchError.from_exception(TimeoutError())

        assert classify_error(error) is ErrorCategory.TIMEOUT

    def test_builtin_errors(self) -> None:
        assert classify_error(TimeoutError()) is ErrorCategory.TIMEOUT
        assert classify_error(sqlite3.IntegrityError("dup")) is ErrorCategory.STORE
        assert classify_error(ValueError("bad int")) is ErrorCategory.PARSE
        assert classify_error(KeyError("x")) is ErrorCategory.UNKNOWN
