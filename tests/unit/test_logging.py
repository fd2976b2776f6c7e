"""Tests for structured logging configuration."""

import json
import logging
from io import StringIO
from unittest.mock import patch

import structlog

from src.core.logging import (
    bind_contextvars,
    clear_contextvars,
    configure_logging,
    get_logger,
)


class TestConfigureLogging:
    """Tests for configure_logging function."""

    def setup_method(self) -> None:
        """Reset structlog and logging configuration before each test."""
        structlog.reset_defaults()
        clear_contextvars()

    def test_configure_development_mode(self) -> None:
        """Should configure pretty-printed output in development mode."""
        configure_logging(development=True)
        logger = get_logger("test")
        # Should not raise
        logger.info("test message", key="value")

    def test_reads_log_level_environment_variable(self) -> None:
        """Should read LOG_LEVEL env var."""
        with patch.dict("os.environ", {"LOG_LEVEL": "DEBUG"}):
            configure_logging(development=True)
            assert logging.getLogger().level == logging.DEBUG

    def test_unknown_log_level_falls_back_to_info(self) -> None:
        """Should default to INFO for unrecognized level names."""
        configure_logging(development=True, log_level="CHATTY")
        assert logging.getLogger().level == logging.INFO

    def test_silences_third_party_loggers(self) -> None:
        """Should set gateway and access loggers to WARNING level."""
        configure_logging(development=True)
        assert logging.getLogger("discord").level == logging.WARNING
        assert logging.getLogger("aiohttp.access").level == logging.WARNING


class TestProductionJsonOutput:
    """Tests for JSON output in production mode."""

    def setup_method(self) -> None:
        """Reset configuration before each test."""
        structlog.reset_defaults()
        clear_contextvars()

    def teardown_method(self) -> None:
        clear_contextvars()

    def test_json_includes_bound_context(self) -> None:
        """Should emit JSON lines carrying context variables."""
        output = StringIO()
        handler = logging.StreamHandler(output)

        with patch.dict("os.environ", {"ENVIRONMENT": "production"}):
            configure_logging(log_level="INFO")

        root_logger = logging.getLogger()
        root_logger.addHandler(handler)
        try:
            bind_contextvars(correlation_id="abc12345", guild_id=42)
            get_logger("test").info("item_tracked", item_id=7)
            handler.flush()

            lines = [line for line in output.getvalue().splitlines() if line]
            parsed = json.loads(lines[-1])
            assert parsed["event"] == "item_tracked"
            assert parsed["item_id"] == 7
            assert parsed["correlation_id"] == "abc12345"
            assert parsed["guild_id"] == 42
            assert parsed["level"] == "info"
        finally:
            root_logger.removeHandler(handler)

    def test_clear_contextvars_removes_all(self) -> None:
        """Should drop bound context from later log lines."""
        output = StringIO()
        handler = logging.StreamHandler(output)
        configure_logging(development=False, log_level="INFO")

        root_logger = logging.getLogger()
        root_logger.addHandler(handler)
        try:
            bind_contextvars(correlation_id="abc12345")
            clear_contextvars()
            get_logger("test").info("after_clear")
            handler.flush()

            parsed = json.loads(output.getvalue().splitlines()[-1])
            assert "correlation_id" not in parsed
        finally:
            root_logger.removeHandler(handler)
