"""Tests for the bot health checks wired up in main."""

from unittest.mock import MagicMock, PropertyMock

from main import create_health_checker
from src.core.config import Settings
from src.core.health import ServiceCheck, ServiceStatus


def make_bot(*, connected: bool = True, ready: bool = True, closed: bool = False) -> MagicMock:
    bot = MagicMock()
    bot.repository.is_connected = connected
    bot.is_ready.return_value = ready
    bot.is_closed.return_value = closed
    bot.guilds = [MagicMock(), MagicMock()]
    bot.live_cache.size = 3
    return bot


async def run_checks(bot: MagicMock) -> dict[str, ServiceCheck]:
    settings = Settings(discord_token="token", database_path=":memory:")
    report = await create_health_checker(bot, settings).check_all()
    return {check.name: check for check in report.checks}


class TestCreateHealthChecker:
    """Tests for the database, discord and live_cache checks."""

    async def test_all_healthy(self) -> None:
        """Should report each service healthy with its details."""
        checks = await run_checks(make_bot())

        assert set(checks) == {"database", "discord", "live_cache"}
        assert checks["database"].status == ServiceStatus.HEALTHY
        assert checks["database"].details == {"path": ":memory:"}
        assert checks["discord"].details == {"guilds": 2}
        assert checks["live_cache"].details == {"servers": 3, "ttl_hours": 24.0}

    async def test_disconnected_database_unhealthy(self) -> None:
        """Should flag a repository that is not connected."""
        checks = await run_checks(make_bot(connected=False))

        assert checks["database"].status == ServiceStatus.UNHEALTHY

    async def test_repository_before_setup_unhealthy(self) -> None:
        """Should report the accessor error before setup_hook has run."""
        bot = make_bot()
        type(bot).repository = PropertyMock(
            side_effect=RuntimeError("setup_hook must complete first.")
        )

        checks = await run_checks(bot)

        assert checks["database"].status == ServiceStatus.UNHEALTHY
        assert checks["database"].message == "setup_hook must complete first."

    async def test_discord_connecting_is_degraded(self) -> None:
        checks = await run_checks(make_bot(ready=False))

        assert checks["discord"].status == ServiceStatus.DEGRADED

    async def test_discord_closed_is_unhealthy(self) -> None:
        checks = await run_checks(make_bot(ready=False, closed=True))

        assert checks["discord"].status == ServiceStatus.UNHEALTHY
