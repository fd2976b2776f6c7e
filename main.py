"""Entry point for the Discord bot."""

import asyncio

from src.clients.discord import DiscordBot, create_bot, register_usage_commands
from src.core.config import Settings, load_settings
from src.core.health import (
    HealthChecker,
    ServiceCheck,
    ServiceStatus,
    start_health_server,
)
from src.core.logging import configure_logging, get_logger

# Configure structured logging (reads ENVIRONMENT and LOG_LEVEL from env)
configure_logging()

logger = get_logger(__name__)


def create_health_checker(bot: DiscordBot, settings: Settings) -> HealthChecker:
    """Create health checker with service checks for the bot.

    Args:
        bot: The Discord bot instance.
        settings: Runtime settings.

    Returns:
        Configured HealthChecker instance.
    """
    checker = HealthChecker(version=settings.app_version)

    async def check_database() -> ServiceCheck:
        """Check database connectivity."""
        try:
            connected = bot.repository.is_connected
        except RuntimeError as ex:
            return ServiceCheck(name="database", status=ServiceStatus.UNHEALTHY, message=str(ex))
        if not connected:
            return ServiceCheck(
                name="database",
                status=ServiceStatus.UNHEALTHY,
                message="Database connection not established",
            )
        return ServiceCheck(
            name="database",
            status=ServiceStatus.HEALTHY,
            message="Connected",
            details={"path": settings.database_path},
        )

    async def check_discord() -> ServiceCheck:
        """Check Discord connection status."""
        if bot.is_ready():
            return ServiceCheck(
                name="discord",
                status=ServiceStatus.HEALTHY,
                message="Connected",
                details={"guilds": len(bot.guilds)},
            )
        elif bot.is_closed():
            return ServiceCheck(
                name="discord",
                status=ServiceStatus.UNHEALTHY,
                message="Connection closed",
            )
        else:
            return ServiceCheck(
                name="discord",
                status=ServiceStatus.DEGRADED,
                message="Connecting...",
            )

    async def check_live_cache() -> ServiceCheck:
        """Report live emoji list cache occupancy."""
        return ServiceCheck(
            name="live_cache",
            status=ServiceStatus.HEALTHY,
            details={
                "servers": bot.live_cache.size,
                "ttl_hours": settings.live_list_ttl.total_seconds() / 3600,
            },
        )

    checker.add_check("database", check_database)
    checker.add_check("discord", check_discord)
    checker.add_check("live_cache", check_live_cache)

    return checker


async def main() -> None:
    """Initialize and start the Discord bot with health monitoring."""
    settings = load_settings()
    bot = create_bot(settings)

    # Register command handlers
    register_usage_commands(bot)

    # Create health checker (checks will work once bot is initialized)
    health_checker = create_health_checker(bot, settings)

    health_server = None
    if settings.health_enabled:
        health_server = await start_health_server(
            health_checker,
            host="0.0.0.0",
            port=settings.health_port,
        )

    @bot.event
    async def on_ready() -> None:
        """On bot startup, log success and the connected guilds.

        Command syncing is controlled by SYNC_COMMANDS in setup_hook.
        """
        if bot.user:
            logger.info("bot_ready", user=str(bot.user), user_id=bot.user.id)

        for guild in bot.guilds:
            logger.info("guild_connected", guild=guild.name, guild_id=guild.id)

    try:
        logger.info("bot_starting")
        async with bot:
            await bot.start(settings.discord_token)
    finally:
        # Clean up health server on shutdown
        if health_server:
            await health_server.stop()


if __name__ == "__main__":
    asyncio.run(main())
