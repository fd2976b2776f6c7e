"""Runtime settings read from the environment.

Values can also come from a ``.env`` file in the working directory, which
load_settings() loads without overriding variables already set.
"""

from dataclasses import dataclass
from datetime import timedelta
from os import getenv

from dotenv import load_dotenv

from src.core.live_cache import DEFAULT_TTL


@dataclass(frozen=True)
class Settings:
    """Bot configuration.

    Attributes:
        discord_token: Bot token used to connect to the gateway.
        database_path: SQLite file holding the counters.
        live_list_ttl: How long a server's live emoji list is cached.
        live_list_fetch_timeout: Bound in seconds on one live list fetch,
            None for no bound.
        sync_commands: Push slash command definitions on startup.
        health_enabled: Serve the /health and /live endpoints.
        health_port: Port of the health server.
        app_version: Version reported by the health endpoint.
    """

    discord_token: str
    database_path: str = "./emote_tracker.db"
    live_list_ttl: timedelta = DEFAULT_TTL
    live_list_fetch_timeout: float | None = None
    sync_commands: bool = False
    health_enabled: bool = True
    health_port: int = 8080
    app_version: str = "1.0.0"


def _flag(name: str, default: str) -> bool:
    return getenv(name, default).lower() == "true"


def load_settings() -> Settings:
    """Build Settings from environment variables.

    Raises:
        RuntimeError: If DISCORD_CLIENT_TOKEN is missing, or a numeric
            variable cannot be parsed.
    """
    load_dotenv()

    token = getenv("DISCORD_CLIENT_TOKEN")
    if not token:
        raise RuntimeError("DISCORD_CLIENT_TOKEN environment variable is required")

    try:
        ttl_hours = float(getenv("LIVE_LIST_TTL_HOURS", "24"))
        raw_timeout = getenv("LIVE_LIST_FETCH_TIMEOUT")
        fetch_timeout = float(raw_timeout) if raw_timeout else None
        health_port = int(getenv("HEALTH_PORT", "8080"))
    except ValueError as ex:
        raise RuntimeError(f"Invalid numeric configuration value: {ex}") from ex

    return Settings(
        discord_token=token,
        database_path=getenv("DATABASE_PATH", "./emote_tracker.db"),
        live_list_ttl=timedelta(hours=ttl_hours),
        live_list_fetch_timeout=fetch_timeout,
        sync_commands=_flag("SYNC_COMMANDS", "false"),
        health_enabled=_flag("HEALTH_ENABLED", "true"),
        health_port=health_port,
        app_version=getenv("APP_VERSION", "1.0.0"),
    )
