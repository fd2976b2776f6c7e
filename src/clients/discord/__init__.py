"""Discord client package."""

from src.clients.discord.bot import DiscordBot, create_bot
from src.clients.discord.commands import register_usage_commands
from src.clients.discord.decorators import traced_command
from src.clients.discord.utils import truncate_content

__all__ = [
    "DiscordBot",
    "create_bot",
    "register_usage_commands",
    "traced_command",
    "truncate_content",
]
