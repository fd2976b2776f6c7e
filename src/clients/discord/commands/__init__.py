"""Discord command modules."""

from src.clients.discord.commands.usage import register_usage_commands

__all__ = ["register_usage_commands"]
