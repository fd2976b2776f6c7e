"""Usage-statistics Discord slash commands."""

from typing import TYPE_CHECKING

import discord
from discord import app_commands

from src.clients.discord.decorators import traced_command
from src.clients.discord.utils import truncate_content
from src.clients.discord.views import send_payload
from src.core.dispatcher import Command

if TYPE_CHECKING:
    from src.clients.discord.bot import DiscordBot

SHARE_DESCRIPTION = "Everyone can see the list"


def register_usage_commands(bot: "DiscordBot") -> None:
    """Register the usage-statistics commands with the bot.

    All commands default to members with the Manage Server permission;
    server admins can adjust this in the integration settings.

    Args:
        bot: The Discord bot instance.
    """

    @bot.tree.command(  # type: ignore[arg-type]
        name=Command.LIST_EMOJI_USAGE.value,
        description="List custom emoji usage statistics (Moderator only)",
    )
    @app_commands.default_permissions(manage_guild=True)
    @app_commands.describe(share=SHARE_DESCRIPTION)
    @traced_command
    async def listemotes(interaction: discord.Interaction, share: bool = False) -> None:
        payload = await bot.dispatcher.run_command(
            Command.LIST_EMOJI_USAGE, interaction.guild_id, share
        )
        await send_payload(interaction, payload)

    @bot.tree.command(  # type: ignore[arg-type]
        name=Command.LIST_STICKER_USAGE.value,
        description="List sticker usage statistics (Moderator only)",
    )
    @app_commands.default_permissions(manage_guild=True)
    @app_commands.describe(share=SHARE_DESCRIPTION)
    @traced_command
    async def liststickers(interaction: discord.Interaction, share: bool = False) -> None:
        payload = await bot.dispatcher.run_command(
            Command.LIST_STICKER_USAGE, interaction.guild_id, share
        )
        await send_payload(interaction, payload)

    @bot.tree.command(  # type: ignore[arg-type]
        name=Command.RESET_COUNTS.value,
        description="Reset all emoji and sticker counts for this server (Moderator only)",
    )
    @app_commands.default_permissions(manage_guild=True)
    @traced_command
    async def resetcount(interaction: discord.Interaction) -> None:
        payload = await bot.dispatcher.run_command(Command.RESET_COUNTS, interaction.guild_id)
        await send_payload(interaction, payload)

    @bot.tree.command(  # type: ignore[arg-type]
        name=Command.LIST_LEAST_USED.value,
        description="List least used emojis from the current guild list found in the database",
    )
    @app_commands.default_permissions(manage_guild=True)
    @traced_command
    async def listleastused(interaction: discord.Interaction) -> None:
        # Fetching the live list can take a while on a cold cache
        await interaction.response.defer(ephemeral=True, thinking=True)
        payload = await bot.dispatcher.run_command(Command.LIST_LEAST_USED, interaction.guild_id)
        await interaction.followup.send(truncate_content(payload.content or ""), ephemeral=True)
