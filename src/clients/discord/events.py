"""Translation of discord.py gateway objects into core events."""

import discord

from src.core.events import (
    InteractionReceived,
    MessagePosted,
    ReactionAdded,
    ReactionEmoji,
    ReactionRemoved,
)
from src.core.extraction import StickerReference


def message_to_event(message: discord.Message) -> MessagePosted:
    """Build a MessagePosted event from a gateway message."""
    return MessagePosted(
        server_id=message.guild.id if message.guild is not None else None,
        author_is_bot=message.author.bot,
        content=message.content or "",
        stickers=tuple(
            StickerReference(item_id=sticker.id, name=sticker.name)
            for sticker in message.stickers
        ),
    )


def _reaction_emoji(payload: discord.RawReactionActionEvent) -> ReactionEmoji:
    emoji = payload.emoji
    return ReactionEmoji(
        item_id=emoji.id,
        name=emoji.name or "",
        is_custom=emoji.is_custom_emoji(),
    )


def reaction_to_event(
    payload: discord.RawReactionActionEvent,
) -> ReactionAdded | ReactionRemoved:
    """Build a reaction event from a raw reaction payload."""
    if payload.event_type == "REACTION_REMOVE":
        return ReactionRemoved(server_id=payload.guild_id, emoji=_reaction_emoji(payload))
    return ReactionAdded(server_id=payload.guild_id, emoji=_reaction_emoji(payload))


def interaction_to_event(interaction: discord.Interaction) -> InteractionReceived:
    """Build an InteractionReceived event, carrying its message if any."""
    message = interaction.message
    return InteractionReceived(
        server_id=interaction.guild_id,
        message=message_to_event(message) if message is not None else None,
    )
