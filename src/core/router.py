"""Event routing from inbound events to counter store writes.

The router is stateless: one event in, zero or more store writes out. Store
failures never propagate out of an event handler. There is no user to notify
and nothing is retried, so the error is logged and the remaining items of the
event are still processed.
"""

from typing import assert_never

from src.core.errors import ItemNotFoundError, StoreError
from src.core.events import (
    InboundEvent,
    InteractionReceived,
    MessagePosted,
    ReactionAdded,
    ReactionRemoved,
)
from src.core.extraction import extract_emoji_references, extract_sticker_references
from src.core.logging import get_logger
from src.ports.repositories import AsyncUsageRepository, ItemKind

logger = get_logger(__name__)


class EventRouter:
    """Dispatches inbound events to the counter store.

    Every handler returns the number of successful store writes, which the
    gateway layer ignores and tests assert on.
    """

    def __init__(self, repository: AsyncUsageRepository) -> None:
        self._repository = repository

    async def dispatch(self, event: InboundEvent) -> int:
        """Route one event to its handler."""
        if isinstance(event, MessagePosted):
            return await self.on_message_posted(event)
        if isinstance(event, ReactionAdded):
            return await self.on_reaction_added(event)
        if isinstance(event, ReactionRemoved):
            return await self.on_reaction_removed(event)
        if isinstance(event, InteractionReceived):
            return await self.on_interaction_received(event)
        assert_never(event)

    async def _touch(self, kind: ItemKind, server_id: int, item_id: int, name: str) -> bool:
        try:
            await self._repository.upsert_touch(kind, server_id, item_id, name)
        except StoreError as ex:
            logger.error(
                "item_track_failed",
                kind=kind.value,
                server_id=server_id,
                item_id=item_id,
                item_name=name,
                error=str(ex),
            )
            return False
        logger.info(
            "item_tracked",
            kind=kind.value,
            server_id=server_id,
            item_id=item_id,
            item_name=name,
        )
        return True

    async def on_message_posted(self, event: MessagePosted) -> int:
        """Count every custom emoji and sticker in a server message."""
        if event.author_is_bot or event.server_id is None:
            return 0

        writes = 0
        for emoji in extract_emoji_references(event.content):
            if await self._touch(ItemKind.EMOJI, event.server_id, emoji.item_id, emoji.name):
                writes += 1
        for sticker in extract_sticker_references(event.stickers):
            if await self._touch(
                ItemKind.STICKER, event.server_id, sticker.item_id, sticker.name
            ):
                writes += 1
        return writes

    async def on_reaction_added(self, event: ReactionAdded) -> int:
        """Count a custom emoji reaction."""
        emoji = event.emoji
        if event.server_id is None or not emoji.is_custom or emoji.item_id is None:
            return 0
        tracked = await self._touch(ItemKind.EMOJI, event.server_id, emoji.item_id, emoji.name)
        return 1 if tracked else 0

    async def on_reaction_removed(self, event: ReactionRemoved) -> int:
        """Reverse the count of a removed custom emoji reaction."""
        emoji = event.emoji
        if event.server_id is None or not emoji.is_custom or emoji.item_id is None:
            return 0
        try:
            await self._repository.decrement_touch(
                ItemKind.EMOJI, event.server_id, emoji.item_id
            )
        except ItemNotFoundError:
            # Reaction predates tracking (or a reset); nothing to reverse
            logger.info(
                "reaction_decrement_skipped",
                server_id=event.server_id,
                item_id=emoji.item_id,
                reason="not_tracked",
            )
            return 0
        except StoreError as ex:
            logger.error(
                "reaction_decrement_failed",
                server_id=event.server_id,
                item_id=emoji.item_id,
                error=str(ex),
            )
            return 0
        logger.info("reaction_decremented", server_id=event.server_id, item_id=emoji.item_id)
        return 1

    async def on_interaction_received(self, event: InteractionReceived) -> int:
        """Re-run message extraction on the message an interaction is attached to."""
        if event.message is None:
            return 0
        return await self.on_message_posted(event.message)
