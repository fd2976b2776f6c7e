"""Discord bot core - setup and lifecycle management."""

import discord
from discord import app_commands

from src.adapters import create_repository
from src.adapters.factory import RepositoryType
from src.clients.discord.events import (
    interaction_to_event,
    message_to_event,
    reaction_to_event,
)
from src.clients.discord.utils import find_text_input_value
from src.clients.discord.views import send_payload
from src.core.config import Settings
from src.core.dispatcher import CommandDispatcher
from src.core.live_cache import LiveItem, LiveListCache
from src.core.logging import get_logger
from src.core.pagination import PAGE_INPUT_ID
from src.core.responses import ResponsePayload
from src.core.router import EventRouter

logger = get_logger(__name__)


class DiscordBot(discord.Client):
    """Discord bot that tracks custom emoji and sticker usage per server.

    Attributes:
        tree: The command tree for slash commands.
        live_cache: Cache of each server's current emoji list.
    """

    def __init__(self, settings: Settings) -> None:
        """Initialize the Discord bot with required intents."""
        intents = discord.Intents.default()
        intents.guild_messages = True
        intents.message_content = True
        intents.guild_reactions = True
        super().__init__(intents=intents)
        self.tree = app_commands.CommandTree(self)
        self._settings = settings
        self.live_cache = LiveListCache(
            ttl=settings.live_list_ttl,
            fetch_timeout=settings.live_list_fetch_timeout,
        )
        self._repository: RepositoryType | None = None
        self._router: EventRouter | None = None
        self._dispatcher: CommandDispatcher | None = None

    @property
    def repository(self) -> RepositoryType:
        """Get the counter store, raising if not initialized."""
        if self._repository is None:
            raise RuntimeError("Repository not initialized. setup_hook must complete first.")
        return self._repository

    @property
    def router(self) -> EventRouter:
        """Get the event router, raising if not initialized."""
        if self._router is None:
            raise RuntimeError("Event router not initialized. setup_hook must complete first.")
        return self._router

    @property
    def dispatcher(self) -> CommandDispatcher:
        """Get the command dispatcher, raising if not initialized."""
        if self._dispatcher is None:
            raise RuntimeError(
                "Command dispatcher not initialized. setup_hook must complete first."
            )
        return self._dispatcher

    async def setup_hook(self) -> None:
        """Open the counter store, wire the core and sync commands with Discord."""
        db_path = self._settings.database_path
        self._repository = create_repository("sqlite", db_path=db_path)
        await self._repository.connect()
        logger.info("repository_initialized", db_path=db_path)

        self._router = EventRouter(self._repository)
        self._dispatcher = CommandDispatcher(
            self._repository, self.live_cache, self.fetch_live_emojis
        )

        # Only sync commands when explicitly requested via environment variable.
        # Discord has a strict rate limit of 200 command creates per day.
        if self._settings.sync_commands:
            await self.tree.sync()
            logger.info("commands_synced_globally")
        else:
            logger.info("command_sync_skipped", reason="SYNC_COMMANDS not set")

    async def close(self) -> None:
        """Clean up resources when the client is closing."""
        if self._repository is not None:
            await self._repository.close()
            logger.info("repository_closed")
        await super().close()

    async def fetch_live_emojis(self, server_id: int) -> list[LiveItem]:
        """List a server's current custom emoji from the Discord API."""
        guild = self.get_guild(server_id) or await self.fetch_guild(server_id)
        emojis = await guild.fetch_emojis()
        return [LiveItem(item_id=emoji.id, name=emoji.name) for emoji in emojis]

    # =========================================================================
    # Gateway events
    # =========================================================================

    async def on_message(self, message: discord.Message) -> None:
        await self.router.dispatch(message_to_event(message))

    async def on_raw_reaction_add(self, payload: discord.RawReactionActionEvent) -> None:
        await self.router.dispatch(reaction_to_event(payload))

    async def on_raw_reaction_remove(self, payload: discord.RawReactionActionEvent) -> None:
        await self.router.dispatch(reaction_to_event(payload))

    async def on_interaction(self, interaction: discord.Interaction) -> None:
        """Answer navigation buttons and page-jump modals, then track usage.

        Slash commands are answered by the command tree; this handler only
        counts items on the message the interaction is attached to.
        """
        payload = await self._pagination_response(interaction)
        if payload is not None:
            await send_payload(interaction, payload)
        await self.router.dispatch(interaction_to_event(interaction))

    async def _pagination_response(
        self, interaction: discord.Interaction
    ) -> ResponsePayload | None:
        data = interaction.data or {}
        custom_id = str(data.get("custom_id", ""))

        if interaction.type is discord.InteractionType.component:
            return await self.dispatcher.handle_component(custom_id, interaction.guild_id)

        if interaction.type is discord.InteractionType.modal_submit:
            value = find_text_input_value(data, PAGE_INPUT_ID)
            if value is None:
                logger.debug("page_jump_input_missing", custom_id=custom_id)
                return None
            return await self.dispatcher.handle_page_jump(
                custom_id, value, interaction.guild_id
            )

        return None


def create_bot(settings: Settings) -> DiscordBot:
    """Create and return a configured Discord bot instance."""
    return DiscordBot(settings)
