"""Command and interaction dispatch for usage statistics.

Maps the fixed command set, page buttons and page-jump submissions onto
counter store reads and the pagination engine. Each call is stateless: the
page to show comes from the interaction token, and the paged query runs
again every time.
"""

from collections.abc import Callable
from dataclasses import dataclass
from enum import Enum

from src.core.errors import LiveListFetchError, StoreError
from src.core.live_cache import LiveItemsFetcher, LiveListCache
from src.core.logging import get_logger
from src.core.pagination import (
    EMOJI_PAGE_PREFIX,
    STICKER_PAGE_PREFIX,
    build_navigation,
    build_page_jump_modal,
    decode_token,
    resolve_jump_target,
    total_pages,
)
from src.core.responses import EmbedSpec, ResponseKind, ResponsePayload
from src.ports.repositories import AsyncUsageRepository, ItemKind, TrackedItem

logger = get_logger(__name__)

EMOJI_PAGE_SIZE = 25
STICKER_PAGE_SIZE = 5
LEAST_USED_LIMIT = 25

GUILD_ONLY_MESSAGE = "This command can only be used in a server."
RESET_CONFIRMATION = "✅ All emoji and sticker counts have been reset for this server."
STICKER_IMAGE_URL = "https://media.discordapp.net/stickers/{id}.webp?size=96&quality=lossless"


class Command(Enum):
    """Slash commands, valued by their registered names."""

    LIST_EMOJI_USAGE = "listemotes"
    LIST_STICKER_USAGE = "liststickers"
    LIST_LEAST_USED = "listleastused"
    RESET_COUNTS = "resetcount"


def format_emoji_line(item: TrackedItem) -> str:
    """One list line: emoji, count and relative last-use timestamp."""
    last_used = int(item.last_used.timestamp())
    return f"- <:{item.name}:{item.item_id}> **x{item.usage_count}** (Last: <t:{last_used}:R>)"


def render_emoji_page(
    items: list[TrackedItem], page: int, pages: int, kind: ResponseKind
) -> ResponsePayload:
    lines = ["**Custom Emoji Usage Statistics**", ""]
    if items:
        lines.extend(format_emoji_line(item) for item in items[:EMOJI_PAGE_SIZE])
    else:
        lines.append("No emoji data found for this server.")
    return ResponsePayload(
        kind=kind,
        content="\n".join(lines),
        controls=build_navigation(page, pages, EMOJI_PAGE_PREFIX),
    )


def render_sticker_page(
    items: list[TrackedItem], page: int, pages: int, kind: ResponseKind
) -> ResponsePayload:
    content = "**Sticker Usage Statistics**"
    if not items:
        content += "\n\nNo sticker data found for this server."
    embeds = [
        EmbedSpec(
            title=f"{item.name} x{item.usage_count}",
            image_url=STICKER_IMAGE_URL.format(id=item.item_id),
        )
        for item in items[:STICKER_PAGE_SIZE]
    ]
    return ResponsePayload(
        kind=kind,
        content=content,
        controls=build_navigation(page, pages, STICKER_PAGE_PREFIX),
        embeds=embeds,
    )


@dataclass(frozen=True)
class Listing:
    """A paginated ranking of one item kind."""

    kind: ItemKind
    prefix: str
    page_size: int
    noun: str
    render: Callable[[list[TrackedItem], int, int, ResponseKind], ResponsePayload]


EMOJI_LISTING = Listing(ItemKind.EMOJI, EMOJI_PAGE_PREFIX, EMOJI_PAGE_SIZE, "emoji", render_emoji_page)
STICKER_LISTING = Listing(
    ItemKind.STICKER, STICKER_PAGE_PREFIX, STICKER_PAGE_SIZE, "sticker", render_sticker_page
)
LISTINGS: dict[str, Listing] = {
    EMOJI_PAGE_PREFIX: EMOJI_LISTING,
    STICKER_PAGE_PREFIX: STICKER_LISTING,
}


class CommandDispatcher:
    """Produces response payloads for commands and pagination interactions."""

    def __init__(
        self,
        repository: AsyncUsageRepository,
        live_cache: LiveListCache,
        fetch_live_items: LiveItemsFetcher,
    ) -> None:
        """Initialize the dispatcher.

        Args:
            repository: Counter store to read from and reset.
            live_cache: Cache of each server's current emoji list.
            fetch_live_items: External call listing a server's current emoji.
        """
        self._repository = repository
        self._live_cache = live_cache
        self._fetch_live_items = fetch_live_items

    # =========================================================================
    # Slash commands
    # =========================================================================

    async def run_command(
        self, command: Command, server_id: int | None, share: bool = False
    ) -> ResponsePayload:
        """Execute a slash command.

        Args:
            command: The command invoked.
            server_id: Guild of the invocation, None outside servers.
            share: Make list responses visible to everyone in the channel.

        Returns:
            The reply to send. Failures are reported as error payloads.
        """
        if server_id is None:
            return ResponsePayload.error(GUILD_ONLY_MESSAGE)

        if command is Command.LIST_EMOJI_USAGE:
            return await self._list_first_page(EMOJI_LISTING, server_id, share)
        if command is Command.LIST_STICKER_USAGE:
            return await self._list_first_page(STICKER_LISTING, server_id, share)
        if command is Command.LIST_LEAST_USED:
            return await self._list_least_used(server_id)
        return await self._reset_counts(server_id)

    async def _list_first_page(
        self, listing: Listing, server_id: int, share: bool
    ) -> ResponsePayload:
        try:
            total = await self._repository.count(listing.kind, server_id)
        except StoreError as ex:
            logger.error("count_failed", kind=listing.kind.value, server_id=server_id, error=str(ex))
            return ResponsePayload.error(f"Failed to count {listing.noun}s.")

        try:
            items = await self._repository.paged_list(listing.kind, server_id, 0, listing.page_size)
        except StoreError as ex:
            logger.error("page_fetch_failed", kind=listing.kind.value, server_id=server_id, error=str(ex))
            return ResponsePayload.error(f"Failed to fetch {listing.noun} data.")

        if not items:
            return ResponsePayload.error(f"No {listing.noun} data found for this server.")

        response = listing.render(
            items, 0, total_pages(total, listing.page_size), ResponseKind.MESSAGE
        )
        response.ephemeral = not share
        return response

    async def _list_least_used(self, server_id: int) -> ResponsePayload:
        try:
            live_items = await self._live_cache.get(server_id, self._fetch_live_items)
        except LiveListFetchError as ex:
            logger.error("live_list_unavailable", server_id=server_id, error=str(ex))
            return ResponsePayload.error("Failed to fetch guild emojis.")

        if not live_items:
            return ResponsePayload.error("No custom emojis found in this server.")

        try:
            items = await self._repository.paged_list_filtered(
                ItemKind.EMOJI,
                server_id,
                [item.item_id for item in live_items],
                LEAST_USED_LIMIT,
            )
        except StoreError as ex:
            logger.error("least_used_fetch_failed", server_id=server_id, error=str(ex))
            return ResponsePayload.error("Failed to fetch usage data.")

        lines = ["**Least Used Custom Emojis (tracked)**", ""]
        if items:
            lines.extend(format_emoji_line(item) for item in items)
        else:
            lines.append("No tracked emojis found in the current guild list.")
        return ResponsePayload(kind=ResponseKind.MESSAGE, content="\n".join(lines))

    async def _reset_counts(self, server_id: int) -> ResponsePayload:
        try:
            await self._repository.reset_server(server_id)
        except StoreError as ex:
            logger.error("reset_failed", server_id=server_id, error=str(ex))
            return ResponsePayload.error("Failed to reset counts.")
        return ResponsePayload(kind=ResponseKind.MESSAGE, content=RESET_CONFIRMATION)

    # =========================================================================
    # Pagination interactions
    # =========================================================================

    async def handle_component(
        self, custom_id: str, server_id: int | None
    ) -> ResponsePayload | None:
        """Handle a navigation button press.

        Returns:
            A modal payload for the page indicator, an update payload for page
            buttons, or None when the interaction should be left unanswered
            (unknown token, no server, store failure).
        """
        token = decode_token(custom_id)
        if token is None:
            logger.debug("component_token_ignored", custom_id=custom_id)
            return None

        if token.jump:
            return ResponsePayload(kind=ResponseKind.MODAL, modal=build_page_jump_modal(token))

        if server_id is None:
            return None

        listing = LISTINGS[token.prefix]
        try:
            total = await self._repository.count(listing.kind, server_id)
            return await self._load_page(listing, server_id, token.page, total)
        except StoreError as ex:
            logger.error("page_update_failed", custom_id=custom_id, server_id=server_id, error=str(ex))
            return None

    async def handle_page_jump(
        self, custom_id: str, submitted_value: str, server_id: int | None
    ) -> ResponsePayload | None:
        """Handle a page-jump modal submission.

        The submitted value is 1-based. Out-of-range or non-numeric input
        returns None and the list stays on its current page.
        """
        token = decode_token(custom_id)
        if token is None or server_id is None:
            logger.debug("page_jump_ignored", custom_id=custom_id)
            return None

        listing = LISTINGS[token.prefix]
        try:
            total = await self._repository.count(listing.kind, server_id)
            target = resolve_jump_target(
                submitted_value, total_pages(total, listing.page_size)
            )
            if target is None:
                logger.debug("page_jump_out_of_range", submitted=submitted_value, total_rows=total)
                return None
            return await self._load_page(listing, server_id, target, total)
        except StoreError as ex:
            logger.error("page_jump_failed", custom_id=custom_id, server_id=server_id, error=str(ex))
            return None

    async def _load_page(
        self, listing: Listing, server_id: int, page: int, total: int
    ) -> ResponsePayload:
        items = await self._repository.paged_list(
            listing.kind, server_id, page * listing.page_size, listing.page_size
        )
        return listing.render(
            items, page, total_pages(total, listing.page_size), ResponseKind.UPDATE
        )
