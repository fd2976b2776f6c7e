"""Rendering of usage-list responses as Discord messages, views and modals.

Navigation buttons carry their pagination token as custom_id and have no
callbacks of their own: presses are answered by DiscordBot.on_interaction,
so lists keep paging after the view expires or the bot restarts.
"""

from typing import Any

import discord

from src.clients.discord.constants import EMBED_COLOR_INFO, NAVIGATION_VIEW_TIMEOUT
from src.clients.discord.utils import truncate_content
from src.core.logging import get_logger
from src.core.pagination import ControlStyle, ModalSpec, NavControl
from src.core.responses import EmbedSpec, ResponseKind, ResponsePayload

logger = get_logger(__name__)

_BUTTON_STYLES: dict[ControlStyle, discord.ButtonStyle] = {
    ControlStyle.PRIMARY: discord.ButtonStyle.primary,
    ControlStyle.SUCCESS: discord.ButtonStyle.success,
}


def build_navigation_view(controls: list[NavControl]) -> discord.ui.View:
    """Build a single-row view of navigation buttons."""
    view = discord.ui.View(timeout=NAVIGATION_VIEW_TIMEOUT)
    for control in controls:
        view.add_item(
            discord.ui.Button(
                label=control.label,
                custom_id=control.token,
                style=_BUTTON_STYLES[control.style],
                disabled=control.disabled,
                row=0,
            )
        )
    return view


def build_embed(spec: EmbedSpec) -> discord.Embed:
    """Build an embed card from its description."""
    embed = discord.Embed(title=spec.title, color=EMBED_COLOR_INFO)
    if spec.image_url:
        embed.set_image(url=spec.image_url)
    return embed


class PageJumpModal(discord.ui.Modal):
    """Prompt for a page number.

    Submissions are answered by DiscordBot.on_interaction, which reads the
    value back out of the raw interaction data.
    """

    def __init__(self, spec: ModalSpec) -> None:
        super().__init__(title=spec.title, custom_id=spec.custom_id)
        self.page: discord.ui.TextInput[PageJumpModal] = discord.ui.TextInput(
            label=spec.label,
            custom_id=spec.input_id,
            placeholder=spec.placeholder,
            default=spec.value,
            style=discord.TextStyle.short,
            required=True,
        )
        self.add_item(self.page)


def _message_kwargs(payload: ResponsePayload) -> dict[str, Any]:
    kwargs: dict[str, Any] = {
        "content": truncate_content(payload.content) if payload.content else None,
        "embeds": [build_embed(spec) for spec in payload.embeds],
    }
    if payload.controls:
        kwargs["view"] = build_navigation_view(payload.controls)
    return kwargs


async def send_payload(interaction: discord.Interaction, payload: ResponsePayload) -> None:
    """Answer an interaction with a response payload.

    MESSAGE payloads become a new reply, UPDATE payloads edit the message the
    component lives on, MODAL payloads open a modal. Discord API errors are
    logged rather than raised; there is nothing left to tell the user.
    """
    if payload.is_error:
        logger.info(
            "error_response_sent", interaction_id=interaction.id, content=payload.content
        )
    try:
        if payload.kind is ResponseKind.MODAL:
            assert payload.modal is not None, "Modal payload without a modal"
            await interaction.response.send_modal(PageJumpModal(payload.modal))
        elif payload.kind is ResponseKind.UPDATE:
            kwargs = _message_kwargs(payload)
            kwargs.setdefault("view", None)
            await interaction.response.edit_message(**kwargs)
        else:
            await interaction.response.send_message(
                ephemeral=payload.ephemeral, **_message_kwargs(payload)
            )
    except discord.HTTPException as ex:
        logger.error(
            "interaction_response_failed",
            response_kind=payload.kind.value,
            interaction_id=interaction.id,
            error=str(ex),
        )
