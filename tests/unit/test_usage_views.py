"""Tests for rendering response payloads into Discord responses."""

from unittest.mock import AsyncMock, MagicMock, patch

import discord

from src.clients.discord.utils import find_text_input_value, truncate_content
from src.clients.discord.views.usage_views import (
    PageJumpModal,
    build_embed,
    build_navigation_view,
    send_payload,
)
from src.core.pagination import (
    EMOJI_PAGE_PREFIX,
    PageToken,
    build_navigation,
    build_page_jump_modal,
)
from src.core.responses import EmbedSpec, ResponseKind, ResponsePayload


def make_interaction() -> MagicMock:
    interaction = MagicMock()
    interaction.response.send_message = AsyncMock()
    interaction.response.edit_message = AsyncMock()
    interaction.response.send_modal = AsyncMock()
    return interaction


class TestBuildNavigationView:
    """Tests for build_navigation_view."""

    async def test_buttons_mirror_controls(self) -> None:
        controls = build_navigation(5, 12, EMOJI_PAGE_PREFIX)

        view = build_navigation_view(controls)

        buttons = view.children
        assert [b.label for b in buttons] == ["<<", "<", "6/12", ">", ">>"]
        assert [b.custom_id for b in buttons] == [c.token for c in controls]
        assert buttons[2].style is discord.ButtonStyle.success
        assert buttons[0].style is discord.ButtonStyle.primary

    async def test_disabled_indicator(self) -> None:
        view = build_navigation_view(build_navigation(0, 1, EMOJI_PAGE_PREFIX))

        [button] = view.children
        assert button.disabled


class TestBuildEmbed:
    """Tests for build_embed."""

    def test_sticker_card(self) -> None:
        embed = build_embed(EmbedSpec(title="hello x3", image_url="https://x/1.webp"))

        assert embed.title == "hello x3"
        assert embed.image.url == "https://x/1.webp"


class TestPageJumpModal:
    """Tests for PageJumpModal."""

    async def test_fields_from_modal_description(self) -> None:
        spec = build_page_jump_modal(PageToken(EMOJI_PAGE_PREFIX, 2, jump=True))

        modal = PageJumpModal(spec)

        assert modal.title == "Page Jump"
        assert modal.custom_id == "emoji_page:2:jump"
        assert modal.page.custom_id == "page_input"
        assert modal.page.default == "3"
        assert modal.page.placeholder == "Go to page 3"


class TestSendPayload:
    """Tests for send_payload."""

    async def test_message_with_controls(self) -> None:
        interaction = make_interaction()
        payload = ResponsePayload(
            kind=ResponseKind.MESSAGE,
            content="**Custom Emoji Usage Statistics**",
            ephemeral=False,
            controls=build_navigation(0, 2, EMOJI_PAGE_PREFIX),
        )

        await send_payload(interaction, payload)

        kwargs = interaction.response.send_message.await_args.kwargs
        assert kwargs["content"] == "**Custom Emoji Usage Statistics**"
        assert kwargs["ephemeral"] is False
        assert isinstance(kwargs["view"], discord.ui.View)

    async def test_error_message_has_no_view(self) -> None:
        interaction = make_interaction()

        await send_payload(interaction, ResponsePayload.error("Failed to reset counts."))

        kwargs = interaction.response.send_message.await_args.kwargs
        assert kwargs["content"] == "❌ Failed to reset counts."
        assert kwargs["ephemeral"] is True
        assert "view" not in kwargs

    async def test_error_reply_is_logged(self) -> None:
        interaction = make_interaction()

        with patch("src.clients.discord.views.usage_views.logger") as logger:
            await send_payload(interaction, ResponsePayload.error("Failed to reset counts."))

        logger.info.assert_called_once_with(
            "error_response_sent",
            interaction_id=interaction.id,
            content="❌ Failed to reset counts.",
        )

    async def test_normal_reply_not_logged_as_error(self) -> None:
        interaction = make_interaction()

        with patch("src.clients.discord.views.usage_views.logger") as logger:
            await send_payload(
                interaction, ResponsePayload(kind=ResponseKind.MESSAGE, content="ok")
            )

        logger.info.assert_not_called()

    async def test_update_edits_message(self) -> None:
        interaction = make_interaction()
        payload = ResponsePayload(
            kind=ResponseKind.UPDATE,
            content="**Sticker Usage Statistics**",
            embeds=[EmbedSpec(title="a x1", image_url="https://x/a.webp")],
            controls=build_navigation(1, 2, EMOJI_PAGE_PREFIX),
        )

        await send_payload(interaction, payload)

        interaction.response.send_message.assert_not_awaited()
        kwargs = interaction.response.edit_message.await_args.kwargs
        assert len(kwargs["embeds"]) == 1
        assert isinstance(kwargs["view"], discord.ui.View)

    async def test_modal(self) -> None:
        interaction = make_interaction()
        spec = build_page_jump_modal(PageToken(EMOJI_PAGE_PREFIX, 0, jump=True))

        await send_payload(interaction, ResponsePayload(kind=ResponseKind.MODAL, modal=spec))

        [modal] = interaction.response.send_modal.await_args.args
        assert isinstance(modal, PageJumpModal)

    async def test_http_errors_are_logged_not_raised(self) -> None:
        interaction = make_interaction()
        interaction.response.send_message.side_effect = discord.HTTPException(
            MagicMock(status=404, reason="Not Found"), "Unknown interaction"
        )

        await send_payload(interaction, ResponsePayload.error("x"))


class TestUtils:
    """Tests for Discord utility helpers."""

    def test_short_content_unchanged(self) -> None:
        assert truncate_content("hello") == "hello"

    def test_truncates_on_line_boundary(self) -> None:
        text = "\n".join(f"- line {i:04d}" for i in range(300))

        result = truncate_content(text)

        assert len(result) <= 2000
        assert result.endswith("\n…")
        assert result.splitlines()[-2].startswith("- line ")
        assert text.startswith(result[: -len("\n…")])

    def test_finds_text_input_value(self) -> None:
        data = {
            "custom_id": "emoji_page:0:jump",
            "components": [
                {"type": 1, "components": [{"type": 4, "custom_id": "page_input", "value": "4"}]}
            ],
        }

        assert find_text_input_value(data, "page_input") == "4"

    def test_finds_value_in_label_component(self) -> None:
        data = {
            "components": [
                {"type": 18, "component": {"type": 4, "custom_id": "page_input", "value": "2"}}
            ]
        }

        assert find_text_input_value(data, "page_input") == "2"

    def test_missing_input(self) -> None:
        assert find_text_input_value({"components": []}, "page_input") is None
        assert find_text_input_value(None, "page_input") is None
