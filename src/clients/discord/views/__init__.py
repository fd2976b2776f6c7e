"""Discord UI views."""

from src.clients.discord.views.usage_views import (
    PageJumpModal,
    build_embed,
    build_navigation_view,
    send_payload,
)

__all__ = [
    "PageJumpModal",
    "build_embed",
    "build_navigation_view",
    "send_payload",
]
