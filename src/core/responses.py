"""Platform-agnostic response payloads.

The dispatcher describes what to show; the Discord client decides how.
"""

from dataclasses import dataclass, field
from enum import Enum

from src.core.pagination import ModalSpec, NavControl

ERROR_PREFIX = "❌ "


class ResponseKind(Enum):
    """How a response is delivered."""

    MESSAGE = "message"  # New reply to the interaction
    UPDATE = "update"  # Edit of the message the component lives on
    MODAL = "modal"  # Modal prompt


@dataclass(frozen=True)
class EmbedSpec:
    """An embed card with a title and an image."""

    title: str
    image_url: str | None = None


@dataclass
class ResponsePayload:
    """Everything the renderer needs for one interaction response.

    Attributes:
        kind: Delivery mode.
        content: Message text.
        ephemeral: Only visible to the invoking user (MESSAGE responses only).
        controls: Navigation buttons, rendered as one row.
        embeds: Embed cards, e.g. sticker previews.
        modal: The prompt to open for MODAL responses.
    """

    kind: ResponseKind
    content: str | None = None
    ephemeral: bool = True
    controls: list[NavControl] = field(default_factory=list)
    embeds: list[EmbedSpec] = field(default_factory=list)
    modal: ModalSpec | None = None

    @classmethod
    def error(cls, message: str) -> "ResponsePayload":
        """A private error reply."""
        return cls(kind=ResponseKind.MESSAGE, content=ERROR_PREFIX + message, ephemeral=True)

    @property
    def is_error(self) -> bool:
        return self.content is not None and self.content.startswith(ERROR_PREFIX)
