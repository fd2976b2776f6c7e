"""Inbound platform events - platform agnostic.

The Discord client translates gateway payloads into these variants. The set
is closed: every variant carries an EventKind, and the router handles each
kind in exactly one branch.
"""

from dataclasses import dataclass, field
from enum import Enum, auto
from typing import ClassVar

from src.core.extraction import StickerReference


class EventKind(Enum):
    """Discriminator for inbound events."""

    MESSAGE_POSTED = auto()
    REACTION_ADDED = auto()
    REACTION_REMOVED = auto()
    INTERACTION_RECEIVED = auto()


@dataclass(frozen=True)
class ReactionEmoji:
    """The emoji of a reaction.

    Attributes:
        item_id: Emoji ID, None for standard Unicode emoji.
        name: Emoji name (or the Unicode character itself).
        is_custom: Whether the emoji is a server-specific custom emoji.
    """

    item_id: int | None
    name: str
    is_custom: bool


@dataclass(frozen=True)
class MessagePosted:
    """A message was created.

    Attributes:
        server_id: Guild ID, None for direct messages.
        author_is_bot: Whether the author is an automated account.
        content: Raw message text.
        stickers: Stickers attached to the message.
    """

    kind: ClassVar[EventKind] = EventKind.MESSAGE_POSTED

    server_id: int | None
    author_is_bot: bool
    content: str
    stickers: tuple[StickerReference, ...] = field(default_factory=tuple)


@dataclass(frozen=True)
class ReactionAdded:
    """A reaction was added to a message."""

    kind: ClassVar[EventKind] = EventKind.REACTION_ADDED

    server_id: int | None
    emoji: ReactionEmoji


@dataclass(frozen=True)
class ReactionRemoved:
    """A reaction was removed from a message."""

    kind: ClassVar[EventKind] = EventKind.REACTION_REMOVED

    server_id: int | None
    emoji: ReactionEmoji


@dataclass(frozen=True)
class InteractionReceived:
    """An interaction arrived, optionally attached to an existing message.

    Attributes:
        server_id: Guild ID, None outside servers.
        message: The message the interaction's component lives on, if any.
    """

    kind: ClassVar[EventKind] = EventKind.INTERACTION_RECEIVED

    server_id: int | None
    message: MessagePosted | None = None


InboundEvent = MessagePosted | ReactionAdded | ReactionRemoved | InteractionReceived
