"""Extraction of trackable items from message content - platform agnostic.

Custom emoji appear inline in message text as ``<:name:id>`` or, for
animated emoji, ``<a:name:id>``. Stickers arrive as a structured list on the
message and need no parsing.
"""

import re
from collections.abc import Iterable
from dataclasses import dataclass

from src.core.logging import get_logger

logger = get_logger(__name__)

CUSTOM_EMOJI_PATTERN = re.compile(r"<(a)?:(\w+):(\d+)>", re.ASCII)

# Snowflakes are stored as signed 64-bit integers
MAX_ITEM_ID = 2**63 - 1


@dataclass(frozen=True)
class EmojiReference:
    """A custom emoji found in message text."""

    name: str
    item_id: int
    animated: bool = False


@dataclass(frozen=True)
class StickerReference:
    """A sticker attached to a message."""

    item_id: int
    name: str


def extract_emoji_references(text: str) -> list[EmojiReference]:
    """Find every custom emoji reference in a piece of text.

    Repeated references are all returned; each one counts as a use.
    References whose id does not fit in 64 bits are skipped and logged.

    Args:
        text: Raw message content.

    Returns:
        References in order of appearance.
    """
    references: list[EmojiReference] = []
    for match in CUSTOM_EMOJI_PATTERN.finditer(text):
        animated_flag, name, raw_id = match.groups()
        try:
            item_id = int(raw_id)
            if item_id > MAX_ITEM_ID:
                raise ValueError(f"{raw_id} exceeds the 64-bit id range")
        except ValueError as ex:
            logger.warning("emoji_id_unparseable", emoji_name=name, raw_id=raw_id, error=str(ex))
            continue
        references.append(
            EmojiReference(name=name, item_id=item_id, animated=animated_flag is not None)
        )
    return references


def extract_sticker_references(
    stickers: Iterable[StickerReference],
) -> list[StickerReference]:
    """Return the stickers attached to a message, in order."""
    return list(stickers)
