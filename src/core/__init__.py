"""Core business logic and protocols.

This module contains the platform-agnostic usage-tracking engine: item
extraction, event routing, the live-list cache, pagination and command
dispatch.
"""

from src.core.dispatcher import Command, CommandDispatcher
from src.core.errors import (
    ErrorCategory,
    ItemNotFoundError,
    LiveListFetchError,
    StoreError,
    TrackerError,
    classify_error,
)
from src.core.events import (
    EventKind,
    InboundEvent,
    InteractionReceived,
    MessagePosted,
    ReactionAdded,
    ReactionEmoji,
    ReactionRemoved,
)
from src.core.extraction import (
    EmojiReference,
    StickerReference,
    extract_emoji_references,
    extract_sticker_references,
)
from src.core.live_cache import LiveItem, LiveListCache
from src.core.logging import (
    bind_contextvars,
    clear_contextvars,
    configure_logging,
    get_logger,
)
from src.core.pagination import (
    NavControl,
    PageToken,
    build_navigation,
    decode_token,
    encode_token,
    total_pages,
)
from src.core.responses import EmbedSpec, ResponseKind, ResponsePayload
from src.core.router import EventRouter

__all__ = [
    # Dispatch
    "Command",
    "CommandDispatcher",
    "EventRouter",
    # Errors
    "ErrorCategory",
    "ItemNotFoundError",
    "LiveListFetchError",
    "StoreError",
    "TrackerError",
    "classify_error",
    # Events
    "EventKind",
    "InboundEvent",
    "InteractionReceived",
    "MessagePosted",
    "ReactionAdded",
    "ReactionEmoji",
    "ReactionRemoved",
    # Extraction
    "EmojiReference",
    "StickerReference",
    "extract_emoji_references",
    "extract_sticker_references",
    # Live list cache
    "LiveItem",
    "LiveListCache",
    # Logging
    "bind_contextvars",
    "clear_contextvars",
    "configure_logging",
    "get_logger",
    # Pagination
    "NavControl",
    "PageToken",
    "build_navigation",
    "decode_token",
    "encode_token",
    "total_pages",
    # Responses
    "EmbedSpec",
    "ResponseKind",
    "ResponsePayload",
]
