"""Pagination business logic - platform agnostic.

Pagination state is never stored server-side. It lives entirely in the
custom_id of the navigation buttons, a colon-delimited token:

    emoji_page:3        show page 3 (zero-based)
    emoji_page:3:jump   open the page-jump prompt while on page 3

Every interaction re-runs the paged query for the page the token names.
"""

import math
import re
from dataclasses import dataclass
from enum import Enum

EMOJI_PAGE_PREFIX = "emoji_page"
STICKER_PAGE_PREFIX = "sticker_page"
KNOWN_PREFIXES: frozenset[str] = frozenset({EMOJI_PAGE_PREFIX, STICKER_PAGE_PREFIX})

JUMP_MARKER = "jump"
PAGE_INPUT_ID = "page_input"

# Page numbers on the wire are plain ASCII digits
PAGE_NUMBER_PATTERN = re.compile(r"\d+", re.ASCII)

# How far the << and >> controls move
JUMP_STEP = 10


class ControlStyle(Enum):
    """Visual weight of a navigation control."""

    PRIMARY = "primary"
    SUCCESS = "success"


@dataclass(frozen=True)
class PageToken:
    """Decoded pagination token."""

    prefix: str
    page: int
    jump: bool = False

    def encode(self) -> str:
        return encode_token(self.prefix, self.page, self.jump)


@dataclass(frozen=True)
class NavControl:
    """A navigation button to render."""

    label: str
    token: str
    style: ControlStyle = ControlStyle.PRIMARY
    disabled: bool = False


@dataclass(frozen=True)
class ModalSpec:
    """A single-input modal prompt to render."""

    title: str
    custom_id: str
    input_id: str
    label: str
    placeholder: str
    value: str


@dataclass(frozen=True)
class PageState:
    """Position within a paginated result."""

    page: int
    total_pages: int

    @property
    def in_range(self) -> bool:
        return 0 <= self.page < self.total_pages

    @property
    def has_prev(self) -> bool:
        return self.page > 0

    @property
    def has_next(self) -> bool:
        return self.page < self.total_pages - 1


def total_pages(total_rows: int, page_size: int) -> int:
    """Number of pages needed for total_rows, at least one."""
    return max(1, math.ceil(total_rows / page_size))


def encode_token(prefix: str, page: int, jump: bool = False) -> str:
    """Build the custom_id for a navigation control."""
    if jump:
        return f"{prefix}:{page}:{JUMP_MARKER}"
    return f"{prefix}:{page}"


def decode_token(token: str) -> PageToken | None:
    """Parse a navigation custom_id.

    Returns None for anything that is not a well-formed token of a known
    result kind; callers treat that as "ignore the interaction".
    """
    parts = token.split(":")
    if len(parts) not in (2, 3):
        return None

    prefix, raw_page = parts[0], parts[1]
    if prefix not in KNOWN_PREFIXES:
        return None

    jump = len(parts) == 3
    if jump and parts[2] != JUMP_MARKER:
        return None

    if PAGE_NUMBER_PATTERN.fullmatch(raw_page) is None:
        return None
    page = int(raw_page)

    return PageToken(prefix=prefix, page=page, jump=jump)


def build_navigation(page: int, pages: int, prefix: str) -> list[NavControl]:
    """Compute the navigation controls for a page, in display order.

    The page indicator is always present and opens the page-jump prompt.
    Previous/next controls only appear when they lead somewhere, and the
    ten-page jumps only when they land on a different page than the single
    steps would. An out-of-range page gets the indicator alone, disabled.
    """
    state = PageState(page=page, total_pages=pages)
    indicator = NavControl(
        label=f"{page + 1}/{pages}",
        token=encode_token(prefix, page, jump=True),
        style=ControlStyle.SUCCESS,
        disabled=not state.in_range or pages <= 1,
    )
    if not state.in_range:
        return [indicator]

    controls: list[NavControl] = []
    if page > 1:
        controls.append(NavControl("<<", encode_token(prefix, max(page - JUMP_STEP, 0))))
    if state.has_prev:
        controls.append(NavControl("<", encode_token(prefix, page - 1)))

    controls.append(indicator)

    if state.has_next:
        controls.append(NavControl(">", encode_token(prefix, page + 1)))
    if page < pages - 2:
        controls.append(
            NavControl(">>", encode_token(prefix, min(page + JUMP_STEP, pages - 1)))
        )
    return controls


def build_page_jump_modal(token: PageToken) -> ModalSpec:
    """Describe the page-jump prompt opened from the page indicator."""
    return ModalSpec(
        title="Page Jump",
        custom_id=token.encode(),
        input_id=PAGE_INPUT_ID,
        label="Page",
        placeholder=f"Go to page {token.page + 1}",
        value=str(token.page + 1),
    )


def resolve_jump_target(submitted_value: str, pages: int) -> int | None:
    """Turn a 1-based page-jump submission into a zero-based page.

    Out-of-range and non-numeric submissions return None rather than being
    clamped, so the current page stays on screen.
    """
    raw_page = submitted_value.strip()
    if PAGE_NUMBER_PATTERN.fullmatch(raw_page) is None:
        return None
    target = int(raw_page) - 1
    if not PageState(page=target, total_pages=pages).in_range:
        return None
    return target
