"""Shared constants for Discord client components."""

# Embed colors (Discord color values)
EMBED_COLOR_INFO = 0x3498DB

# Discord rejects message content longer than this
MESSAGE_CONTENT_LIMIT = 2000

# How long sent navigation views stay in the client's view store (seconds).
# Buttons keep working afterwards: their custom_ids are handled statelessly.
NAVIGATION_VIEW_TIMEOUT = 600.0  # 10 minutes
