"""Ports (interfaces) for the application.

This module contains the Protocol that defines the boundary between the
usage-tracking core and the counter store.
"""

from src.ports.repositories import AsyncUsageRepository, ItemKind, TrackedItem

__all__ = [
    "AsyncUsageRepository",
    "ItemKind",
    "TrackedItem",
]
