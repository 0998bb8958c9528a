"""Persistent advisor state."""

from .store import StateStore, DEFAULT_HISTORY_LIMIT

__all__ = ["StateStore", "DEFAULT_HISTORY_LIMIT"]
