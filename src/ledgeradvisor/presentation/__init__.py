"""Presentation layer - human-friendly formatting."""

from .human_formatter import format_answer, format_nudges, format_history, format_chat_message

__all__ = ["format_answer", "format_nudges", "format_history", "format_chat_message"]
