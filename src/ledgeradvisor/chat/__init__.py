"""Conversational advisor: question parsing, lookups and responses."""

from .responder import AdvisorResponder, generate_welcome_message
from .session import ChatSession, ChatTurn, QUICK_ACTIONS

__all__ = [
    "AdvisorResponder",
    "generate_welcome_message",
    "ChatSession",
    "ChatTurn",
    "QUICK_ACTIONS",
]
