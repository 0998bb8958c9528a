"""Contracts: pydantic models shared across the package."""

from .records import Record, RecordType, Budget, Account, Ledger, UNCATEGORIZED
from .chat import ChatMessage, MessageType, AdvisorProfile

__all__ = [
    "Record",
    "RecordType",
    "Budget",
    "Account",
    "Ledger",
    "UNCATEGORIZED",
    "ChatMessage",
    "MessageType",
    "AdvisorProfile",
]
