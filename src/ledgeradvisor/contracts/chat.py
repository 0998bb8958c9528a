"""Pydantic models for chat history and the dialog catalog."""

from enum import Enum
from typing import Dict, List
from pydantic import BaseModel, Field


class MessageType(str, Enum):
    """Who wrote a chat message."""
    USER = "user"
    ADVISOR = "advisor"


class ChatMessage(BaseModel):
    """One chat bubble as persisted in the history."""
    type: MessageType = Field(..., description="Author of the message")
    message: str = Field(..., min_length=1, description="Message text (may contain newlines)")

    class Config:
        """Pydantic config."""
        use_enum_values = True


class AdvisorProfile(BaseModel):
    """Persona metadata for the advisor."""
    id: str = Field(default="mori", description="Persona identifier")
    name: str = Field(default="小森", description="Display name")
    tone: str = Field(default="calm_warm", description="Tone of voice")
    principles: List[str] = Field(default_factory=list, description="Guiding principles")
