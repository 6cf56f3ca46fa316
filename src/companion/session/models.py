"""Data models for the chat session.

Hides the internal representation of chat messages.
"""

from datetime import datetime
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field


class Role(str, Enum):
    """Who authored a message."""

    USER = "user"
    COMPANION = "companion"


class ChatMessage(BaseModel):
    """A chat message in the conversation."""

    model_config = ConfigDict(frozen=True)

    role: Role = Field(description="Author of the message: 'user' or 'companion'")
    content: str = Field(description="Content of the message")
    timestamp: datetime = Field(default_factory=datetime.now)
