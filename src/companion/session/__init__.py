"""Chat session module.

Holds the conversation transcript for the lifetime of one widget activation.
"""

from .models import ChatMessage, Role
from .store import SessionStore

__all__ = [
    "ChatMessage",
    "Role",
    "SessionStore",
]
