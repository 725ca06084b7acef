"""Conversation memory utilities."""

from .memory import ConversationMemory, Message, Role
from .session import Session

__all__ = [
    "ConversationMemory",
    "Message",
    "Role",
    "Session",
]
