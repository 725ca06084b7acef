"""Lightweight LLM client abstraction."""

from .client import (
    ChatSession,
    ConversationBusyError,
    GeminiLLMClient,
    LLMClient,
    LLMError,
    LLMPrompt,
    StubLLMClient,
    get_default_client,
)

__all__ = [
    "ChatSession",
    "ConversationBusyError",
    "GeminiLLMClient",
    "LLMClient",
    "LLMError",
    "LLMPrompt",
    "StubLLMClient",
    "get_default_client",
]
