"""
Conversation sessions that thread their history through return values.
"""

from .session import (
    DEFAULT_CHAT_MODEL,
    FIXED_TEMPERATURE_MODELS,
    ChatSession,
    Conversation,
    Message,
    accepts_temperature,
)

__all__ = [
    "DEFAULT_CHAT_MODEL",
    "FIXED_TEMPERATURE_MODELS",
    "ChatSession",
    "Conversation",
    "Message",
    "accepts_temperature",
]
