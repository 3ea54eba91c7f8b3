"""
Common utilities shared across StoryGPT modules.
"""

from .errors import (
    EmptyContentError,
    EmptyImagePromptError,
    EmptyResultError,
    EmptyTitleError,
    InsufficientImagesError,
    MissingToolCallError,
    NullImageURLError,
    NullMessageError,
    StoryGPTError,
)
from .llm import (
    ChatMessage,
    ChatResult,
    CompletionCallable,
    ImageCallable,
    ModerationCallable,
    ModerationResult,
    call_chat_completion,
    call_image_generation,
    call_moderation,
    response_field,
)

__all__ = [
    "ChatMessage",
    "ChatResult",
    "CompletionCallable",
    "ImageCallable",
    "ModerationCallable",
    "ModerationResult",
    "call_chat_completion",
    "call_image_generation",
    "call_moderation",
    "response_field",
    "StoryGPTError",
    "EmptyResultError",
    "NullMessageError",
    "EmptyContentError",
    "EmptyTitleError",
    "EmptyImagePromptError",
    "MissingToolCallError",
    "InsufficientImagesError",
    "NullImageURLError",
]
