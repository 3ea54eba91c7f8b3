"""
Exceptions raised by StoryGPT when a provider response cannot be used.
"""

from __future__ import annotations


class StoryGPTError(RuntimeError):
    """Base class for every error raised by StoryGPT itself."""


class EmptyResultError(StoryGPTError):
    """The completion provider returned no candidate completions."""


class NullMessageError(StoryGPTError):
    """The top candidate completion carried no message."""


class EmptyContentError(StoryGPTError):
    """The story answer came back without any text."""


class EmptyTitleError(StoryGPTError):
    """The title answer came back without any text."""


class EmptyImagePromptError(StoryGPTError):
    """The illustration prompt answer came back without any text."""


class MissingToolCallError(StoryGPTError):
    """The classification answer lacked the forced tool call or its arguments."""


class InsufficientImagesError(StoryGPTError):
    """The image provider returned fewer images than requested."""


class NullImageURLError(StoryGPTError):
    """One slot of an image batch had no URL."""
