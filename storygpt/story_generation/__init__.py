"""
Story generation utilities: the story itself, its title and its illustration.
"""

from .prompting import IMAGE_PROMPT_QUESTION, SYSTEM_INFO, TITLE_QUESTION
from .story import DEFAULT_STORY_MODEL, Story, random_temperature, strip_trailing_period

__all__ = [
    "DEFAULT_STORY_MODEL",
    "IMAGE_PROMPT_QUESTION",
    "SYSTEM_INFO",
    "TITLE_QUESTION",
    "Story",
    "random_temperature",
    "strip_trailing_period",
]
