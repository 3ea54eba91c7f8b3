"""
StoryGPT package exposing story generation, prompt verification and image tooling.
"""

from .ai_generation import ImageGenerator, ReplicateImageGenerator
from .chat import ChatSession, Conversation, Message
from .pipeline import StoryGPTOrchestrator, StoryPayload, create_story
from .story_generation import SYSTEM_INFO, Story
from .verification import VerificationResult, verify_prompt

__all__ = [
    "ChatSession",
    "Conversation",
    "ImageGenerator",
    "Message",
    "ReplicateImageGenerator",
    "SYSTEM_INFO",
    "Story",
    "StoryGPTOrchestrator",
    "StoryPayload",
    "VerificationResult",
    "create_story",
    "verify_prompt",
]
