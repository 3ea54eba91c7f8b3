"""
End-to-end orchestration for StoryGPT story and image generation.
"""

from .pipeline import ProgressCallback, StoryGPTOrchestrator, StoryPayload, create_story

__all__ = ["ProgressCallback", "StoryGPTOrchestrator", "StoryPayload", "create_story"]
