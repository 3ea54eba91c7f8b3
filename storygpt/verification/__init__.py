"""
Prompt verification ahead of story generation.
"""

from .verify import STORY_PROMPT_TOOL, VerificationResult, verify_prompt

__all__ = ["STORY_PROMPT_TOOL", "VerificationResult", "verify_prompt"]
