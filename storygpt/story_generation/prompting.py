"""
Fixed prompts used to write a story and ask follow-up questions about it.
"""

from __future__ import annotations

SYSTEM_INFO = """You are Story Bot, a language model that helps users create stories, scripts and more.
Follow the user's instructions carefully and generate the content they requested.
When writing a post, story or script, try to extend the text as much as possible without making it boring.
Do NOT include the title in the post unless you are asked for it."""

TITLE_QUESTION = (
    "What would you call the story (or post)? "
    "Respond only with the name, no other text is needed."
)

IMAGE_PROMPT_QUESTION = (
    "Based on the previous story, write a prompt for an image generation service Dall-E. "
    "Keep the prompt detailed and tell the system to use a particular art style referring to a particular artist/painter. "
    "Make the prompt be less than 400 characters. "
    "Respond only with the prompt. No other text is needed."
)
