"""
Gate that decides whether a free-text prompt is a request for a story.
"""

from __future__ import annotations

import json
import logging
import os
from dataclasses import dataclass
from typing import Any

from storygpt.common import (
    ChatResult,
    CompletionCallable,
    MissingToolCallError,
    ModerationCallable,
    ModerationResult,
    call_chat_completion,
    call_moderation,
    response_field,
)

DEFAULT_VERIFY_MODEL = "gpt-4-turbo"
DEFAULT_MODERATION_MODEL = "omni-moderation-latest"

VERIFY_SYSTEM_PROMPT = (
    "You verify if a prompt is a set of instructions to a story or blogpost "
    "or if it is an unrelated command"
)

MODERATION_TEMPLATE = "The following text was submitted by a user as the prompt for a story: {prompt}"

STORY_PROMPT_TOOL: dict[str, Any] = {
    "type": "function",
    "function": {
        "name": "is_story_prompt",
        "description": "Informs if a prompt is a story prompt",
        "parameters": {
            "type": "object",
            "properties": {
                "isStory": {
                    "type": "boolean",
                    "description": (
                        "True if the prompt is an instruction for a story or a blog. "
                        "False if the prompt is unrelated"
                    ),
                },
                "kindOfPrompt": {
                    "type": "string",
                    "description": (
                        "Explain what is missing to be a story prompt. Around 140 characters"
                    ),
                },
            },
            "required": ["isStory", "kindOfPrompt"],
        },
    },
}


@dataclass(frozen=True)
class VerificationResult:
    """
    Verdict of :func:`verify_prompt`. ``reason`` is only set for rejections.
    """

    valid: bool
    reason: str | None = None

    @classmethod
    def accepted(cls) -> "VerificationResult":
        return cls(valid=True)

    @classmethod
    def rejected(cls, reason: str) -> "VerificationResult":
        return cls(valid=False, reason=reason)

    def __bool__(self) -> bool:
        return self.valid


def verify_prompt(
    prompt: str,
    *,
    chat_model: str | None = None,
    moderation_model: str | None = None,
    moderation: bool = True,
    api_key: str | None = None,
    completion_fn: CompletionCallable | None = None,
    moderation_fn: ModerationCallable | None = None,
    logger: logging.Logger | None = None,
) -> VerificationResult:
    """
    Check that ``prompt`` asks for a story before spending a generation on it.

    The prompt first goes through the moderation endpoint; any flagged
    category rejects it with the category names as the reason and the
    classifier is never called. Otherwise a chat model classifies it through
    the ``is_story_prompt`` tool. Pass ``moderation=False`` to skip the first
    step.

    Raises
    ------
    MissingToolCallError
        The classifier answered without the tool call or with unreadable arguments.
    """
    log = logger or logging.getLogger(__name__)
    resolved_api_key = api_key or os.getenv("OPENAI_API_KEY") or os.getenv("LITELLM_API_KEY")

    if moderation:
        moderate = moderation_fn or call_moderation
        verdict: ModerationResult = moderate(
            input=MODERATION_TEMPLATE.format(prompt=prompt),
            model=(
                moderation_model
                or os.getenv("STORYGPT_MODERATION_MODEL")
                or DEFAULT_MODERATION_MODEL
            ),
            api_key=resolved_api_key,
        )
        if verdict.flagged or verdict.categories:
            reason = ", ".join(verdict.categories) or "flagged by moderation"
            log.warning("Prompt flagged by moderation: %s", reason)
            return VerificationResult.rejected(reason)

    complete = completion_fn or call_chat_completion
    result: ChatResult = complete(
        model=chat_model or os.getenv("STORYGPT_VERIFY_MODEL") or DEFAULT_VERIFY_MODEL,
        messages=[
            {"role": "system", "content": VERIFY_SYSTEM_PROMPT},
            {"role": "user", "content": f"Is the following prompt a prompt for a story?\n\n{prompt}"},
        ],
        tools=[STORY_PROMPT_TOOL],
        tool_choice={"type": "function", "function": {"name": "is_story_prompt"}},
        api_key=resolved_api_key,
    )

    arguments = _parse_tool_arguments(result)
    if arguments.get("isStory") is True:
        return VerificationResult.accepted()

    reason = str(arguments.get("kindOfPrompt") or "").strip()
    log.info("Prompt rejected as non-story: %s", reason)
    return VerificationResult.rejected(reason)


def _parse_tool_arguments(result: ChatResult) -> dict[str, Any]:
    if not result.tool_calls:
        raise MissingToolCallError("Missing tool calls.")

    function = response_field(result.tool_calls[0], "function")
    raw_arguments = response_field(function, "arguments")
    if not raw_arguments:
        raise MissingToolCallError("Tool call carried no arguments.")

    try:
        arguments = json.loads(raw_arguments)
    except (TypeError, json.JSONDecodeError) as exc:
        raise MissingToolCallError("Failed to parse tool call arguments as JSON.") from exc

    if not isinstance(arguments, dict) or not isinstance(arguments.get("isStory"), bool):
        raise MissingToolCallError("Tool call arguments do not match the is_story_prompt schema.")
    return arguments
