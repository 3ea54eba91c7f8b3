"""Tests for the story prompt gate."""

from __future__ import annotations

import json
from types import SimpleNamespace
from unittest.mock import MagicMock

import pytest

from storygpt.common import ChatResult, ModerationResult
from storygpt.common.errors import MissingToolCallError
from storygpt.verification import STORY_PROMPT_TOOL, VerificationResult, verify_prompt

from conftest import FakeCompletion, FakeModeration


def _tool_answer(arguments):
    if not isinstance(arguments, str):
        arguments = json.dumps(arguments)
    call = {"type": "function", "function": {"name": "is_story_prompt", "arguments": arguments}}
    return ChatResult(text="", raw=None, tool_calls=(call,))


def test_story_prompt_is_accepted():
    moderation = FakeModeration()
    completion = FakeCompletion([_tool_answer({"isStory": True, "kindOfPrompt": "story"})])

    result = verify_prompt(
        "Write a story about a friendly dragon",
        completion_fn=completion,
        moderation_fn=moderation,
    )

    assert result == VerificationResult.accepted()
    assert result.reason is None
    assert "Write a story about a friendly dragon" in moderation.calls[0]["input"]
    assert moderation.calls[0]["model"] == "omni-moderation-latest"
    call = completion.calls[0]
    assert call["model"] == "gpt-4-turbo"
    assert call["tools"] == [STORY_PROMPT_TOOL]
    assert call["tool_choice"]["function"]["name"] == "is_story_prompt"
    assert call["messages"][1]["content"].endswith("Write a story about a friendly dragon")


def test_unrelated_prompt_is_rejected_with_explanation():
    completion = FakeCompletion(
        [_tool_answer({"isStory": False, "kindOfPrompt": "A math question, not a story."})]
    )

    result = verify_prompt("What is 2 + 2?", completion_fn=completion, moderation_fn=FakeModeration())

    assert not result
    assert result.reason == "A math question, not a story."


def test_flagged_prompt_short_circuits_classification():
    completion = FakeCompletion()
    moderation = FakeModeration(("violence", "harassment/threatening"))

    result = verify_prompt("something awful", completion_fn=completion, moderation_fn=moderation)

    assert result == VerificationResult.rejected("violence, harassment/threatening")
    assert completion.calls == []


def test_moderation_can_be_skipped():
    moderation = FakeModeration(("violence",))
    completion = FakeCompletion([_tool_answer({"isStory": True, "kindOfPrompt": ""})])

    result = verify_prompt(
        "A duel at dawn", moderation=False, completion_fn=completion, moderation_fn=moderation
    )

    assert result.valid
    assert moderation.calls == []


def test_tool_call_objects_are_supported():
    call = SimpleNamespace(function=SimpleNamespace(arguments='{"isStory": true, "kindOfPrompt": "ok"}'))
    completion = FakeCompletion([ChatResult(text="", raw=None, tool_calls=(call,))])

    assert verify_prompt("tell me a tale", completion_fn=completion, moderation_fn=FakeModeration())


@pytest.mark.parametrize(
    "answer",
    [
        ChatResult(text="Yes, it is a story.", raw=None),
        _tool_answer(""),
        _tool_answer("{not json"),
        _tool_answer({"kindOfPrompt": "missing verdict"}),
        _tool_answer(["isStory"]),
    ],
)
def test_malformed_tool_call_raises(answer):
    with pytest.raises(MissingToolCallError):
        verify_prompt(
            "tell me a tale",
            completion_fn=FakeCompletion([answer]),
            moderation_fn=FakeModeration(),
        )


def test_models_from_environment(monkeypatch):
    monkeypatch.setenv("STORYGPT_VERIFY_MODEL", "gpt-4o-mini")
    monkeypatch.setenv("STORYGPT_MODERATION_MODEL", "text-moderation-latest")
    moderation = FakeModeration()
    completion = FakeCompletion([_tool_answer({"isStory": True, "kindOfPrompt": ""})])

    verify_prompt("tell me a tale", completion_fn=completion, moderation_fn=moderation)

    assert moderation.calls[0]["model"] == "text-moderation-latest"
    assert completion.calls[0]["model"] == "gpt-4o-mini"


def test_flagged_without_categories_uses_generic_reason():
    completion = FakeCompletion()

    def moderation_fn(**kwargs):
        return ModerationResult(flagged=True, categories=(), raw=None)

    result = verify_prompt("something awful", completion_fn=completion, moderation_fn=moderation_fn)

    assert result == VerificationResult.rejected("flagged by moderation")
    assert completion.calls == []


def test_injected_logger_receives_rejection():
    logger = MagicMock()

    verify_prompt(
        "something awful",
        completion_fn=FakeCompletion(),
        moderation_fn=FakeModeration(("violence",)),
        logger=logger,
    )

    logger.warning.assert_called_once_with("Prompt flagged by moderation: %s", "violence")
