"""Shared fakes for the provider calls used across the test suite."""

from __future__ import annotations

from typing import Any, Iterable

import pytest

from storygpt.common import ChatResult, ModerationResult


class FakeCompletion:
    """Stands in for ``call_chat_completion``; replays queued answers and records calls."""

    def __init__(self, answers: Iterable[str | ChatResult] = ()) -> None:
        self.answers = list(answers)
        self.calls: list[dict[str, Any]] = []

    def __call__(self, **kwargs: Any) -> ChatResult:
        self.calls.append(kwargs)
        answer = self.answers.pop(0) if self.answers else "ok"
        if isinstance(answer, ChatResult):
            return answer
        return ChatResult(text=answer, raw=None)

    def sent_contents(self, index: int) -> list[str]:
        return [message["content"] for message in self.calls[index]["messages"]]


class FakeModeration:
    def __init__(self, categories: tuple[str, ...] = ()) -> None:
        self.categories = categories
        self.calls: list[dict[str, Any]] = []

    def __call__(self, **kwargs: Any) -> ModerationResult:
        self.calls.append(kwargs)
        return ModerationResult(
            flagged=bool(self.categories),
            categories=self.categories,
            raw=None,
        )


class FakeImageGenerator:
    def __init__(self, url: str = "https://images.example.com/story.png") -> None:
        self.url = url
        self.calls: list[tuple[str, str, str]] = []

    def generate_image(self, prompt: str, size: str = "1024x1024", model: str = "dall-e-3") -> str:
        self.calls.append((prompt, size, model))
        return self.url


@pytest.fixture(autouse=True)
def _no_provider_keys(monkeypatch):
    for name in (
        "OPENAI_API_KEY",
        "LITELLM_API_KEY",
        "STORYGPT_STORY_MODEL",
        "STORYGPT_VERIFY_MODEL",
        "STORYGPT_MODERATION_MODEL",
        "REPLICATE_API_TOKEN",
        "REPLICATE_MODEL",
    ):
        monkeypatch.delenv(name, raising=False)


@pytest.fixture
def fake_completion():
    return FakeCompletion()


@pytest.fixture
def fake_images():
    return FakeImageGenerator()
