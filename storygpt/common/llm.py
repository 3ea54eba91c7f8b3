"""
LiteLLM-powered helpers for chat completion, moderation and image generation.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Callable, Mapping, MutableMapping, Sequence

from litellm import completion, image_generation, moderation

from .errors import EmptyResultError, NullMessageError

ChatMessage = Mapping[str, Any]


@dataclass
class ChatResult:
    """
    Structured response returned from an LLM chat completion.
    """

    text: str
    raw: Any
    tool_calls: Sequence[Any] = field(default_factory=tuple)


@dataclass
class ModerationResult:
    """
    Verdict of the moderation endpoint for a single input.

    ``categories`` lists the flagged category names in the order the provider
    returned them.
    """

    flagged: bool
    categories: tuple[str, ...]
    raw: Any


CompletionCallable = Callable[..., ChatResult]
ModerationCallable = Callable[..., ModerationResult]
ImageCallable = Callable[..., list[str | None]]


def response_field(source: Any, name: str) -> Any:
    """
    Read ``name`` from a provider payload that may be a mapping or an object.
    """
    if source is None:
        return None
    if isinstance(source, Mapping):
        return source.get(name)
    return getattr(source, name, None)


def call_chat_completion(
    *,
    model: str,
    messages: Sequence[ChatMessage],
    temperature: float | None = None,
    max_tokens: int | None = None,
    api_key: str | None = None,
    **extra_kwargs: Any,
) -> ChatResult:
    """
    Invoke LiteLLM's `completion` API and return the first candidate.

    Raises
    ------
    EmptyResultError
        The provider answered without any choices.
    NullMessageError
        The first choice has no message.
    """
    payload: MutableMapping[str, Any] = {
        "model": model,
        "messages": list(messages),
    }

    if temperature is not None:
        payload["temperature"] = temperature

    if max_tokens is not None:
        payload["max_tokens"] = max_tokens

    if api_key is not None:
        payload["api_key"] = api_key

    payload.update(extra_kwargs)

    response = completion(**payload)

    choices = response_field(response, "choices") or []
    if len(choices) < 1:
        raise EmptyResultError("No results found on prompt request.")

    message = response_field(choices[0], "message")
    if message is None:
        raise NullMessageError("Chat response is null.")

    content = response_field(message, "content")
    text = str(content).strip() if content is not None else ""
    tool_calls = tuple(response_field(message, "tool_calls") or ())
    return ChatResult(text=text, raw=response, tool_calls=tool_calls)


def call_moderation(
    *,
    input: str,
    model: str,
    api_key: str | None = None,
    **extra_kwargs: Any,
) -> ModerationResult:
    """
    Invoke LiteLLM's `moderation` API and collect the flagged categories.
    """
    payload: MutableMapping[str, Any] = {"input": input, "model": model}
    if api_key is not None:
        payload["api_key"] = api_key
    payload.update(extra_kwargs)

    response = moderation(**payload)

    flagged_categories: list[str] = []
    flagged = False
    for result in response_field(response, "results") or []:
        flagged = flagged or bool(response_field(result, "flagged"))
        for name, is_flagged in _category_items(response_field(result, "categories")):
            if is_flagged and name not in flagged_categories:
                flagged_categories.append(name)

    return ModerationResult(
        flagged=flagged or bool(flagged_categories),
        categories=tuple(flagged_categories),
        raw=response,
    )


def call_image_generation(
    *,
    prompt: str,
    model: str,
    n: int,
    size: str,
    api_key: str | None = None,
    **extra_kwargs: Any,
) -> list[str | None]:
    """
    Invoke LiteLLM's `image_generation` API and return one URL slot per image.

    Slots whose image carries no URL are returned as ``None`` so callers can
    decide how to treat them.
    """
    payload: MutableMapping[str, Any] = {
        "prompt": prompt,
        "model": model,
        "n": n,
        "size": size,
    }
    if api_key is not None:
        payload["api_key"] = api_key
    payload.update(extra_kwargs)

    response = image_generation(**payload)

    urls: list[str | None] = []
    for item in response_field(response, "data") or []:
        url = response_field(item, "url")
        urls.append(str(url) if url else None)
    return urls


def _category_items(categories: Any) -> list[tuple[str, bool]]:
    if categories is None:
        return []
    if hasattr(categories, "model_dump"):
        categories = categories.model_dump(by_alias=True)
    elif not isinstance(categories, Mapping):
        categories = vars(categories)
    return [(str(name), bool(value)) for name, value in categories.items()]
