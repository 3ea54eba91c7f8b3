"""
Immutable conversation sessions on top of the chat completion helper.
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass, field, replace
from typing import Any, Literal

from storygpt.common import ChatResult, CompletionCallable, call_chat_completion

Role = Literal["system", "user", "assistant"]

DEFAULT_CHAT_MODEL = "gpt-5-mini"

# These models reject any temperature other than their default of 1.
FIXED_TEMPERATURE_MODELS = frozenset({"gpt-5", "gpt-5-mini", "gpt-5-nano"})

_ROLES = ("system", "user", "assistant")

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Message:
    """
    A single role-tagged entry of a transcript.
    """

    role: Role
    content: str

    def __post_init__(self) -> None:
        if self.role not in _ROLES:
            raise ValueError(f"Unsupported message role {self.role!r}.")

    def as_dict(self) -> dict[str, Any]:
        return {"role": self.role, "content": self.content}

    @classmethod
    def system(cls, content: str) -> "Message":
        return cls(role="system", content=content)

    @classmethod
    def user(cls, content: str) -> "Message":
        return cls(role="user", content=content)

    @classmethod
    def assistant(cls, content: str) -> "Message":
        return cls(role="assistant", content=content)


def accepts_temperature(model: str) -> bool:
    """
    Return ``False`` for models that only run at their built-in temperature.

    Provider prefixes (``openai/gpt-5-mini``) and dated snapshots
    (``gpt-5-mini-2025-08-07``) resolve to their base model.
    """
    name = model.strip().lower().rsplit("/", 1)[-1]
    return not any(
        name == fixed or name.startswith(fixed + "-20") for fixed in FIXED_TEMPERATURE_MODELS
    )


@dataclass(frozen=True)
class Conversation:
    """
    Outcome of one turn: the assistant's answer and the session that follows it.
    """

    answer: Message
    session: "ChatSession"

    @property
    def transcript(self) -> tuple[Message, ...]:
        return self.session.transcript

    def chat(self, *messages: Message) -> "Conversation":
        """
        Continue the conversation, replaying everything exchanged so far.

        Calling this twice on the same conversation produces two independent
        branches; neither sees the other's messages.
        """
        return self.session.chat(*messages)


@dataclass(frozen=True)
class ChatSession:
    """
    A model configuration plus the transcript accumulated so far.

    Sessions never change. Every call to :meth:`chat` returns a
    :class:`Conversation` holding a new session whose transcript is the old one
    followed by the sent messages and the answer.

    Parameters
    ----------
    model:
        Chat model identifier understood by LiteLLM.
    temperature:
        Sampling temperature in ``[0, 2]``. Kept on the session even for models
        listed in ``FIXED_TEMPERATURE_MODELS``, which never receive it.
    transcript:
        Messages already exchanged.
    completion_fn:
        Optional replacement for :func:`call_chat_completion`. Mainly useful for testing.
    """

    model: str = DEFAULT_CHAT_MODEL
    temperature: float = 1.0
    transcript: tuple[Message, ...] = ()
    api_key: str | None = field(default=None, repr=False)
    completion_fn: CompletionCallable | None = field(default=None, repr=False, compare=False)

    def __post_init__(self) -> None:
        if not 0 <= self.temperature <= 2:
            raise ValueError(f"Temperature must be between 0 and 2, got {self.temperature}.")
        object.__setattr__(self, "transcript", tuple(self.transcript))

    @property
    def sends_temperature(self) -> bool:
        return accepts_temperature(self.model)

    def chat(self, *messages: Message) -> Conversation:
        """
        Send the transcript followed by ``messages`` and return the answer.

        Raises
        ------
        EmptyResultError
            The provider returned no choices.
        NullMessageError
            The first choice carried no message.
        """
        outbound = self.transcript + tuple(messages)
        if not outbound:
            raise ValueError("A conversation turn needs at least one message.")

        request_kwargs: dict[str, Any] = {
            "model": self.model,
            "messages": [message.as_dict() for message in outbound],
        }
        if self.sends_temperature:
            request_kwargs["temperature"] = self.temperature
        api_key = self.api_key or os.getenv("OPENAI_API_KEY") or os.getenv("LITELLM_API_KEY")
        if api_key is not None:
            request_kwargs["api_key"] = api_key

        logger.debug("Sending %d messages to %s.", len(outbound), self.model)
        completion_fn = self.completion_fn or call_chat_completion
        result: ChatResult = completion_fn(**request_kwargs)

        answer = Message.assistant(result.text)
        return Conversation(
            answer=answer,
            session=replace(self, transcript=outbound + (answer,)),
        )
