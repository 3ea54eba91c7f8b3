"""
Story generation with in-context follow-up questions for title and illustration.
"""

from __future__ import annotations

import logging
import os
import random
from typing import Any, Protocol

from storygpt.ai_generation import ImageGenerator, ImageModel, ImageSize
from storygpt.chat import ChatSession, Message
from storygpt.common import (
    CompletionCallable,
    EmptyContentError,
    EmptyImagePromptError,
    EmptyTitleError,
)

from .prompting import IMAGE_PROMPT_QUESTION, SYSTEM_INFO, TITLE_QUESTION

DEFAULT_STORY_MODEL = "gpt-4o"


class SupportsImageGeneration(Protocol):
    def generate_image(self, prompt: str, size: ImageSize = ..., model: Any = ...) -> str: ...


def random_temperature() -> float:
    """Draw a temperature uniformly from ``[0, 1]``, rounded to two decimals."""
    return round(random.random(), 2)


def strip_trailing_period(title: str) -> str:
    """Drop one trailing ``.``; any other punctuation is left alone."""
    if title.endswith("."):
        return title[:-1]
    return title


def _resolve_story_model(chat_model: str | None) -> str:
    return chat_model or os.getenv("STORYGPT_STORY_MODEL") or DEFAULT_STORY_MODEL


class Story:
    """
    A generated story that can be asked for its title and an illustration.

    Follow-up questions replay the system, user and assistant messages that
    produced ``content`` so the model answers with the story in context.
    """

    def __init__(
        self,
        *,
        prompt: str,
        content: str,
        temperature: float,
        chat_model: str | None = None,
        api_key: str | None = None,
        completion_fn: CompletionCallable | None = None,
        image_generator: SupportsImageGeneration | None = None,
        logger: logging.Logger | None = None,
    ) -> None:
        self.prompt = prompt
        self.content = content
        self.temperature = temperature
        self._api_key = api_key
        self._image_generator = image_generator
        self._logger = logger or logging.getLogger(__name__)
        self._session = ChatSession(
            model=_resolve_story_model(chat_model),
            temperature=temperature,
            transcript=(
                Message.system(SYSTEM_INFO),
                Message.user(prompt),
                Message.assistant(content),
            ),
            api_key=api_key,
            completion_fn=completion_fn,
        )

    @property
    def model(self) -> str:
        return self._session.model

    @property
    def transcript(self) -> tuple[Message, ...]:
        """The exchange that produced the story."""
        return self._session.transcript

    @classmethod
    def generate_story(
        cls,
        prompt: str,
        *,
        temperature: float | None = None,
        chat_model: str | None = None,
        api_key: str | None = None,
        completion_fn: CompletionCallable | None = None,
        image_generator: SupportsImageGeneration | None = None,
        logger: logging.Logger | None = None,
    ) -> "Story":
        """
        Write a story for ``prompt``.

        ``temperature`` defaults to a random draw from ``[0, 1]``.

        Raises
        ------
        EmptyContentError
            The model answered without any text.
        """
        log = logger or logging.getLogger(__name__)
        session = ChatSession(
            model=_resolve_story_model(chat_model),
            temperature=random_temperature() if temperature is None else temperature,
            api_key=api_key,
            completion_fn=completion_fn,
        )

        log.info("Generating story for prompt %r.", prompt)
        conversation = session.chat(Message.system(SYSTEM_INFO), Message.user(prompt))
        content = conversation.answer.content
        if not content:
            raise EmptyContentError("Story content is empty.")

        log.info("Got the story! It is %d words long.", len(content.split()))
        return cls(
            prompt=prompt,
            content=content,
            temperature=session.temperature,
            chat_model=session.model,
            api_key=api_key,
            completion_fn=completion_fn,
            image_generator=image_generator,
            logger=logger,
        )

    def generate_title(self) -> str:
        """
        Ask the model what it would call the story.

        Raises
        ------
        EmptyTitleError
            The model answered without any text.
        """
        conversation = self._session.chat(Message.user(TITLE_QUESTION))
        title = conversation.answer.content
        if not title:
            raise EmptyTitleError("Did not get a title for the story.")

        title = strip_trailing_period(title)
        self._logger.info("Got the story title: %s", title)
        return title

    def image_prompt(self) -> str:
        """
        Ask the model for an illustration prompt describing the story.

        Raises
        ------
        EmptyImagePromptError
            The model answered without any text.
        """
        self._logger.info("Generating image prompt.")
        conversation = self._session.chat(Message.user(IMAGE_PROMPT_QUESTION))
        image_prompt = conversation.answer.content
        if not image_prompt:
            raise EmptyImagePromptError("Image prompt is empty.")
        return image_prompt

    def generate_image(
        self,
        size: ImageSize = "1024x1024",
        model: ImageModel = "dall-e-3",
    ) -> str:
        """
        Illustrate the story and return the image URL.

        The URL is hosted by the provider and expires; download it right away.
        """
        image_prompt = self.image_prompt()
        self._logger.info(
            "Generating image for the story with the following prompt: %s", image_prompt
        )

        generator = self._image_generator or ImageGenerator(
            api_key=self._api_key, logger=self._logger
        )
        url = generator.generate_image(image_prompt, size, model)
        self._logger.info("Got image!")
        return url
