"""
Orchestrates the full StoryGPT flow from a prompt to a titled, illustrated story.
"""

from __future__ import annotations

import json
import logging
from dataclasses import asdict, dataclass
from pathlib import Path
from typing import Any, Callable, Mapping

import yaml

from storygpt.ai_generation import ImageModel, ImageSize
from storygpt.common import CompletionCallable
from storygpt.story_generation import Story
from storygpt.story_generation.story import SupportsImageGeneration

ProgressCallback = Callable[[str, dict[str, Any]], None]


@dataclass(frozen=True)
class StoryPayload:
    """
    Aggregated output of :func:`create_story`.

    ``image`` is a provider-hosted URL that expires; download it before storing
    the payload for later.
    """

    prompt: str
    title: str
    content: str
    temperature: float
    image: str

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)

    def to_yaml(self) -> str:
        return yaml.safe_dump(self.to_dict(), sort_keys=False, allow_unicode=True)

    def to_json(self) -> str:
        return json.dumps(self.to_dict(), ensure_ascii=False, indent=2)

    @classmethod
    def from_dict(cls, payload: Mapping[str, Any]) -> "StoryPayload":
        missing = [name for name in ("prompt", "title", "content", "temperature", "image") if name not in payload]
        if missing:
            raise ValueError(f"Story payload is missing fields: {', '.join(missing)}.")

        try:
            temperature = float(payload["temperature"])
        except (TypeError, ValueError) as exc:
            raise ValueError(f"Invalid temperature: {payload['temperature']!r}") from exc

        return cls(
            prompt=str(payload["prompt"]),
            title=str(payload["title"]).strip(),
            content=str(payload["content"]),
            temperature=temperature,
            image=str(payload["image"]).strip(),
        )

    @classmethod
    def from_yaml(cls, source: str | Path) -> "StoryPayload":
        path = Path(source)
        data = yaml.safe_load(path.read_text(encoding="utf-8"))
        if not isinstance(data, Mapping):
            raise ValueError("Story payload YAML must deserialize to a mapping.")
        return cls.from_dict(data)


class StoryGPTOrchestrator:
    """
    High-level coordinator that chains story, title and illustration generation.
    """

    def __init__(
        self,
        *,
        story_model: str | None = None,
        api_key: str | None = None,
        completion_fn: CompletionCallable | None = None,
        image_generator: SupportsImageGeneration | None = None,
        logger: logging.Logger | None = None,
    ) -> None:
        self._story_model = story_model
        self._api_key = api_key
        self._completion_fn = completion_fn
        self._image_generator = image_generator
        self._logger = logger

    def create_story(
        self,
        prompt: str,
        *,
        temperature: float | None = None,
        image_size: ImageSize = "1024x1024",
        image_model: ImageModel = "dall-e-3",
        progress_callback: ProgressCallback | None = None,
    ) -> StoryPayload:
        """
        Write a story for ``prompt``, then name and illustrate it.
        """
        self._notify(progress_callback, "story:generating", prompt=prompt)
        story = Story.generate_story(
            prompt,
            temperature=temperature,
            chat_model=self._story_model,
            api_key=self._api_key,
            completion_fn=self._completion_fn,
            image_generator=self._image_generator,
            logger=self._logger,
        )
        self._notify(
            progress_callback,
            "story:generated",
            word_count=len(story.content.split()),
            temperature=story.temperature,
        )

        title = story.generate_title()
        self._notify(progress_callback, "title:generated", title=title)

        image = story.generate_image(image_size, image_model)
        self._notify(progress_callback, "image:generated", image=image)

        return StoryPayload(
            prompt=prompt,
            title=title,
            content=story.content,
            temperature=story.temperature,
            image=image,
        )

    @staticmethod
    def _notify(
        callback: ProgressCallback | None,
        stage: str,
        **payload: Any,
    ) -> None:
        if callback is not None:
            callback(stage, payload)


def create_story(
    prompt: str,
    *,
    temperature: float | None = None,
    story_model: str | None = None,
    image_size: ImageSize = "1024x1024",
    image_model: ImageModel = "dall-e-3",
    api_key: str | None = None,
    completion_fn: CompletionCallable | None = None,
    image_generator: SupportsImageGeneration | None = None,
    progress_callback: ProgressCallback | None = None,
) -> StoryPayload:
    """
    Generate a complete story payload from a single prompt.

    Makes three chat completion calls (story, title, image prompt) and one
    image generation call.
    """
    orchestrator = StoryGPTOrchestrator(
        story_model=story_model,
        api_key=api_key,
        completion_fn=completion_fn,
        image_generator=image_generator,
    )
    return orchestrator.create_story(
        prompt,
        temperature=temperature,
        image_size=image_size,
        image_model=image_model,
        progress_callback=progress_callback,
    )
