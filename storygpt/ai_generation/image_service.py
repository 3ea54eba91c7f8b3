"""
DALL-E image generation through LiteLLM.
"""

from __future__ import annotations

import logging
import os
from typing import Any, Literal, Sequence, get_args

from storygpt.common import (
    ImageCallable,
    InsufficientImagesError,
    NullImageURLError,
    call_image_generation,
)

ImageSize = Literal["256x256", "512x512", "1024x1024", "1792x1024", "1024x1792"]
ImageModel = Literal["dall-e-2", "dall-e-3"]

IMAGE_SIZES: tuple[str, ...] = get_args(ImageSize)
IMAGE_MODELS: tuple[str, ...] = get_args(ImageModel)
MAX_IMAGES_PER_REQUEST = 5


def validate_image_request(number_of_images: int, size: str, model: str) -> None:
    """
    Reject image requests the provider is known not to accept.
    """
    if not 1 <= number_of_images <= MAX_IMAGES_PER_REQUEST:
        raise ValueError(
            f"number_of_images must be between 1 and {MAX_IMAGES_PER_REQUEST}, got {number_of_images}."
        )
    if size not in IMAGE_SIZES:
        raise ValueError(f"Unsupported image size {size!r}. Choose one of: {', '.join(IMAGE_SIZES)}.")
    if model == "dall-e-3" and number_of_images > 1:
        raise ValueError("dall-e-3 only generates one image per request; use dall-e-2 for batches.")


def collect_image_urls(slots: Sequence[str | None], number_of_images: int) -> list[str]:
    """
    Enforce the batch contract: exactly ``number_of_images`` URLs, none missing.
    """
    if len(slots) < number_of_images:
        raise InsufficientImagesError(
            f"Insufficient amount of images generated: expected {number_of_images}, got {len(slots)}."
        )

    urls: list[str] = []
    for index, url in enumerate(slots):
        if not url:
            raise NullImageURLError(f"Image URL at position {index} is null.")
        urls.append(url)
    return urls[:number_of_images]


class ImageGenerator:
    """
    Generates images with OpenAI's DALL-E models.

    The returned URLs are hosted by the provider and expire, so download or
    persist them right away.

    Parameters
    ----------
    api_key:
        Provider API key. Falls back to ``OPENAI_API_KEY`` then ``LITELLM_API_KEY``.
    image_fn:
        Optional replacement for :func:`call_image_generation`. Mainly useful for testing.
    logger:
        Logger used for tracing. Defaults to this module's logger.
    """

    def __init__(
        self,
        *,
        api_key: str | None = None,
        image_fn: ImageCallable | None = None,
        logger: logging.Logger | None = None,
    ) -> None:
        self._api_key = api_key or os.getenv("OPENAI_API_KEY") or os.getenv("LITELLM_API_KEY")
        self._image_fn: ImageCallable = image_fn or call_image_generation
        self._logger = logger or logging.getLogger(__name__)

    def generate_image(
        self,
        prompt: str,
        size: ImageSize = "512x512",
        model: ImageModel = "dall-e-3",
        **model_kwargs: Any,
    ) -> str:
        """
        Generate a single image and return its URL.
        """
        return self.generate_images(prompt, 1, size, model, **model_kwargs)[0]

    def generate_images(
        self,
        prompt: str,
        number_of_images: int,
        size: ImageSize = "512x512",
        model: ImageModel = "dall-e-3",
        **model_kwargs: Any,
    ) -> list[str]:
        """
        Generate ``number_of_images`` images (1-5) and return their URLs.

        Raises
        ------
        InsufficientImagesError
            Fewer URLs came back than were requested.
        NullImageURLError
            One of the returned images has no URL.
        """
        if model not in IMAGE_MODELS:
            raise ValueError(f"Unsupported image model {model!r}. Choose one of: {', '.join(IMAGE_MODELS)}.")
        validate_image_request(number_of_images, size, model)

        slots = self._image_fn(
            prompt=prompt,
            model=model,
            n=number_of_images,
            size=size,
            api_key=self._api_key,
            **model_kwargs,
        )
        self._logger.info("Got %d image(s) from %s.", len(slots), model)

        return collect_image_urls(slots, number_of_images)
