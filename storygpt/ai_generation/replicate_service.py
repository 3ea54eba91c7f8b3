"""
Integration with Replicate as an alternative story illustration backend.
"""

from __future__ import annotations

import logging
import os
from collections.abc import Iterable as IterableABC
from typing import Any, Callable

import replicate

from .image_service import ImageSize, collect_image_urls, validate_image_request

DEFAULT_REPLICATE_MODEL = "black-forest-labs/flux-schnell"

_ASPECT_RATIOS: dict[str, str] = {
    "256x256": "1:1",
    "512x512": "1:1",
    "1024x1024": "1:1",
    "1792x1024": "16:9",
    "1024x1792": "9:16",
}


def _build_flux_input(*, prompt: str, number_of_images: int, size: str) -> dict[str, Any]:
    return {
        "prompt": prompt,
        "num_outputs": number_of_images,
        "aspect_ratio": _ASPECT_RATIOS[size],
        "output_format": "png",
    }


def _build_sdxl_input(*, prompt: str, number_of_images: int, size: str) -> dict[str, Any]:
    width, height = (int(part) for part in size.split("x"))
    return {
        "prompt": prompt,
        "num_outputs": number_of_images,
        "width": width,
        "height": height,
    }


_MODEL_INPUT_BUILDERS: dict[str, Callable[..., dict[str, Any]]] = {
    "black-forest-labs/flux-schnell": _build_flux_input,
    "black-forest-labs/flux-dev": _build_flux_input,
    "stability-ai/sdxl": _build_sdxl_input,
}


def _build_replicate_input_payload(
    *,
    model_identifier: str,
    prompt: str,
    number_of_images: int,
    size: str,
) -> dict[str, Any]:
    normalized_identifier = model_identifier.strip().lower()
    builder = _MODEL_INPUT_BUILDERS.get(normalized_identifier)
    if builder is None and ":" in normalized_identifier:
        base_identifier = normalized_identifier.split(":", maxsplit=1)[0]
        builder = _MODEL_INPUT_BUILDERS.get(base_identifier)
    if builder is None:
        supported_models = ", ".join(sorted(_MODEL_INPUT_BUILDERS))
        raise ValueError(
            "Model identifier "
            f"'{model_identifier}' is not configured with a default input payload. "
            f"Supported models: {supported_models}."
        )

    return builder(prompt=prompt, number_of_images=number_of_images, size=size)


class ReplicateImageGenerator:
    """
    Replicate-backed drop-in for :class:`ImageGenerator`.

    Parameters
    ----------
    api_token:
        Replicate API token. Falls back to ``REPLICATE_API_TOKEN`` environment variable.
    model_identifier:
        Model string in the ``owner/model`` or ``owner/model:version`` format. Falls back
        to ``REPLICATE_MODEL`` and then to ``black-forest-labs/flux-schnell``.
    client:
        Optional pre-configured :class:`replicate.Client`. Mainly useful for testing.
    logger:
        Logger used for tracing. Defaults to this module's logger.
    """

    def __init__(
        self,
        *,
        api_token: str | None = None,
        model_identifier: str | None = None,
        client: replicate.Client | None = None,
        logger: logging.Logger | None = None,
    ) -> None:
        self._api_token = api_token or os.getenv("REPLICATE_API_TOKEN")
        if not self._api_token and not client:
            raise ValueError(
                "Replicate API token is required. Set REPLICATE_API_TOKEN or pass api_token."
            )

        self._model_identifier = (
            model_identifier or os.getenv("REPLICATE_MODEL") or DEFAULT_REPLICATE_MODEL
        )
        self._client = client or replicate.Client(api_token=self._api_token)
        self._logger = logger or logging.getLogger(__name__)

    @property
    def model_identifier(self) -> str:
        """Return the model identifier currently used."""
        return self._model_identifier

    def generate_image(
        self,
        prompt: str,
        size: ImageSize = "1024x1024",
        model: str | None = None,
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
        size: ImageSize = "1024x1024",
        model: str | None = None,
        **model_kwargs: Any,
    ) -> list[str]:
        """
        Generate ``number_of_images`` images and return their URLs.

        ``model`` names a DALL-E model when this class stands in for
        :class:`ImageGenerator`; Replicate always runs the configured
        ``model_identifier``, so the value is only logged.
        """
        if model is not None:
            self._logger.debug(
                "Ignoring image model %r; Replicate runs %s.", model, self._model_identifier
            )
        validate_image_request(number_of_images, size, "replicate")

        replicate_input = _build_replicate_input_payload(
            model_identifier=self._model_identifier,
            prompt=prompt,
            number_of_images=number_of_images,
            size=size,
        )
        # Allow the caller to tweak model-specific knobs (e.g., seed, guidance).
        replicate_input.update(model_kwargs)

        outputs = self._client.run(self._model_identifier, input=replicate_input)
        slots = normalize_image_outputs(outputs)
        self._logger.info("Got %d image(s) from %s.", len(slots), self._model_identifier)

        return collect_image_urls(slots, number_of_images)


def normalize_image_outputs(raw: Any) -> list[str | None]:
    """
    Normalize the image outputs returned by Replicate into a list of URL slots.
    """

    if raw is None:
        return []

    url = getattr(raw, "url", None)
    if url is not None:
        return [str(url) or None]

    if isinstance(raw, str):
        return [raw or None]

    if isinstance(raw, bytes):
        return [raw.decode("utf-8", errors="ignore") or None]

    if isinstance(raw, IterableABC):
        normalized: list[str | None] = []
        for item in raw:
            if item is None:
                normalized.append(None)
            else:
                normalized.extend(normalize_image_outputs(item))
        return normalized

    return [str(raw)]
