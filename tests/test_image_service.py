"""Tests for the DALL-E and Replicate image backends."""

from __future__ import annotations

import logging
from types import SimpleNamespace
from unittest.mock import MagicMock

import pytest

from storygpt.ai_generation import ImageGenerator, ReplicateImageGenerator, normalize_image_outputs
from storygpt.common.errors import InsufficientImagesError, NullImageURLError


class FakeImageFn:
    def __init__(self, slots):
        self.slots = slots
        self.calls = []

    def __call__(self, **kwargs):
        self.calls.append(kwargs)
        return list(self.slots)


def test_generate_image_defaults():
    image_fn = FakeImageFn(["https://img/1"])

    url = ImageGenerator(image_fn=image_fn).generate_image("a sunset")

    assert url == "https://img/1"
    assert image_fn.calls[0]["n"] == 1
    assert image_fn.calls[0]["size"] == "512x512"
    assert image_fn.calls[0]["model"] == "dall-e-3"


def test_generate_images_returns_all_urls():
    image_fn = FakeImageFn(["https://img/1", "https://img/2", "https://img/3"])

    urls = ImageGenerator(image_fn=image_fn).generate_images("cats", 3, "256x256", "dall-e-2")

    assert urls == ["https://img/1", "https://img/2", "https://img/3"]


def test_fewer_images_than_requested_fails_even_if_valid():
    image_fn = FakeImageFn(["https://img/1", "https://img/2"])

    with pytest.raises(InsufficientImagesError):
        ImageGenerator(image_fn=image_fn).generate_images("cats", 3, model="dall-e-2")


def test_missing_url_slot_fails():
    image_fn = FakeImageFn(["https://img/1", None, "https://img/3"])

    with pytest.raises(NullImageURLError):
        ImageGenerator(image_fn=image_fn).generate_images("cats", 3, model="dall-e-2")


@pytest.mark.parametrize(
    "count, size, model",
    [
        (0, "512x512", "dall-e-2"),
        (6, "512x512", "dall-e-2"),
        (1, "640x480", "dall-e-3"),
        (2, "1024x1024", "dall-e-3"),
        (1, "1024x1024", "midjourney"),
    ],
)
def test_invalid_requests_are_rejected_before_calling(count, size, model):
    image_fn = FakeImageFn(["https://img/1"])

    with pytest.raises(ValueError):
        ImageGenerator(image_fn=image_fn).generate_images("cats", count, size, model)
    assert image_fn.calls == []


def test_replicate_builds_flux_payload():
    client = MagicMock()
    client.run.return_value = ["https://replicate/1.png", "https://replicate/2.png"]
    generator = ReplicateImageGenerator(client=client)

    urls = generator.generate_images("a brave mouse", 2, "1792x1024")

    assert urls == ["https://replicate/1.png", "https://replicate/2.png"]
    client.run.assert_called_once_with(
        "black-forest-labs/flux-schnell",
        input={
            "prompt": "a brave mouse",
            "num_outputs": 2,
            "aspect_ratio": "16:9",
            "output_format": "png",
        },
    )


def test_replicate_sdxl_uses_dimensions(monkeypatch):
    monkeypatch.setenv("REPLICATE_MODEL", "stability-ai/sdxl:abc123")
    client = MagicMock()
    client.run.return_value = [SimpleNamespace(url="https://replicate/1.png")]

    url = ReplicateImageGenerator(client=client).generate_image("castle", "1024x1792")

    assert url == "https://replicate/1.png"
    _, kwargs = client.run.call_args
    assert kwargs["input"]["width"] == 1024
    assert kwargs["input"]["height"] == 1792


def test_replicate_short_batch_fails():
    client = MagicMock()
    client.run.return_value = ["https://replicate/1.png"]

    with pytest.raises(InsufficientImagesError):
        ReplicateImageGenerator(client=client).generate_images("castle", 2)


def test_replicate_requires_token_without_client():
    with pytest.raises(ValueError):
        ReplicateImageGenerator()


def test_replicate_unknown_model():
    generator = ReplicateImageGenerator(client=MagicMock(), model_identifier="someone/unknown")

    with pytest.raises(ValueError):
        generator.generate_image("castle")


def test_normalize_image_outputs():
    assert normalize_image_outputs(None) == []
    assert normalize_image_outputs("https://a") == ["https://a"]
    assert normalize_image_outputs(SimpleNamespace(url="https://b")) == ["https://b"]
    assert normalize_image_outputs(["https://a", None, b"https://c"]) == ["https://a", None, "https://c"]


def test_null_url_after_requested_slots_still_fails():
    image_fn = FakeImageFn(["https://img/1", None])

    with pytest.raises(NullImageURLError):
        ImageGenerator(image_fn=image_fn).generate_image("cats")


def test_extra_urls_are_trimmed_to_request():
    image_fn = FakeImageFn(["https://img/1", "https://img/2"])

    assert ImageGenerator(image_fn=image_fn).generate_images("cats", 1) == ["https://img/1"]


def test_replicate_logs_ignored_model(caplog):
    client = MagicMock()
    client.run.return_value = ["https://replicate/1.png"]
    generator = ReplicateImageGenerator(client=client)

    with caplog.at_level(logging.DEBUG, logger="storygpt.ai_generation.replicate_service"):
        url = generator.generate_image("castle", "1024x1024", "dall-e-2")

    assert url == "https://replicate/1.png"
    assert "Ignoring image model 'dall-e-2'" in caplog.text
    assert "model" not in client.run.call_args.kwargs["input"]
