"""
Image generation backends for StoryGPT illustrations.
"""

from .image_service import IMAGE_MODELS, IMAGE_SIZES, ImageGenerator, ImageModel, ImageSize
from .replicate_service import ReplicateImageGenerator, normalize_image_outputs

__all__ = [
    "IMAGE_MODELS",
    "IMAGE_SIZES",
    "ImageGenerator",
    "ImageModel",
    "ImageSize",
    "ReplicateImageGenerator",
    "normalize_image_outputs",
]
