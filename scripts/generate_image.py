"""
Utility script to exercise the image backends with a sample prompt.

Usage:
    python scripts/generate_image.py \
        --prompt "A simple illustration of a sunset over mountains" \
        --count 2 --model dall-e-2

Environment variables:
    OPENAI_API_KEY       - required for the DALL-E backend
    REPLICATE_API_TOKEN  - required for --backend replicate
    REPLICATE_MODEL      - optional Replicate model override
"""

from __future__ import annotations

import argparse
import sys
from pathlib import Path

PROJECT_ROOT = Path(__file__).resolve().parents[1]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

from storygpt.ai_generation import (
    IMAGE_MODELS,
    IMAGE_SIZES,
    ImageGenerator,
    ReplicateImageGenerator,
)


def parse_args(argv: list[str]) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Generate images for a text prompt.")
    parser.add_argument("--prompt", required=True, help="Description of the image to draw.")
    parser.add_argument(
        "--count",
        type=int,
        default=1,
        help="Number of images to generate (1-5). dall-e-3 only supports 1.",
    )
    parser.add_argument("--size", default="1024x1024", choices=IMAGE_SIZES)
    parser.add_argument("--model", default="dall-e-3", choices=IMAGE_MODELS)
    parser.add_argument("--backend", default="dall-e", choices=("dall-e", "replicate"))
    return parser.parse_args(argv)


def main(argv: list[str]) -> int:
    args = parse_args(argv)

    if args.backend == "replicate":
        generator = ReplicateImageGenerator()
        print(f"Replicate model: {generator.model_identifier}")
    else:
        generator = ImageGenerator()

    urls = generator.generate_images(args.prompt, args.count, args.size, args.model)

    print("Generated images (links expire):")
    for url in urls:
        print(f"  {url}")

    return 0


if __name__ == "__main__":
    raise SystemExit(main(sys.argv[1:]))
