"""
CLI example to run the complete StoryGPT flow end-to-end.

Usage:
    python scripts/create_story.py \
        --prompt "A short tale about a brave mouse" \
        --output story.yaml

Environment variables:
    OPENAI_API_KEY       - provider key used for chat, moderation and DALL-E
    REPLICATE_API_TOKEN  - required with --image-backend replicate
"""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path
from typing import Any, Dict

from tqdm.auto import tqdm

# Ensure project root is on the Python path when running as a script.
PROJECT_ROOT = Path(__file__).resolve().parents[1]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

from storygpt import (
    ImageGenerator,
    ReplicateImageGenerator,
    StoryGPTOrchestrator,
    verify_prompt,
)
from storygpt.ai_generation import IMAGE_SIZES


class ProgressTracker:
    """
    Provides command-line progress updates for the StoryGPT pipeline.
    """

    def __init__(self) -> None:
        self._bar: tqdm | None = tqdm(total=3, desc="Story", unit="step")

    def __call__(self, stage: str, payload: Dict[str, Any]) -> None:
        match stage:
            case "story:generating":
                self._write("[1/3] Writing the story...")
            case "story:generated":
                word_count = payload.get("word_count")
                temperature = payload.get("temperature")
                self._write(f"[1/3] Story written (~{word_count} words, temperature {temperature}).")
                self._advance()
            case "title:generated":
                self._write(f"[2/3] Title: {payload.get('title')}")
                self._advance()
            case "image:generated":
                self._write("[3/3] Illustration ready (the link expires, download it soon).")
                self._advance()
                self.close()

    def _advance(self) -> None:
        if self._bar is not None:
            self._bar.update(1)

    def close(self) -> None:
        if self._bar is not None:
            self._bar.close()
            self._bar = None

    @staticmethod
    def _write(message: str) -> None:
        tqdm.write(message)


def parse_args() -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Generate a titled, illustrated story from a prompt.")
    parser.add_argument("--prompt", required=True, help="Free-text story request.")
    parser.add_argument(
        "--output",
        default="story.yaml",
        help="Output file for the story payload (.yaml or .json).",
    )
    parser.add_argument(
        "--temperature",
        type=float,
        default=None,
        help="Fix the story temperature instead of drawing one at random.",
    )
    parser.add_argument("--story-model", default=None, help="Override the chat model used for the story.")
    parser.add_argument(
        "--image-size",
        default="1024x1024",
        choices=IMAGE_SIZES,
        help="Size of the illustration.",
    )
    parser.add_argument(
        "--image-backend",
        default="dall-e",
        choices=("dall-e", "replicate"),
        help="Service used to draw the illustration.",
    )
    parser.add_argument(
        "--skip-verification",
        action="store_true",
        help="Do not check that the prompt is a story request first.",
    )
    parser.add_argument("--verbose", action="store_true", help="Show library log output.")
    return parser.parse_args()


def main() -> int:
    args = parse_args()
    logging.basicConfig(
        level=logging.INFO if args.verbose else logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    if not args.skip_verification:
        verdict = verify_prompt(args.prompt)
        if not verdict.valid:
            print(f"Prompt rejected: {verdict.reason}", file=sys.stderr)
            return 2

    if args.image_backend == "replicate":
        image_generator = ReplicateImageGenerator()
    else:
        image_generator = ImageGenerator()

    orchestrator = StoryGPTOrchestrator(
        story_model=args.story_model,
        image_generator=image_generator,
    )
    tracker = ProgressTracker()
    try:
        payload = orchestrator.create_story(
            args.prompt,
            temperature=args.temperature,
            image_size=args.image_size,
            progress_callback=tracker,
        )
    finally:
        tracker.close()

    output_path = Path(args.output)
    if output_path.suffix.lower() == ".json":
        output_path.write_text(payload.to_json(), encoding="utf-8")
    else:
        output_path.write_text(payload.to_yaml(), encoding="utf-8")
    print(f"Saved story payload to {output_path}")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
