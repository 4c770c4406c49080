"""Print the scene and prompts for a moodboard without generating images.

Usage:
    python scripts/preview_moodboard.py --seed 12345
    python scripts/preview_moodboard.py --seed 7 --palette "Sage & Cream" --themes rustic garden
    python scripts/preview_moodboard.py --onboarding onboarding.json --json
"""

import argparse
import json
import sys
from pathlib import Path
from typing import Optional

from moodboard.models.onboarding import OnboardingData
from moodboard.services.prompts import generate_batch_prompts_with_onboarding
from moodboard.services.randomizer import build_scene


def load_onboarding(args: argparse.Namespace) -> OnboardingData:
    """Build onboarding data from a JSON file and/or command-line overrides."""
    data: dict = {}
    if args.onboarding:
        data = json.loads(Path(args.onboarding).read_text(encoding="utf-8"))

    if args.location:
        data.setdefault("step_2", {})["wedding_location"] = args.location
    if args.guests is not None:
        data.setdefault("step_4", {})["guest_count"] = args.guests
    if args.themes:
        data.setdefault("step_5", {})["themes"] = args.themes
    if args.palette:
        data.setdefault("step_5", {})["color_palette"] = args.palette

    return OnboardingData.coerce(data)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Preview a wedding moodboard scene and its prompts.")
    parser.add_argument("--seed", type=int, default=None, help="Explicit seed (omit for an auto-seed).")
    parser.add_argument("--onboarding", help="Path to an onboarding JSON file.")
    parser.add_argument("--location", help="Wedding location.")
    parser.add_argument("--guests", type=int, default=None, help="Guest count.")
    parser.add_argument("--themes", nargs="*", help="Wedding themes.")
    parser.add_argument("--palette", help="Colour palette name.")
    parser.add_argument("--json", action="store_true", help="Print the result as JSON.")
    return parser


def main(argv: Optional[list[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    onboarding = load_onboarding(args)
    scene = build_scene(onboarding, args.seed)
    prompts = generate_batch_prompts_with_onboarding(scene.photos, onboarding)

    if args.json:
        payload = {
            "scene": scene.model_dump(mode="json"),
            "prompts": [p.model_dump(mode="json") for p in prompts],
        }
        print(json.dumps(payload, indent=2, ensure_ascii=False))
        return 0

    print(f"Seed: {scene.seed}")
    print(f"Palette: {scene.color_palette}")
    for index, (photo, prompt) in enumerate(zip(scene.photos, prompts), start=1):
        print(f"\n[{index}] {photo.category.value} / {photo.sub_type}")
        print(f"    {photo.environment}, {photo.time}")
        for kind, value in photo.elements.values().items():
            print(f"    {kind}: {value}")
        print(f"    {prompt.prompt}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
