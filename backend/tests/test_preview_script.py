"""Tests for scripts/preview_moodboard.py."""
import importlib.util
import json
from pathlib import Path
from types import ModuleType

import pytest

SCRIPT_PATH = Path(__file__).resolve().parents[2] / "scripts" / "preview_moodboard.py"


@pytest.fixture(scope="module")
def script() -> ModuleType:
    spec = importlib.util.spec_from_file_location("preview_moodboard", SCRIPT_PATH)
    module = importlib.util.module_from_spec(spec)
    spec.loader.exec_module(module)
    return module


def test_json_output(script: ModuleType, capsys: pytest.CaptureFixture) -> None:
    exit_code = script.main(["--seed", "12345", "--palette", "navy blue and silver", "--json"])

    assert exit_code == 0
    payload = json.loads(capsys.readouterr().out)
    assert payload["scene"]["seed"] == 12345
    assert payload["scene"]["color_palette"] == "navy blue and silver"
    assert len(payload["prompts"]) == 3
    assert all("navy blue and silver tones" in p["prompt"] for p in payload["prompts"])


def test_text_output(script: ModuleType, capsys: pytest.CaptureFixture) -> None:
    assert script.main(["--seed", "7", "--themes", "rustic", "garden"]) == 0

    out = capsys.readouterr().out
    assert "Seed: 7" in out
    assert "Palette: Sage & Cream" in out
    assert "[3]" in out


def test_onboarding_file_with_overrides(script: ModuleType, tmp_path: Path) -> None:
    path = tmp_path / "onboarding.json"
    path.write_text(json.dumps({"step_2": {"wedding_location": "Bali"}, "step_4": {"guest_count": 10}}))

    args = script.build_parser().parse_args(["--onboarding", str(path), "--guests", "150"])
    data = script.load_onboarding(args)

    assert data.wedding_location == "Bali"
    assert data.guest_count == 150
