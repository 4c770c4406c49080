"""Shared test fixtures and configuration."""
from collections.abc import Iterator

import pytest

from moodboard.core.config import get_settings
from moodboard.models.onboarding import OnboardingData


@pytest.fixture(autouse=True)
def set_required_env_vars(monkeypatch: pytest.MonkeyPatch) -> Iterator[None]:
    """Run every test offline: no GCP project and no Wikipedia lookups."""
    monkeypatch.setenv("GCP_PROJECT_ID", "")
    monkeypatch.setenv("VERTEX_AI_LOCATION", "global")
    monkeypatch.setenv("LOCATION_LOOKUP_ENABLED", "false")
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest.fixture
def onboarding() -> OnboardingData:
    return OnboardingData.model_validate(
        {
            "step_2": {"planning_stage": "just engaged", "wedding_location": "Paris, France"},
            "step_3": {"partner1_name": "Alice", "partner2_name": "Bob", "budget": 30000},
            "step_4": {"guest_count": 80},
            "step_5": {"themes": ["romantic", "classic"], "color_palette": "Blush & Gold"},
            "step_6": {"ceremony_type": "civil", "religion": "none"},
        }
    )
