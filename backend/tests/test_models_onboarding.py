"""Tests for the onboarding data model."""
from moodboard.models.onboarding import OnboardingData


class TestOnboardingData:
    def test_properties(self, onboarding: OnboardingData) -> None:
        assert onboarding.wedding_location == "Paris, France"
        assert onboarding.guest_count == 80
        assert onboarding.ceremony_type == "civil"
        assert onboarding.religion == "none"

    def test_empty(self) -> None:
        data = OnboardingData()
        assert data.wedding_location is None
        assert data.guest_count is None
        assert data.themes_list() == []
        assert data.explicit_color_palette() is None

    def test_unknown_keys_ignored(self) -> None:
        data = OnboardingData.model_validate({"step_9": {"x": 1}, "step_2": {"foo": "bar"}})
        assert data.step_2 is not None
        assert data.wedding_location is None


class TestLenientFields:
    def test_guest_count_from_string(self) -> None:
        assert OnboardingData.coerce({"step_4": {"guest_count": "85"}}).guest_count == 85

    def test_guest_count_garbage_becomes_none(self) -> None:
        assert OnboardingData.coerce({"step_4": {"guest_count": "lots"}}).guest_count is None
        assert OnboardingData.coerce({"step_4": {"guest_count": True}}).guest_count is None

    def test_budget_garbage_becomes_none(self) -> None:
        data = OnboardingData.coerce({"step_3": {"budget": "a lot"}})
        assert data.step_3.budget is None


class TestThemes:
    def test_comma_separated_string(self) -> None:
        data = OnboardingData.coerce({"step_5": {"themes": "rustic, garden ,"}})
        assert data.themes_list() == ["rustic", "garden"]

    def test_list(self) -> None:
        data = OnboardingData.coerce({"step_5": {"themes": ["modern", ""]}})
        assert data.themes_list() == ["modern"]


class TestExplicitColorPalette:
    def test_step_five_wins(self) -> None:
        data = OnboardingData.coerce(
            {"step_5": {"color_palette": "Navy & Rose"}, "step_4": {"colorPalette": "Dusty Blue"}}
        )
        assert data.explicit_color_palette() == "Navy & Rose"

    def test_step_four_aliases(self) -> None:
        assert OnboardingData.coerce({"step_4": {"colorPalette": "Dusty Blue"}}).explicit_color_palette() == "Dusty Blue"
        assert (
            OnboardingData.coerce({"step_4": {"selectedColorPalette": "Lavender & Silver"}}).explicit_color_palette()
            == "Lavender & Silver"
        )

    def test_blank_palette_ignored(self) -> None:
        data = OnboardingData.coerce({"step_5": {"color_palette": "  "}, "step_4": {"colorPalette": "Dusty Blue"}})
        assert data.explicit_color_palette() == "Dusty Blue"


class TestCoerce:
    def test_model_passes_through(self, onboarding: OnboardingData) -> None:
        assert OnboardingData.coerce(onboarding) is onboarding

    def test_none_and_non_mapping(self) -> None:
        assert OnboardingData.coerce(None) == OnboardingData()
        assert OnboardingData.coerce("nonsense") == OnboardingData()

    def test_invalid_step_is_dropped(self) -> None:
        data = OnboardingData.coerce({"step_2": {"wedding_location": "Bali"}, "step_3": "oops"})
        assert data.wedding_location == "Bali"
        assert data.step_3 is None

    def test_malformed_field_keeps_rest_of_step(self) -> None:
        data = OnboardingData.coerce(
            {"step_5": {"themes": 7, "color_palette": "Navy & Rose"}, "step_6": {"traditions": "x", "religion": "none"}}
        )
        assert data.explicit_color_palette() == "Navy & Rose"
        assert data.themes_list() == []
        assert data.religion == "none"
        assert data.step_6.traditions == []
