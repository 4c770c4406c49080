"""Onboarding answers consumed by the moodboard pipeline.

Every step and every field is optional. Unknown keys are ignored and
malformed values degrade to ``None`` so that a partially completed
questionnaire still produces a moodboard.
"""
from typing import Any, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator


class _Step(BaseModel):
    model_config = ConfigDict(extra="ignore", populate_by_name=True)


class PlanningStep(_Step):
    planning_stage: Optional[str] = None
    wedding_location: Optional[str] = None


class CoupleStep(_Step):
    partner1_name: Optional[str] = None
    partner2_name: Optional[str] = None
    wedding_date: Optional[str] = None
    currency: Optional[str] = None
    budget: Optional[float] = None

    @field_validator("budget", mode="before")
    @classmethod
    def _lenient_budget(cls, value: Any) -> Optional[float]:
        try:
            return float(value) if value not in (None, "") else None
        except (TypeError, ValueError):
            return None


class GuestStep(_Step):
    guest_count: Optional[int] = None
    international_guests: Optional[str] = None
    requirements: list[str] = Field(default_factory=list)
    color_palette: Optional[str] = Field(None, alias="colorPalette")
    selected_color_palette: Optional[str] = Field(None, alias="selectedColorPalette")

    @field_validator("guest_count", mode="before")
    @classmethod
    def _lenient_guest_count(cls, value: Any) -> Optional[int]:
        if value is None or isinstance(value, bool):
            return None
        try:
            return int(float(value))
        except (TypeError, ValueError):
            return None


class StyleStep(_Step):
    themes: Union[str, list[str], None] = None
    color_palette: Optional[str] = None
    inspiration: Optional[str] = None


class CeremonyStep(_Step):
    ceremony_type: Optional[str] = None
    religion: Optional[str] = None
    traditions: list[str] = Field(default_factory=list)
    special_wishes: Optional[str] = None


class OnboardingData(_Step):
    """Answers collected across the onboarding steps."""

    step_2: Optional[PlanningStep] = None
    step_3: Optional[CoupleStep] = None
    step_4: Optional[GuestStep] = None
    step_5: Optional[StyleStep] = None
    step_6: Optional[CeremonyStep] = None

    @property
    def wedding_location(self) -> Optional[str]:
        return self.step_2.wedding_location if self.step_2 else None

    @property
    def guest_count(self) -> Optional[int]:
        return self.step_4.guest_count if self.step_4 else None

    @property
    def ceremony_type(self) -> Optional[str]:
        return self.step_6.ceremony_type if self.step_6 else None

    @property
    def religion(self) -> Optional[str]:
        return self.step_6.religion if self.step_6 else None

    def themes_list(self) -> list[str]:
        """Return themes as a list, splitting a comma separated string."""
        themes = self.step_5.themes if self.step_5 else None
        if not themes:
            return []
        if isinstance(themes, str):
            return [t.strip() for t in themes.split(",") if t.strip()]
        return [t for t in themes if t]

    def explicit_color_palette(self) -> Optional[str]:
        """Return the first palette the couple chose explicitly, if any."""
        candidates = []
        if self.step_5:
            candidates.append(self.step_5.color_palette)
        if self.step_4:
            candidates.extend([self.step_4.color_palette, self.step_4.selected_color_palette])
        for candidate in candidates:
            if candidate and candidate.strip():
                return candidate
        return None

    @classmethod
    def coerce(cls, data: Union["OnboardingData", dict, None]) -> "OnboardingData":
        """Accept a model, a raw mapping or None.

        A malformed field is dropped rather than rejecting its step, and a
        step that is not a mapping is dropped rather than rejecting the whole
        questionnaire.
        """
        if isinstance(data, cls):
            return data
        if not isinstance(data, dict):
            return cls()
        try:
            return cls.model_validate(data)
        except ValidationError:
            steps = {}
            for name, step_cls in STEP_MODELS.items():
                raw = data.get(name)
                if isinstance(raw, step_cls):
                    steps[name] = raw
                elif isinstance(raw, dict):
                    steps[name] = step_cls.model_validate(_valid_fields(step_cls, raw))
            return cls(**steps)


STEP_MODELS: dict[str, type[_Step]] = {
    "step_2": PlanningStep,
    "step_3": CoupleStep,
    "step_4": GuestStep,
    "step_5": StyleStep,
    "step_6": CeremonyStep,
}


def _valid_fields(step_cls: type[_Step], raw: dict) -> dict:
    valid = {}
    for key, value in raw.items():
        try:
            step_cls.model_validate({key: value})
        except ValidationError:
            continue
        valid[key] = value
    return valid
