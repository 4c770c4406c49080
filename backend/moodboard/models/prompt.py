"""Prompt assembly data models."""
from typing import Optional

from pydantic import BaseModel, Field

from moodboard.models.location import LocationContext
from moodboard.models.onboarding import OnboardingData
from moodboard.models.scene import Category, ElementKind


class PromptOptions(BaseModel):
    """Options for one prompt. Explicit fields override ``onboarding``."""

    location_context: Optional[LocationContext] = None
    quality_enhancements: bool = True
    variation_seed: Optional[int] = None
    color_palette: Optional[str] = None
    themes: Optional[list[str]] = None
    location: Optional[str] = None
    ceremony_type: Optional[str] = None
    religion: Optional[str] = None
    onboarding: Optional[OnboardingData] = None
    # Seeds the colour-phrase draw; left unset the draw is not reproducible.
    color_seed: Optional[int] = None


class TemplateData(BaseModel):
    """Flattened view of a photo configuration and its context."""

    category: Category
    sub_type: str
    environment: str
    time: str
    flowers: Optional[str] = None
    tables: Optional[str] = None
    linens: Optional[str] = None
    chairs: Optional[str] = None
    flowers_subtle: bool = False
    tables_subtle: bool = False
    linens_subtle: bool = False
    chairs_subtle: bool = False
    aisle_deco: Optional[str] = None
    ceiling_decor: Optional[str] = None
    centerpiece_style: Optional[str] = None
    place_setting: Optional[str] = None
    backdrop: Optional[str] = None
    lighting: Optional[str] = None
    ceremony_type: Optional[str] = None
    religion: Optional[str] = None
    colors: list[str] = Field(default_factory=list)
    themes: list[str] = Field(default_factory=list)
    location: Optional[str] = None


class PromptMetadata(BaseModel):
    category: Category
    sub_type: str
    elements_included: list[ElementKind] = Field(default_factory=list)
    location_enhanced: bool = False
    quality_tokens: list[str] = Field(default_factory=list)
    color_phrase: Optional[str] = None


class GeneratedPrompt(BaseModel):
    prompt: str
    metadata: PromptMetadata
