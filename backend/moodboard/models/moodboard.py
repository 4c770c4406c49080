"""Moodboard request/response models for the API layer."""
from typing import Optional

from pydantic import BaseModel, Field

from moodboard.models.image import ConflictAnalysis, GeneratedImage
from moodboard.models.location import LocationContext
from moodboard.models.onboarding import OnboardingData
from moodboard.models.prompt import GeneratedPrompt
from moodboard.models.scene import RandomizationResult


class MoodboardRequest(BaseModel):
    """Request body for the moodboard endpoints."""

    onboarding_data: OnboardingData = Field(default_factory=OnboardingData)
    seed: Optional[int] = Field(None, ge=0)


class ScenePreview(BaseModel):
    """Scene and prompts, without any image generation."""

    scene: RandomizationResult
    prompts: list[GeneratedPrompt]


class MoodboardResult(BaseModel):
    """Final moodboard handed to the compositing/storage collaborator."""

    scene: RandomizationResult
    prompts: list[GeneratedPrompt]
    photos: list[GeneratedImage]
    color_palette: str
    location_context: Optional[LocationContext] = None
    conflicts: list[ConflictAnalysis] = Field(default_factory=list)
    swaps_performed: int = 0
    conflicts_resolved: list[str] = Field(default_factory=list)
    fallbacks_used: int = 0
