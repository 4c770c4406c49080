"""Image generation and conflict analysis data models."""
from enum import Enum
from typing import Optional

from pydantic import BaseModel, Field

from moodboard.models.scene import Category, ElementKind


class GenerationMetadata(BaseModel):
    model: str
    generated_at: str
    style_focus: str
    category: Optional[Category] = None
    elements_included: list[ElementKind] = Field(default_factory=list)
    element_values: dict[str, str] = Field(default_factory=dict)


class GeneratedImage(BaseModel):
    """One generated (or placeholder) moodboard photo."""

    category: Category
    url: str
    prompt_used: str
    generation_metadata: GenerationMetadata


class CategorizedPhotoResult(BaseModel):
    success: bool
    photos: list[GeneratedImage] = Field(default_factory=list)
    error: Optional[str] = None
    generation_time: float = 0.0
    categories_generated: list[Category] = Field(default_factory=list)
    fallbacks_used: int = 0


class ElementDetection(BaseModel):
    """Which element kinds are visible in a photo."""

    flowers: bool = False
    tables: bool = False
    linens: bool = False
    chairs: bool = False
    confidence: float = Field(0.0, ge=0.0, le=1.0)
    description: str = ""


class Severity(str, Enum):
    low = "low"
    medium = "medium"
    high = "high"

    @property
    def rank(self) -> int:
        return {"low": 1, "medium": 2, "high": 3}[self.value]

    @classmethod
    def from_count(cls, count: int) -> "Severity":
        if count >= 3:
            return cls.high
        if count >= 2:
            return cls.medium
        return cls.low


class ConflictAnalysis(BaseModel):
    photo_index: int = Field(..., ge=0, le=2)
    conflicts: list[str]
    severity: Severity
    recommend_swap: bool


class SwappingResult(BaseModel):
    success: bool
    swaps_performed: int = 0
    final_photos: list[GeneratedImage]
    conflicts_resolved: list[str] = Field(default_factory=list)
    error: Optional[str] = None
