"""Scene data models: categories, element selections and photo configurations."""
from enum import Enum
from typing import Optional

from pydantic import BaseModel, Field, field_validator, model_validator


class Category(str, Enum):
    """Wedding photo categories, in declaration order."""

    ceremony = "ceremony"
    reception_ballroom = "reception_ballroom"
    reception_table = "reception_table"
    wedding_cake = "wedding_cake"
    photo_booth = "photo_booth"
    decorative_details = "decorative_details"
    couple_entrance = "couple_entrance"
    venue_aerial = "venue_aerial"
    lighting_atmosphere = "lighting_atmosphere"
    traditions_rituals = "traditions_rituals"


class ElementKind(str, Enum):
    """Element kinds. Member order is the selection order."""

    flowers = "flowers"
    tables = "tables"
    linens = "linens"
    chairs = "chairs"


class Visibility(str, Enum):
    required = "required"
    optional = "optional"


class CategoryDefinition(BaseModel):
    """Static definition of one wedding-scene category."""

    name: str
    subcategories: list[str] = Field(..., min_length=1)
    visibility: dict[ElementKind, Visibility]
    probabilities: dict[ElementKind, float]
    template_key: Category

    @field_validator("probabilities")
    @classmethod
    def _probabilities_in_range(
        cls, value: dict[ElementKind, float]
    ) -> dict[ElementKind, float]:
        for kind, probability in value.items():
            if not 0.0 <= probability <= 1.0:
                raise ValueError(f"probability for {kind.value} must be in [0, 1]")
        return value

    @model_validator(mode="after")
    def _maps_cover_same_kinds(self) -> "CategoryDefinition":
        if set(self.visibility) != set(self.probabilities):
            raise ValueError("visibility and probabilities must cover the same element kinds")
        return self


class PhotoElements(BaseModel):
    """Sparse element selection for one photo.

    Kinds that were not selected stay ``None``. Subtle flags are only set
    for required kinds.
    """

    flowers: Optional[str] = None
    tables: Optional[str] = None
    linens: Optional[str] = None
    chairs: Optional[str] = None
    flowers_subtle: Optional[bool] = None
    tables_subtle: Optional[bool] = None
    linens_subtle: Optional[bool] = None
    chairs_subtle: Optional[bool] = None

    def value_of(self, kind: ElementKind) -> Optional[str]:
        return getattr(self, kind.value)

    def is_subtle(self, kind: ElementKind) -> bool:
        return bool(getattr(self, f"{kind.value}_subtle"))

    def included_kinds(self) -> list[ElementKind]:
        """Return kinds with a non-empty value, in selection order."""
        return [kind for kind in ElementKind if self.value_of(kind)]

    def values(self) -> dict[str, str]:
        """Return ``{kind: value}`` for every included kind."""
        return {kind.value: self.value_of(kind) for kind in self.included_kinds()}


class PhotoConfiguration(BaseModel):
    """Everything needed to describe one moodboard photo."""

    category: Category
    sub_type: str
    environment: str
    time: str
    elements: PhotoElements = Field(default_factory=PhotoElements)
    helpers: dict[str, str] = Field(default_factory=dict)


class SceneMetadata(BaseModel):
    categories_selected: list[Category]
    generation_time: float = Field(..., ge=0, description="Milliseconds")
    elements_selected: int = Field(..., ge=0)


class RandomizationResult(BaseModel):
    """Top-level output of the scene builder."""

    photos: list[PhotoConfiguration] = Field(..., min_length=3, max_length=3)
    color_palette: str
    seed: int
    metadata: SceneMetadata
