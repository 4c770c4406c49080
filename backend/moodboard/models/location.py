"""Location context data model."""
from pydantic import BaseModel, Field


class LocationContext(BaseModel):
    """Wedding-relevant facts about a destination, used to flavour prompts."""

    name: str
    architecture_style: str = "Classic elegance"
    cultural_elements: list[str] = Field(default_factory=list)
    climate: str = "seasonal"
    popular_venues: list[str] = Field(default_factory=list)
    local_traditions: list[str] = Field(default_factory=list)
    description: str = ""
    search_keywords: list[str] = Field(default_factory=list)
    cached_at: str = ""
