"""Configuration management using pydantic-settings."""
from functools import lru_cache

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # GCP settings. An empty project id disables image generation and vision
    # analysis; the pipeline then runs on placeholder images and heuristics.
    gcp_project_id: str = ""
    vertex_ai_location: str = "global"

    # Gemini models
    image_model: str = "gemini-3-pro-image-preview"
    vision_model: str = "gemini-2.5-flash"

    # Moodboard pipeline
    images_dir: str = "data/images"
    conflict_threshold: int = 2
    regeneration_delay_s: float = 0.1

    # Location lookup
    location_lookup_enabled: bool = True
    location_lookup_timeout_s: float = 5.0
    location_cache_ttl_hours: int = 168

    # Application settings
    app_name: str = "wedding-moodboard"

    # Server settings
    backend_host: str = "localhost"
    backend_port: int = 8000
    frontend_port: int = 3000


@lru_cache
def get_settings() -> Settings:
    """Return cached settings instance."""
    return Settings()
