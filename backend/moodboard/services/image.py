"""Image generation service."""
import logging
import time
from concurrent.futures import ThreadPoolExecutor
from datetime import datetime, timezone
from pathlib import Path
from typing import Optional, Union

from moodboard.models.image import CategorizedPhotoResult, GeneratedImage, GenerationMetadata
from moodboard.models.location import LocationContext
from moodboard.models.onboarding import OnboardingData
from moodboard.models.prompt import GeneratedPrompt
from moodboard.models.scene import Category, PhotoConfiguration
from moodboard.services.prompts import generate_batch_prompts_with_onboarding

logger = logging.getLogger(__name__)

FALLBACK_MODEL = "fallback"

# Placeholder photos served when generation is unavailable or fails.
FALLBACK_IMAGES: dict[Category, list[str]] = {
    Category.ceremony: ["/images/fallback/wedding-1.jpg", "/images/fallback/wedding-2.jpg"],
    Category.reception_ballroom: ["/images/fallback/wedding-3.jpg", "/images/fallback/wedding-4.jpg"],
    Category.reception_table: ["/images/fallback/wedding-5.jpg", "/images/fallback/wedding-6.jpg"],
    Category.wedding_cake: ["/images/fallback/wedding-7.jpg", "/images/fallback/wedding-8.jpg"],
    Category.photo_booth: ["/images/fallback/wedding-9.jpg", "/images/fallback/wedding-10.jpg"],
    Category.decorative_details: ["/images/fallback/wedding-11.jpg", "/images/fallback/wedding-12.jpg"],
    Category.couple_entrance: ["/images/fallback/wedding-1.jpg"],
    Category.venue_aerial: ["/images/fallback/wedding-2.jpg"],
    Category.lighting_atmosphere: ["/images/fallback/wedding-3.jpg"],
    Category.traditions_rituals: ["/images/fallback/wedding-4.jpg"],
}


class ImageGenerationService:
    """Generates moodboard photos via the Gemini Image API."""

    def __init__(
        self,
        project_id: Optional[str] = None,
        location: Optional[str] = None,
        images_dir: Optional[Path] = None,
        model: str = "gemini-3-pro-image-preview",
    ) -> None:
        self.project_id = project_id or None
        self.location = location
        self.images_dir = Path(images_dir) if images_dir is not None else Path("data/images")
        self.model = model

    @property
    def available(self) -> bool:
        return self.project_id is not None

    def generate_photo(self, config: PhotoConfiguration, prompt: str) -> Optional[GeneratedImage]:
        """Generate one photo and save it locally.

        Retries once on failure. Returns None if both attempts fail.

        Args:
            config: Photo configuration the prompt was built from.
            prompt: Final generation prompt.

        Returns:
            GeneratedImage pointing at the saved PNG, or None on failure.
        """
        for attempt in range(2):
            try:
                image_bytes = self._call_image_api(prompt)
                url = self._save_image(image_bytes, config.category)
                return self._build_image(config, prompt, url, self.model)
            except Exception as exc:
                logger.error(
                    "Image generation failed (attempt %d/2): %s: %s",
                    attempt + 1,
                    type(exc).__name__,
                    exc,
                    extra={
                        "service": "ImageGenerationService",
                        "error_type": type(exc).__name__,
                        "attempt": attempt + 1,
                    },
                )

        return None

    def generate_categorized_photos(
        self,
        configs: list[PhotoConfiguration],
        prompts: list[GeneratedPrompt],
    ) -> CategorizedPhotoResult:
        """Generate one photo per configuration concurrently.

        Photos that cannot be generated are replaced with the category's
        placeholder, so the result always holds one photo per configuration.
        """
        started = time.perf_counter()

        if not self.available:
            logger.info("No GCP project configured, using placeholder photos")
            photos = [
                self.fallback_photo(config, prompt.prompt, index)
                for index, (config, prompt) in enumerate(zip(configs, prompts))
            ]
        else:
            with ThreadPoolExecutor(max_workers=len(configs) or 1) as pool:
                results = list(
                    pool.map(
                        lambda pair: self.generate_photo(pair[0], pair[1].prompt),
                        zip(configs, prompts),
                    )
                )
            photos = [
                result or self.fallback_photo(config, prompt.prompt, index)
                for index, (result, config, prompt) in enumerate(zip(results, configs, prompts))
            ]

        fallbacks = sum(1 for photo in photos if photo.generation_metadata.model == FALLBACK_MODEL)
        elapsed = (time.perf_counter() - started) * 1000
        logger.info(
            "Generated %d categorized photos in %.0fms (%d fallbacks)",
            len(photos),
            elapsed,
            fallbacks,
        )
        return CategorizedPhotoResult(
            success=True,
            photos=photos,
            generation_time=elapsed,
            categories_generated=[config.category for config in configs],
            fallbacks_used=fallbacks,
        )

    def generate_single_photo(
        self,
        config: PhotoConfiguration,
        onboarding: Union[OnboardingData, dict, None],
        location_context: Optional[LocationContext] = None,
    ) -> Optional[GeneratedImage]:
        """Build the prompt for one configuration and generate its photo.

        Returns None when generation is unavailable or fails; no placeholder
        is substituted.
        """
        if not self.available:
            return None
        prompt = generate_batch_prompts_with_onboarding([config], onboarding, location_context)[0]
        return self.generate_photo(config, prompt.prompt)

    def fallback_photo(self, config: PhotoConfiguration, prompt: str, index: int = 0) -> GeneratedImage:
        images = FALLBACK_IMAGES.get(config.category) or FALLBACK_IMAGES[Category.ceremony]
        return self._build_image(config, prompt, images[index % len(images)], FALLBACK_MODEL)

    def _build_image(
        self, config: PhotoConfiguration, prompt: str, url: str, model: str
    ) -> GeneratedImage:
        return GeneratedImage(
            category=config.category,
            url=url,
            prompt_used=prompt,
            generation_metadata=GenerationMetadata(
                model=model,
                generated_at=datetime.now(timezone.utc).isoformat(),
                style_focus=config.category.value,
                category=config.category,
                elements_included=config.elements.included_kinds(),
                element_values=config.elements.values(),
            ),
        )

    def _call_image_api(self, prompt: str) -> bytes:
        """Call the Gemini Image API and return raw PNG bytes.

        Args:
            prompt: The image generation prompt.

        Returns:
            Raw image bytes from the API response.

        Raises:
            RuntimeError: When the API returns no image data.
        """
        from google import genai  # type: ignore[import-untyped]
        from google.genai import types  # type: ignore[import-untyped]

        # Gemini 3 Pro Image is only available on the global endpoint.
        client = genai.Client(
            vertexai=True,
            project=self.project_id,
            location="global",
        )

        response = client.models.generate_content(
            model=self.model,
            contents=prompt,
            config=types.GenerateContentConfig(
                response_modalities=["IMAGE"],
            ),
        )

        candidates = response.candidates
        if not candidates or candidates[0].content is None:
            raise RuntimeError("No candidates returned by Gemini Image API")

        for part in candidates[0].content.parts:
            if hasattr(part, "inline_data") and part.inline_data is not None:
                return bytes(part.inline_data.data)

        raise RuntimeError("No image data returned by Gemini Image API")

    def _save_image(self, image_bytes: bytes, category: Category) -> str:
        """Save image bytes to the images directory.

        File name format: {category}_{YYYYMMDDHHMMSSffffff}.png

        Returns:
            URL path served by the /images static mount.
        """
        self.images_dir.mkdir(parents=True, exist_ok=True)
        timestamp = datetime.now().strftime("%Y%m%d%H%M%S%f")
        filename = f"{category.value}_{timestamp}.png"
        (self.images_dir / filename).write_bytes(image_bytes)
        return f"/images/{filename}"

    def resolve_local_path(self, url: str) -> Optional[Path]:
        """Map an /images URL back to the saved file, if it exists."""
        if not url.startswith("/images/"):
            return None
        path = self.images_dir / url[len("/images/"):]
        return path if path.is_file() else None
