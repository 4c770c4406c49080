"""Moodboard orchestration service."""
import logging
from typing import Optional, Union

from moodboard.models.location import LocationContext
from moodboard.models.moodboard import MoodboardResult, ScenePreview
from moodboard.models.onboarding import OnboardingData
from moodboard.services.analysis import ImageAnalysisService
from moodboard.services.image import ImageGenerationService
from moodboard.services.location import LocationContextService
from moodboard.services.prompts import (
    generate_batch_prompts_with_onboarding,
    generate_prompts_with_location,
)
from moodboard.services.randomizer import build_scene

logger = logging.getLogger(__name__)


class MoodboardService:
    """Orchestrates location lookup, scene building, prompts, images and conflict resolution.

    Collaborators are injected so tests can replace any of them.
    """

    def __init__(
        self,
        image_service: ImageGenerationService,
        analysis_service: ImageAnalysisService,
        location_service: Optional[LocationContextService] = None,
    ) -> None:
        self.image_service = image_service
        self.analysis_service = analysis_service
        self.location_service = location_service

    def lookup_location(self, onboarding: OnboardingData) -> Optional[LocationContext]:
        """Return the location context, or None when unknown or the lookup fails."""
        location = onboarding.wedding_location
        if not location or self.location_service is None:
            return None
        try:
            return self.location_service.get_location_context(location)
        except Exception as exc:
            logger.warning(
                "Location lookup failed for %s: %s",
                location,
                exc,
                extra={"service": "MoodboardService", "error_type": type(exc).__name__},
            )
            return None

    def preview(
        self,
        onboarding_data: Union[OnboardingData, dict, None],
        seed: Optional[int] = None,
        location_context: Optional[LocationContext] = None,
    ) -> ScenePreview:
        """Build the scene and its prompts without generating images."""
        onboarding = OnboardingData.coerce(onboarding_data)
        scene = build_scene(onboarding, seed)
        if location_context is not None:
            prompts = generate_prompts_with_location(scene.photos, location_context, onboarding)
        else:
            prompts = generate_batch_prompts_with_onboarding(scene.photos, onboarding)
        return ScenePreview(scene=scene, prompts=prompts)

    def generate(
        self,
        onboarding_data: Union[OnboardingData, dict, None],
        seed: Optional[int] = None,
    ) -> MoodboardResult:
        """Run the full moodboard pipeline.

        Args:
            onboarding_data: Onboarding answers.
            seed: Optional explicit seed for a reproducible scene.

        Returns:
            MoodboardResult with 3 photos. Generation and resolution failures
            degrade to placeholder or original photos rather than raising.
        """
        onboarding = OnboardingData.coerce(onboarding_data)
        location_context = self.lookup_location(onboarding)
        preview = self.preview(onboarding, seed, location_context)
        scene = preview.scene

        generated = self.image_service.generate_categorized_photos(scene.photos, preview.prompts)
        conflicts, swapping = self.analysis_service.resolve_conflicts(
            generated.photos, scene.photos, onboarding, location_context
        )
        if not swapping.success:
            logger.warning("Conflict resolution failed, keeping original photos: %s", swapping.error)

        logger.info(
            "Moodboard generated seed=%d categories=%s swaps=%d",
            scene.seed,
            [c.value for c in scene.metadata.categories_selected],
            swapping.swaps_performed,
        )
        return MoodboardResult(
            scene=scene,
            prompts=preview.prompts,
            photos=swapping.final_photos,
            color_palette=scene.color_palette,
            location_context=location_context,
            conflicts=conflicts,
            swaps_performed=swapping.swaps_performed,
            conflicts_resolved=swapping.conflicts_resolved,
            fallbacks_used=generated.fallbacks_used,
        )
