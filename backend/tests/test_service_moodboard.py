"""Tests for MoodboardService orchestration."""
from pathlib import Path
from unittest.mock import MagicMock, patch

import pytest

from moodboard.models.image import SwappingResult
from moodboard.models.location import LocationContext
from moodboard.services.analysis import ImageAnalysisService
from moodboard.services.image import ImageGenerationService
from moodboard.services.location import LocationCache, LocationContextService
from moodboard.services.moodboard import MoodboardService

TUSCANY = {
    "step_2": {"wedding_location": "Tuscany, Italy"},
    "step_4": {"guest_count": 120},
    "step_5": {"themes": ["rustic"]},
}


@pytest.fixture
def image_service(tmp_path: Path) -> ImageGenerationService:
    return ImageGenerationService(project_id=None, images_dir=tmp_path)


@pytest.fixture
def analysis_service(image_service: ImageGenerationService) -> ImageAnalysisService:
    return ImageAnalysisService(generator=image_service.generate_single_photo, sleep=lambda s: None)


@pytest.fixture
def location_service() -> LocationContextService:
    return LocationContextService(LocationCache(), lookup_enabled=False)


@pytest.fixture
def service(image_service, analysis_service, location_service) -> MoodboardService:
    return MoodboardService(image_service, analysis_service, location_service)


class TestPreview:
    def test_preview_is_reproducible(self, service: MoodboardService) -> None:
        first = service.preview(TUSCANY, seed=12345)
        second = service.preview(TUSCANY, seed=12345)

        assert first.scene.photos == second.scene.photos
        assert first.scene.color_palette == second.scene.color_palette
        assert [p.metadata.category for p in first.prompts] == [p.category for p in first.scene.photos]

    def test_preview_with_location_context(self, service: MoodboardService) -> None:
        context = LocationContext(name="Tuscany", architecture_style="Renaissance", climate="mediterranean")
        preview = service.preview(TUSCANY, seed=3, location_context=context)
        assert all(p.metadata.location_enhanced for p in preview.prompts)


class TestGenerate:
    def test_offline_pipeline_returns_three_placeholders(self, service: MoodboardService) -> None:
        result = service.generate(TUSCANY, seed=12345)

        assert len(result.photos) == 3
        assert result.fallbacks_used == 3
        assert result.swaps_performed == 0
        assert result.color_palette == "Sage & Cream"
        assert result.location_context is not None
        assert result.location_context.climate == "mediterranean"
        assert [p.category for p in result.photos] == [c.category for c in result.scene.photos]
        assert all(p.metadata.location_enhanced for p in result.prompts)

    def test_empty_onboarding(self, service: MoodboardService) -> None:
        result = service.generate(None, seed=1)

        assert len(result.photos) == 3
        assert result.location_context is None
        assert result.color_palette == "Blush & Gold"

    def test_location_failure_is_ignored(self, image_service, analysis_service) -> None:
        location_service = MagicMock()
        location_service.get_location_context.side_effect = RuntimeError("lookup down")
        service = MoodboardService(image_service, analysis_service, location_service)

        result = service.generate(TUSCANY, seed=5)

        assert result.location_context is None
        assert not any(p.metadata.location_enhanced for p in result.prompts)

    def test_failed_resolution_keeps_generated_photos(self, service: MoodboardService) -> None:
        def failing_resolution(photos, configs, onboarding, location_context):
            return [], SwappingResult(success=False, final_photos=list(photos), error="boom")

        with patch.object(service.analysis_service, "resolve_conflicts", side_effect=failing_resolution):
            result = service.generate(TUSCANY, seed=8)

        assert len(result.photos) == 3
        assert result.swaps_performed == 0

    def test_swapped_photos_are_returned(self, service: MoodboardService) -> None:
        def swapping(photos, configs, onboarding, location_context):
            swapped = [photos[0].model_copy(update={"url": "/images/swapped.png"}), *photos[1:]]
            return [], SwappingResult(
                success=True, swaps_performed=1, final_photos=swapped, conflicts_resolved=["Photo 1: x"]
            )

        with patch.object(service.analysis_service, "resolve_conflicts", side_effect=swapping):
            result = service.generate(TUSCANY, seed=8)

        assert result.photos[0].url == "/images/swapped.png"
        assert result.swaps_performed == 1
        assert result.conflicts_resolved == ["Photo 1: x"]
