"""Tests for image and conflict analysis data models."""
import pytest
from pydantic import ValidationError

from moodboard.models.image import ConflictAnalysis, ElementDetection, Severity
from moodboard.models.moodboard import MoodboardRequest
from moodboard.models.scene import ElementKind, PhotoElements


class TestSeverity:
    """Tests for Severity ranking."""

    @pytest.mark.parametrize(
        "count,severity",
        [(1, Severity.low), (2, Severity.medium), (3, Severity.high), (5, Severity.high)],
    )
    def test_from_count(self, count: int, severity: Severity) -> None:
        assert Severity.from_count(count) is severity

    def test_rank_orders_high_first(self) -> None:
        ordered = sorted(Severity, key=lambda s: s.rank, reverse=True)
        assert ordered == [Severity.high, Severity.medium, Severity.low]


class TestConflictAnalysis:
    def test_valid(self) -> None:
        analysis = ConflictAnalysis(photo_index=2, conflicts=["x"], severity="medium", recommend_swap=True)
        assert analysis.severity is Severity.medium

    def test_photo_index_above_max_rejected(self) -> None:
        """Only 3 photos exist, so index 3 is invalid."""
        with pytest.raises(ValidationError):
            ConflictAnalysis(photo_index=3, conflicts=[], severity="low", recommend_swap=False)

    def test_invalid_severity_rejected(self) -> None:
        with pytest.raises(ValidationError):
            ConflictAnalysis(photo_index=0, conflicts=[], severity="critical", recommend_swap=False)


class TestElementDetection:
    def test_parses_vision_json(self) -> None:
        detection = ElementDetection.model_validate_json(
            '{"flowers": true, "tables": false, "linens": true, "chairs": false,'
            ' "confidence": 0.8, "description": "white roses on ivory linen"}'
        )
        assert detection.flowers is True
        assert detection.linens is True
        assert detection.confidence == 0.8

    def test_confidence_out_of_range_rejected(self) -> None:
        with pytest.raises(ValidationError):
            ElementDetection(confidence=1.5)


class TestPhotoElements:
    def test_included_kinds_keep_selection_order(self) -> None:
        elements = PhotoElements(chairs="benches", flowers="tulips")
        assert elements.included_kinds() == [ElementKind.flowers, ElementKind.chairs]
        assert elements.values() == {"flowers": "tulips", "chairs": "benches"}

    def test_subtle_flag(self) -> None:
        elements = PhotoElements(flowers="tulips", flowers_subtle=True)
        assert elements.is_subtle(ElementKind.flowers) is True
        assert elements.is_subtle(ElementKind.chairs) is False


class TestMoodboardRequest:
    def test_defaults(self) -> None:
        request = MoodboardRequest()
        assert request.seed is None
        assert request.onboarding_data.wedding_location is None

    def test_negative_seed_rejected(self) -> None:
        with pytest.raises(ValidationError):
            MoodboardRequest(seed=-5)
