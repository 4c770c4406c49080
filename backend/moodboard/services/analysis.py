"""Visual conflict detection and bounded element swapping.

Detection fails open: any error yields an empty conflict list. Resolution
runs as a small state machine (idle -> detecting -> resolving -> done) that
regenerates at most ``MAX_SWAPS`` photos, highest severity first.
"""
import logging
import time
from concurrent.futures import ThreadPoolExecutor
from enum import Enum
from pathlib import Path
from typing import Callable, Optional, Union

from moodboard.core.seeded_random import pick
from moodboard.models.image import (
    ConflictAnalysis,
    ElementDetection,
    GeneratedImage,
    Severity,
    SwappingResult,
)
from moodboard.models.location import LocationContext
from moodboard.models.onboarding import OnboardingData
from moodboard.models.scene import Category, ElementKind, PhotoConfiguration
from moodboard.services.categories import ELEMENT_POOLS

logger = logging.getLogger(__name__)

MAX_SWAPS = 2
COMPARED_KINDS = (ElementKind.flowers, ElementKind.tables, ElementKind.linens)

# Both descriptions must mention the same keyword to count as similar.
SIMILARITY_KEYWORDS: dict[ElementKind, list[str]] = {
    ElementKind.flowers: [
        "white roses", "pink roses", "garden roses", "peonies", "hydrangeas",
        "orchids", "lavender", "tulips", "wildflower", "lilies", "protea",
    ],
    ElementKind.tables: [
        "round", "long", "wood", "marble", "glass", "oval", "mirrored", "plank", "cocktail",
    ],
    ElementKind.linens: [
        "white", "ivory", "lace", "satin", "cotton", "linen", "velvet", "black", "navy", "floral print",
    ],
}

HEURISTIC_KEYWORDS: dict[ElementKind, tuple[str, ...]] = {
    ElementKind.flowers: ("flower", "floral", "roses", "bouquet"),
    ElementKind.tables: ("table", "dining", "reception"),
    ElementKind.linens: ("linen", "fabric", "tablecloth", "runner"),
    ElementKind.chairs: ("chair", "seating", "chiavari"),
}

# A photo of this category always shows the kind.
CATEGORY_IMPLIES: dict[ElementKind, Category] = {
    ElementKind.tables: Category.reception_table,
    ElementKind.chairs: Category.ceremony,
}

VISION_PROMPT = (
    "Analyze this wedding photo and identify if it contains: flowers, tables, "
    "linens/fabrics, chairs. Respond with JSON: {\"flowers\": boolean, "
    "\"tables\": boolean, \"linens\": boolean, \"chairs\": boolean, "
    "\"confidence\": 0-1, \"description\": \"brief description of visible "
    "elements, naming flower types, table shapes and linen fabrics\"}"
)

PhotoGenerator = Callable[
    [PhotoConfiguration, Union[OnboardingData, dict, None], Optional[LocationContext]],
    Optional[GeneratedImage],
]


class ResolverState(str, Enum):
    idle = "idle"
    detecting = "detecting"
    resolving = "resolving"
    done = "done"


def are_elements_similar(kind: ElementKind, description_a: str, description_b: str) -> bool:
    a = description_a.lower()
    b = description_b.lower()
    return any(k in a and k in b for k in SIMILARITY_KEYWORDS.get(kind, []))


def analyze_with_prompt_heuristics(photo: GeneratedImage) -> ElementDetection:
    """Infer visible elements from the prompt text and generation metadata."""
    prompt = photo.prompt_used.lower()
    metadata = photo.generation_metadata
    category = metadata.category or photo.category
    included = set(metadata.elements_included)

    present = {
        kind: any(k in prompt for k in keywords)
        or kind in included
        or CATEGORY_IMPLIES.get(kind) == category
        for kind, keywords in HEURISTIC_KEYWORDS.items()
    }
    matched = sum(present.values())
    values = ", ".join(metadata.element_values.values()) or ", ".join(k.value for k in included)

    return ElementDetection(
        flowers=present[ElementKind.flowers],
        tables=present[ElementKind.tables],
        linens=present[ElementKind.linens],
        chairs=present[ElementKind.chairs],
        confidence=min(0.9, 0.4 + 0.15 * matched),
        description=f"{category.value} photo with {values}",
    )


def generate_alternative_elements(
    config: PhotoConfiguration, conflicts: list[str], seed: Optional[int] = None
) -> PhotoConfiguration:
    """Replace each conflicting element kind with a different pool value.

    The seed defaults to the current time in milliseconds, so repeated
    calls usually choose different replacements.
    """
    if seed is None:
        seed = int(time.time() * 1000)

    conflicting = {kind for kind in COMPARED_KINDS if any(kind.value in c for c in conflicts)}
    updates: dict[str, str] = {}
    for offset, kind in enumerate(COMPARED_KINDS, start=1):
        current = config.elements.value_of(kind)
        if kind not in conflicting or not current:
            continue
        available = [value for value in ELEMENT_POOLS[kind] if value != current]
        if available:
            updates[kind.value] = pick(available, seed + offset)

    elements = config.elements.model_copy(update=updates)
    return config.model_copy(update={"elements": elements})


class ConflictResolver:
    """One bounded conflict-resolution run.

    A resolver is created per request. ``history`` records every state the
    run passed through.
    """

    def __init__(
        self,
        generator: PhotoGenerator,
        max_swaps: int = MAX_SWAPS,
        delay_s: float = 0.1,
        sleep: Callable[[float], None] = time.sleep,
    ) -> None:
        self.generator = generator
        self.max_swaps = max_swaps
        self.delay_s = delay_s
        self.sleep = sleep
        self.state = ResolverState.idle
        self.history: list[ResolverState] = [ResolverState.idle]
        self.attempts = 0

    def _transition(self, state: ResolverState) -> None:
        self.state = state
        self.history.append(state)

    def finish(self) -> None:
        self._transition(ResolverState.done)

    def detect(
        self,
        detector: Callable[[list[GeneratedImage]], list[ConflictAnalysis]],
        photos: list[GeneratedImage],
    ) -> list[ConflictAnalysis]:
        self._transition(ResolverState.detecting)
        return detector(photos)

    def plan(self, conflicts: list[ConflictAnalysis]) -> list[ConflictAnalysis]:
        """Swappable conflicts ordered high to medium to low, capped at ``max_swaps``."""
        swappable = [c for c in conflicts if c.recommend_swap]
        swappable.sort(key=lambda c: c.severity.rank, reverse=True)
        return swappable[: self.max_swaps]

    def resolve(
        self,
        conflicts: list[ConflictAnalysis],
        original_photos: list[GeneratedImage],
        photo_configs: list[PhotoConfiguration],
        onboarding: Union[OnboardingData, dict, None],
        location_context: Optional[LocationContext] = None,
    ) -> SwappingResult:
        """Regenerate the planned photos one at a time.

        A failed regeneration keeps the original photo. An error escaping
        the loop returns ``success=False`` with the original photos.
        """
        self._transition(ResolverState.resolving)
        started = time.perf_counter()
        try:
            final_photos = list(original_photos)
            swaps = 0
            resolved: list[str] = []

            for conflict in self.plan(conflicts):
                index = conflict.photo_index
                self.attempts += 1
                logger.info("Swapping photo %d (%s severity)", index + 1, conflict.severity.value)
                try:
                    config = generate_alternative_elements(photo_configs[index], conflict.conflicts)
                    photo = self.generator(config, onboarding, location_context)
                    if photo is not None:
                        final_photos[index] = photo
                        swaps += 1
                        resolved.append(f"Photo {index + 1}: {', '.join(conflict.conflicts)}")
                    else:
                        logger.warning("Failed to regenerate photo %d, keeping original", index + 1)
                except Exception as exc:
                    logger.warning(
                        "Error swapping photo %d: %s",
                        index + 1,
                        exc,
                        extra={"service": "ConflictResolver", "error_type": type(exc).__name__},
                    )

                self.sleep(self.delay_s)

            result = SwappingResult(
                success=True,
                swaps_performed=swaps,
                final_photos=final_photos,
                conflicts_resolved=resolved,
            )
            logger.info(
                "Element swapping completed in %.0fms - %d swaps performed",
                (time.perf_counter() - started) * 1000,
                swaps,
            )
        except Exception as exc:
            logger.error(
                "Element swapping failed",
                exc_info=True,
                extra={"service": "ConflictResolver", "error_type": type(exc).__name__},
            )
            result = SwappingResult(
                success=False,
                swaps_performed=0,
                final_photos=list(original_photos),
                conflicts_resolved=[],
                error=str(exc) or type(exc).__name__,
            )

        self._transition(ResolverState.done)
        return result


class ImageAnalysisService:
    """Detects repeated elements across generated photos and swaps them out."""

    def __init__(
        self,
        generator: Optional[PhotoGenerator] = None,
        project_id: Optional[str] = None,
        vision_model: str = "gemini-2.5-flash",
        image_locator: Optional[Callable[[str], Optional[Path]]] = None,
        conflict_threshold: int = 2,
        regeneration_delay_s: float = 0.1,
        sleep: Callable[[float], None] = time.sleep,
    ) -> None:
        self.generator = generator or (lambda config, onboarding, location: None)
        self.project_id = project_id or None
        self.vision_model = vision_model
        self.image_locator = image_locator
        self.conflict_threshold = conflict_threshold
        self.regeneration_delay_s = regeneration_delay_s
        self.sleep = sleep

    def new_resolver(self) -> ConflictResolver:
        return ConflictResolver(
            self.generator, max_swaps=MAX_SWAPS, delay_s=self.regeneration_delay_s, sleep=self.sleep
        )

    def detect_visual_conflicts(
        self,
        photos: list[GeneratedImage],
        max_conflict_threshold: Optional[int] = None,
    ) -> list[ConflictAnalysis]:
        """Compare photos pairwise for similar flowers, tables and linens.

        Args:
            photos: The generated photos, in moodboard order.
            max_conflict_threshold: Conflict count at which a swap is
                recommended. Defaults to the configured threshold.

        Returns:
            One ConflictAnalysis per photo with at least one conflict; an
            empty list if detection fails.
        """
        threshold = self.conflict_threshold if max_conflict_threshold is None else max_conflict_threshold
        started = time.perf_counter()
        try:
            with ThreadPoolExecutor(max_workers=max(len(photos), 1)) as pool:
                detections = list(pool.map(self._analyze_photo, photos, range(len(photos))))

            conflicts: list[ConflictAnalysis] = []
            for i, current in enumerate(detections):
                found: list[str] = []
                for j in range(i + 1, len(detections)):
                    other = detections[j]
                    for kind in COMPARED_KINDS:
                        if (
                            getattr(current, kind.value)
                            and getattr(other, kind.value)
                            and are_elements_similar(kind, current.description, other.description)
                        ):
                            found.append(f"Similar {kind.value} with photo {j + 1}")

                if found:
                    conflicts.append(
                        ConflictAnalysis(
                            photo_index=i,
                            conflicts=found,
                            severity=Severity.from_count(len(found)),
                            recommend_swap=len(found) >= threshold,
                        )
                    )

            logger.info(
                "Conflict analysis completed in %.0fms - %d conflicts found",
                (time.perf_counter() - started) * 1000,
                len(conflicts),
            )
            return conflicts
        except Exception as exc:
            logger.error(
                "Conflict detection failed",
                exc_info=True,
                extra={"service": "ImageAnalysisService", "error_type": type(exc).__name__},
            )
            return []

    def regenerate_with_different_elements(
        self,
        conflicts: list[ConflictAnalysis],
        original_photos: list[GeneratedImage],
        photo_configs: list[PhotoConfiguration],
        onboarding: Union[OnboardingData, dict, None],
        location_context: Optional[LocationContext] = None,
    ) -> SwappingResult:
        """Regenerate up to 2 conflicting photos with different elements."""
        return self.new_resolver().resolve(
            conflicts, original_photos, photo_configs, onboarding, location_context
        )

    def resolve_conflicts(
        self,
        photos: list[GeneratedImage],
        photo_configs: list[PhotoConfiguration],
        onboarding: Union[OnboardingData, dict, None],
        location_context: Optional[LocationContext] = None,
    ) -> tuple[list[ConflictAnalysis], SwappingResult]:
        """Detect conflicts and resolve them when any recommends a swap."""
        resolver = self.new_resolver()
        conflicts = resolver.detect(self.detect_visual_conflicts, photos)
        if not any(c.recommend_swap for c in conflicts):
            resolver.finish()
            return conflicts, SwappingResult(success=True, final_photos=list(photos))
        return conflicts, resolver.resolve(
            conflicts, photos, photo_configs, onboarding, location_context
        )

    def _analyze_photo(self, photo: GeneratedImage, index: int) -> ElementDetection:
        image_path = self.image_locator(photo.url) if self.image_locator else None
        if self.project_id and image_path is not None:
            try:
                return self._analyze_with_vision(image_path)
            except Exception as exc:
                logger.warning(
                    "Photo analysis failed for photo %d, using fallback: %s",
                    index + 1,
                    exc,
                    extra={"service": "ImageAnalysisService", "error_type": type(exc).__name__},
                )
        return analyze_with_prompt_heuristics(photo)

    def _analyze_with_vision(self, image_path: Path) -> ElementDetection:
        """Ask the Gemini vision model which elements a saved photo shows.

        Raises:
            RuntimeError: When the model returns no text.
            pydantic.ValidationError: When the JSON does not match ElementDetection.
        """
        from google import genai  # type: ignore[import-untyped]
        from google.genai import types  # type: ignore[import-untyped]

        client = genai.Client(vertexai=True, project=self.project_id, location="global")
        response = client.models.generate_content(
            model=self.vision_model,
            contents=[
                types.Part.from_bytes(data=image_path.read_bytes(), mime_type="image/png"),
                VISION_PROMPT,
            ],
            config=types.GenerateContentConfig(response_mime_type="application/json"),
        )
        if not response.text:
            raise RuntimeError("No response from Gemini vision model")
        return ElementDetection.model_validate_json(response.text)
