"""Seeded scene builder: picks 3 distinct categories and dresses each photo."""
import logging
import time
from typing import Optional, Union

from moodboard.core.seeded_random import WeightedChoice, maybe, pick
from moodboard.models.onboarding import OnboardingData
from moodboard.models.scene import (
    Category,
    ElementKind,
    PhotoConfiguration,
    PhotoElements,
    RandomizationResult,
    SceneMetadata,
    Visibility,
)
from moodboard.services.categories import (
    CATEGORY_DEFINITIONS,
    CATEGORY_WEIGHTS,
    ELEMENT_POOLS,
    HELPER_POOLS,
    get_category,
)

logger = logging.getLogger(__name__)

PHOTOS_PER_SCENE = 3
MAX_CATEGORY_ATTEMPTS = 20
SUBTLE_PROBABILITY = 0.3
DEFAULT_COLOR_PALETTE = "Blush & Gold"

# First matching keyword wins.
THEME_PALETTES: list[tuple[str, str]] = [
    ("rustic", "Sage & Cream"),
    ("modern", "Classic White"),
    ("romantic", "Blush & Gold"),
    ("classic", "Burgundy & Gold"),
    ("bohemian", "Terracotta & Cream"),
    ("garden", "Sage & Cream"),
    ("vintage", "Dusty Blue"),
    ("beach", "Dusty Blue"),
    ("whimsical", "Lavender & Silver"),
    ("nautical", "Navy & Rose"),
]


def select_categories(seed: int) -> list[Category]:
    """Choose 3 distinct categories by weight.

    Each attempt draws with ``seed + attempt``. If the attempts run out, the
    remaining slots are filled in declaration order.
    """
    weighted = [WeightedChoice(category, weight) for category, weight in CATEGORY_WEIGHTS.items()]
    selected: list[Category] = []

    for attempt in range(MAX_CATEGORY_ATTEMPTS):
        if len(selected) == PHOTOS_PER_SCENE:
            break
        category = pick(weighted, seed + attempt)
        if category not in selected:
            selected.append(category)

    for category in CATEGORY_DEFINITIONS:
        if len(selected) == PHOTOS_PER_SCENE:
            break
        if category not in selected:
            selected.append(category)

    return selected


def select_elements(category: Union[Category, str], seed: int, offset: int = 0) -> PhotoElements:
    """Select element values for one photo.

    Required kinds are always present and get a subtle flag rolled at 30%.
    Optional kinds are present only when their probability roll succeeds.

    Raises:
        UnknownCategoryError: When ``category`` is not in the category table.
    """
    definition = get_category(category)
    selected: dict[str, object] = {}

    for index, kind in enumerate(ElementKind):
        kind_seed = seed + offset + index * 100
        visibility = definition.visibility.get(kind, Visibility.optional)

        if visibility is Visibility.required:
            selected[kind.value] = pick(ELEMENT_POOLS[kind], kind_seed)
            selected[f"{kind.value}_subtle"] = maybe(SUBTLE_PROBABILITY, kind_seed + 50)
        elif maybe(definition.probabilities.get(kind, 0.0), kind_seed):
            selected[kind.value] = pick(ELEMENT_POOLS[kind], kind_seed)

    return PhotoElements(**selected)


def select_helpers(category: Union[Category, str], sub_type: str, seed: int) -> dict[str, str]:
    """Pick category-specific decorative helpers for a sub-type."""
    category = get_category(category).template_key
    helpers: dict[str, str] = {}

    if category is Category.ceremony:
        if "aisle" in sub_type:
            helpers["aisle_deco"] = pick(HELPER_POOLS["aisle_deco"], seed + 1)
    elif category is Category.reception_ballroom:
        if "ceiling" in sub_type:
            helpers["ceiling_decor"] = pick(HELPER_POOLS["ceiling_deco"], seed + 2)
    elif category is Category.reception_table:
        if "centerpieces" in sub_type:
            helpers["centerpiece_style"] = pick(HELPER_POOLS["centerpiece_styles"], seed + 3)
        if "place settings" in sub_type:
            helpers["place_setting"] = pick(HELPER_POOLS["place_settings"], seed + 4)
    elif category is Category.photo_booth:
        if "backdrop" in sub_type:
            helpers["backdrop"] = pick(HELPER_POOLS["backdrops"], seed + 5)
        if "lighting" in sub_type:
            helpers["lighting"] = pick(HELPER_POOLS["lighting_options"], seed + 6)
    elif category is Category.couple_entrance:
        if "path" in sub_type:
            helpers["lighting"] = pick(HELPER_POOLS["lighting_options"], seed + 7)

    return helpers


def generate_photo_config(category: Union[Category, str], seed: int) -> PhotoConfiguration:
    """Build one photo configuration from its local seed."""
    definition = get_category(category)
    sub_type = pick(definition.subcategories, seed)

    return PhotoConfiguration(
        category=definition.template_key,
        sub_type=sub_type,
        environment=pick(HELPER_POOLS["environments"], seed + 10),
        time=pick(HELPER_POOLS["times"], seed + 20),
        elements=select_elements(category, seed, 100),
        helpers=select_helpers(category, sub_type, seed + 200),
    )


def _to_int32(value: int) -> int:
    value &= 0xFFFFFFFF
    return value - 0x100000000 if value & 0x80000000 else value


def generate_seed_from_data(data: OnboardingData, now_ms: Optional[int] = None) -> int:
    """Derive an auto-seed from stable onboarding fields plus the clock.

    The last 4 digits of the millisecond timestamp are mixed in, so two
    calls with identical data usually differ.
    """
    parts: list[str] = []
    if data.step_3:
        parts.extend(filter(None, [data.step_3.partner1_name, data.step_3.partner2_name]))
    if data.wedding_location:
        parts.append(data.wedding_location)
    themes = data.step_5.themes if data.step_5 else None
    if themes:
        parts.append(themes if isinstance(themes, str) else "".join(themes))

    if now_ms is None:
        now_ms = int(time.time() * 1000)
    parts.append(str(now_ms)[-4:])

    hash_input = "".join(parts).encode("utf-16-le", "surrogatepass")
    h = 0
    for i in range(0, len(hash_input), 2):
        code_unit = int.from_bytes(hash_input[i:i + 2], "little")
        h = _to_int32(h * 31 + code_unit)
    return abs(h)


def extract_color_palette(data: OnboardingData) -> str:
    """Return the explicit palette, else one inferred from themes, else the default."""
    explicit = data.explicit_color_palette()
    if explicit:
        return explicit

    themes = " ".join(data.themes_list()).lower()
    for keyword, palette in THEME_PALETTES:
        if keyword in themes:
            return palette

    return DEFAULT_COLOR_PALETTE


def build_scene(
    onboarding_data: Union[OnboardingData, dict, None] = None,
    seed: Optional[int] = None,
) -> RandomizationResult:
    """Build the 3 photo configurations for a moodboard.

    Args:
        onboarding_data: Onboarding answers; a raw mapping, an empty mapping
            or None are all accepted.
        seed: Explicit seed for a reproducible scene. When omitted the seed
            is derived from the onboarding data and the clock.

    Returns:
        RandomizationResult with exactly 3 photos of distinct categories.
    """
    started = time.perf_counter()
    data = OnboardingData.coerce(onboarding_data)

    if seed is None:
        seed = generate_seed_from_data(data)

    categories = select_categories(seed)
    photos = [
        generate_photo_config(category, seed + (index + 1) * 1000)
        for index, category in enumerate(categories)
    ]
    color_palette = extract_color_palette(data)

    elements_selected = sum(len(photo.elements.included_kinds()) for photo in photos)
    generation_time = (time.perf_counter() - started) * 1000

    logger.debug(
        "Built scene seed=%d categories=%s palette=%s",
        seed,
        [c.value for c in categories],
        color_palette,
    )
    return RandomizationResult(
        photos=photos,
        color_palette=color_palette,
        seed=seed,
        metadata=SceneMetadata(
            categories_selected=categories,
            generation_time=generation_time,
            elements_selected=elements_selected,
        ),
    )


def validate_photo_uniqueness(photos: list[PhotoConfiguration]) -> bool:
    """Return True for 3 distinct categories using at least 2 element kinds overall."""
    if len({photo.category for photo in photos}) != PHOTOS_PER_SCENE or len(photos) != PHOTOS_PER_SCENE:
        return False
    kinds = {kind for photo in photos for kind in photo.elements.included_kinds()}
    return len(kinds) >= 2
