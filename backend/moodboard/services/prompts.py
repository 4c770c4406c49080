"""Prompt assembly for moodboard photos.

A prompt is built in layers on top of the category template: location
context, colour palette, then anti-repetition tokens and composition
guidance. Everything except the colour-phrase draw is a pure function of
the inputs; pass ``color_seed`` to make that draw reproducible as well.
"""
import logging
import re
from typing import Optional, Union

from moodboard.core.seeded_random import pick
from moodboard.models.location import LocationContext
from moodboard.models.onboarding import OnboardingData
from moodboard.models.prompt import GeneratedPrompt, PromptMetadata, PromptOptions, TemplateData
from moodboard.models.scene import Category, PhotoConfiguration
from moodboard.services.randomizer import extract_color_palette
from moodboard.services.templates import get_template

logger = logging.getLogger(__name__)

COLOR_ANCHORS = ("captured in", "shot in", "photographed in")

COLOR_PALETTE_PHRASES: dict[str, list[str]] = {
    "blush & gold": [
        "soft blush pink and warm gold",
        "rose-tinted blush with gilded accents",
        "pale pink petals and brushed gold",
    ],
    "classic white": [
        "crisp white and ivory",
        "layered whites with soft cream",
        "pure white with silver highlights",
    ],
    "sage & cream": [
        "muted sage green and cream",
        "eucalyptus green with warm ivory",
        "soft sage with natural linen tones",
    ],
    "navy & rose": [
        "deep navy and dusty rose",
        "midnight blue with blush rose",
        "navy velvet and antique pink",
    ],
    "burgundy & gold": [
        "rich burgundy and antique gold",
        "deep wine red with gilded details",
        "oxblood and polished brass",
    ],
    "dusty blue": [
        "dusty blue and soft grey",
        "powder blue with silver sage",
        "faded denim blue and ivory",
    ],
    "terracotta & cream": [
        "terracotta and warm cream",
        "burnt orange with sand tones",
        "rust clay and ivory",
    ],
    "lavender & silver": [
        "soft lavender and silver",
        "lilac with pewter accents",
        "pale purple and moonlit silver",
    ],
}

CLIMATE_ADJUSTMENTS: dict[str, dict[str, str]] = {
    "tropical": {
        "golden hour": "Warm, humid golden light filtering through palm fronds.",
        "blue hour": "Balmy evening air with soft twilight ambiance.",
        "bright daytime": "Vibrant tropical sunshine with deep shadows.",
        "candlelit night": "Warm night air with gentle sea breeze.",
    },
    "mediterranean": {
        "golden hour": "Warm Mediterranean sun casting long shadows.",
        "blue hour": "Gentle evening breeze with olive grove ambiance.",
        "bright daytime": "Clear, bright Mediterranean sunlight.",
        "candlelit night": "Mild night air with cypress tree silhouettes.",
    },
    "temperate": {
        "golden hour": "Soft, diffused golden light through deciduous trees.",
        "blue hour": "Cool evening air with subtle mist.",
        "bright daytime": "Clear, crisp natural lighting.",
        "candlelit night": "Cool night air with seasonal foliage.",
    },
}

ANTI_REPETITION_BASE: dict[Category, list[str]] = {
    Category.ceremony: ["unique altar design", "distinctive seating arrangement", "personal ceremonial touches"],
    Category.reception_ballroom: ["distinctive room layout", "unique lighting design", "creative space utilization"],
    Category.reception_table: ["creative centerpiece styling", "unique table configuration", "innovative place setting design"],
    Category.wedding_cake: ["artistic cake styling", "creative dessert presentation", "unique cake stand design"],
    Category.photo_booth: ["innovative backdrop design", "creative prop arrangement", "unique lighting setup"],
    Category.decorative_details: ["curated detail styling", "unexpected textures", "personal keepsake touches"],
    Category.couple_entrance: ["distinctive entrance framing", "unique pathway styling", "memorable arrival moment"],
    Category.venue_aerial: ["distinctive venue footprint", "unique grounds layout", "striking landscape integration"],
    Category.lighting_atmosphere: ["unique light layering", "distinctive glow palette", "creative shadow play"],
    Category.traditions_rituals: ["authentic ritual styling", "distinctive ceremonial objects", "personal heritage touches"],
}

ANTI_REPETITION_VARIATIONS: dict[Category, list[str]] = {
    Category.ceremony: ["asymmetric elements", "mixed textures", "layered compositions"],
    Category.reception_ballroom: ["dramatic angles", "layered lighting", "architectural details"],
    Category.reception_table: ["varying heights", "textural contrasts", "organic arrangements"],
    Category.wedding_cake: ["geometric elements", "natural textures", "artistic draping"],
    Category.photo_booth: ["dynamic angles", "mixed materials", "creative framing"],
    Category.decorative_details: ["tactile paper grain", "soft ribbon movement", "scattered petals"],
    Category.couple_entrance: ["leading lines", "framed doorways", "glowing path edges"],
    Category.venue_aerial: ["symmetrical patterns", "winding paths", "golden field edges"],
    Category.lighting_atmosphere: ["bokeh highlights", "warm-cool contrast", "flickering candle depth"],
    Category.traditions_rituals: ["heirloom textiles", "symbolic objects", "intimate framing"],
}

COMPOSITION_GUIDANCE: dict[Category, str] = {
    Category.ceremony: "Frame to show both intimacy and grandeur of the ceremony space.",
    Category.reception_table: "Focus on tablescape details with shallow depth of field.",
    Category.wedding_cake: "Emphasize cake as hero element with elegant negative space.",
    Category.reception_ballroom: "Capture room atmosphere with balanced lighting and composition.",
    Category.venue_aerial: "Show venue layout relationship to natural surroundings.",
    Category.decorative_details: "Use macro photography techniques for intimate detail shots.",
    Category.photo_booth: "Create inviting, Instagram-worthy backdrop composition.",
    Category.couple_entrance: "Frame pathway to create anticipation and romantic journey feel.",
    Category.lighting_atmosphere: "Emphasize mood and ambiance over specific details.",
    Category.traditions_rituals: "Capture emotional significance of the moment.",
}

QUALITY_TOKEN_MARKERS: list[tuple[str, str]] = [
    ("Editorial wedding photography", "editorial"),
    ("cinematic lighting", "cinematic"),
    ("ultra high resolution", "high-res"),
    ("no people", "no-people"),
    ("macro photography", "macro"),
    ("shallow depth of field", "shallow-dof"),
]

ARCHITECTURE_CATEGORIES = {Category.ceremony, Category.reception_ballroom}
CULTURAL_CATEGORIES = {
    Category.ceremony,
    Category.traditions_rituals,
    Category.reception_ballroom,
    Category.decorative_details,
}
CLIMATE_CATEGORIES = {Category.venue_aerial, Category.ceremony}

_COLOR_SPLIT = re.compile(r"\s*(?:,|&|/|\band\b)\s*", re.IGNORECASE)


def parse_colors(palette: Optional[str]) -> list[str]:
    """Split a palette string such as "navy blue and silver" into colour tokens."""
    if not palette:
        return []
    return [token for token in _COLOR_SPLIT.split(palette) if token]


def color_phrases_for(palette: str) -> list[str]:
    """Return the descriptive phrases for a palette name, case-insensitively."""
    phrases = COLOR_PALETTE_PHRASES.get(palette.strip().lower())
    if phrases:
        return phrases
    return [f"{palette.strip()} tones"]


def build_template_data(photo_config: PhotoConfiguration, options: PromptOptions) -> TemplateData:
    """Merge a photo configuration with explicit options and onboarding answers."""
    onboarding = options.onboarding or OnboardingData()
    palette = options.color_palette or onboarding.explicit_color_palette()
    elements = photo_config.elements

    return TemplateData(
        category=photo_config.category,
        sub_type=photo_config.sub_type,
        environment=photo_config.environment,
        time=photo_config.time,
        flowers=elements.flowers,
        tables=elements.tables,
        linens=elements.linens,
        chairs=elements.chairs,
        flowers_subtle=bool(elements.flowers_subtle),
        tables_subtle=bool(elements.tables_subtle),
        linens_subtle=bool(elements.linens_subtle),
        chairs_subtle=bool(elements.chairs_subtle),
        ceremony_type=options.ceremony_type or onboarding.ceremony_type,
        religion=options.religion or onboarding.religion,
        colors=parse_colors(palette),
        themes=options.themes if options.themes is not None else onboarding.themes_list(),
        location=options.location or onboarding.wedding_location,
        **{key: value for key, value in photo_config.helpers.items() if key in TemplateData.model_fields},
    )


def _pick_cultural_element(cultural_elements: list[str]) -> Optional[str]:
    for element in cultural_elements:
        lowered = element.lower()
        if "language" in lowered or "religion" in lowered or len(element) >= 30:
            continue
        return element
    return None


def _enhance_with_location(
    prompt: str, photo_config: PhotoConfiguration, context: LocationContext
) -> str:
    category = photo_config.category

    if category in ARCHITECTURE_CATEGORIES and context.architecture_style:
        prompt = prompt.replace(
            photo_config.environment,
            f"{photo_config.environment} with {context.architecture_style} architectural elements",
            1,
        )

    if category in CULTURAL_CATEGORIES:
        cultural = _pick_cultural_element(context.cultural_elements)
        if cultural:
            prompt += f" Incorporate subtle {cultural} influences in the styling."

    if category in CLIMATE_CATEGORIES:
        adjustment = CLIMATE_ADJUSTMENTS.get(context.climate.lower(), {}).get(photo_config.time)
        if adjustment:
            prompt += f" {adjustment}"

    return prompt


def _apply_color_palette(prompt: str, phrase: str) -> str:
    lowered = prompt.lower()
    for anchor in COLOR_ANCHORS:
        index = lowered.find(anchor)
        if index != -1:
            return f"{prompt[:index]}in a palette of {phrase}, {prompt[index:]}"
    return f"{prompt} Styled in a palette of {phrase}."


def anti_repetition_tokens(category: Category, variation_seed: Optional[int] = None) -> list[str]:
    """Return the 2 anti-repetition tokens for a category.

    Without a seed these are the first two base tokens. With a seed the
    first comes from the base list and the second from the variation list,
    each indexed by the seed modulo the list length.
    """
    base = ANTI_REPETITION_BASE.get(category, ["unique styling", "creative composition"])
    variations = ANTI_REPETITION_VARIATIONS.get(category)

    if variation_seed is None or not variations:
        return base[:2]
    return [base[variation_seed % len(base)], variations[variation_seed % len(variations)]]


def _add_quality_tokens(prompt: str, category: Category, variation_seed: Optional[int]) -> str:
    tokens = anti_repetition_tokens(category, variation_seed)
    if tokens:
        prompt += f" {', '.join(tokens)}."
    guidance = COMPOSITION_GUIDANCE.get(category)
    if guidance:
        prompt += f" {guidance}"
    return prompt


def extract_quality_tokens(prompt: str) -> list[str]:
    return [token for marker, token in QUALITY_TOKEN_MARKERS if marker in prompt]


def generate_prompt(
    photo_config: PhotoConfiguration, options: Optional[PromptOptions] = None
) -> GeneratedPrompt:
    """Assemble the generation prompt for one photo.

    Args:
        photo_config: The photo to describe.
        options: Location, colour, theme and quality options.

    Returns:
        GeneratedPrompt with the whitespace-normalised prompt and metadata.

    Raises:
        TemplateNotFoundError: When the category has no registered template.
    """
    options = options or PromptOptions()
    template = get_template(photo_config.category)
    data = build_template_data(photo_config, options)

    prompt = template(data)

    if options.location_context is not None:
        prompt = _enhance_with_location(prompt, photo_config, options.location_context)

    color_phrase = None
    palette = options.color_palette or (
        options.onboarding.explicit_color_palette() if options.onboarding else None
    )
    if palette and palette.strip():
        color_phrase = pick(color_phrases_for(palette), options.color_seed)
        prompt = _apply_color_palette(prompt, color_phrase)

    if options.quality_enhancements:
        prompt = _add_quality_tokens(prompt, photo_config.category, options.variation_seed)

    prompt = " ".join(prompt.split())

    return GeneratedPrompt(
        prompt=prompt,
        metadata=PromptMetadata(
            category=photo_config.category,
            sub_type=photo_config.sub_type,
            elements_included=photo_config.elements.included_kinds(),
            location_enhanced=options.location_context is not None,
            quality_tokens=extract_quality_tokens(prompt),
            color_phrase=color_phrase,
        ),
    )


def generate_batch_prompts(
    photo_configs: list[PhotoConfiguration], options: Optional[PromptOptions] = None
) -> list[GeneratedPrompt]:
    """Generate one prompt per configuration, preserving order.

    When a base ``variation_seed`` is given, photo ``i`` uses
    ``variation_seed + i`` so siblings get different tokens.
    """
    options = options or PromptOptions()
    prompts = []
    for index, config in enumerate(photo_configs):
        seed = options.variation_seed + index if options.variation_seed is not None else None
        prompts.append(generate_prompt(config, options.model_copy(update={"variation_seed": seed})))
    return prompts


def generate_variation_seed(onboarding: OnboardingData) -> int:
    """Derive a variation seed from the palette string length and guest count."""
    palette = onboarding.explicit_color_palette() or ""
    return len(palette) + (onboarding.guest_count or 0)


def _options_from_onboarding(
    onboarding: Union[OnboardingData, dict, None],
    location_context: Optional[LocationContext],
) -> PromptOptions:
    data = OnboardingData.coerce(onboarding)
    return PromptOptions(
        location_context=location_context,
        quality_enhancements=True,
        variation_seed=generate_variation_seed(data),
        color_palette=extract_color_palette(data),
        themes=data.themes_list(),
        onboarding=data,
    )


def generate_batch_prompts_with_onboarding(
    photo_configs: list[PhotoConfiguration],
    onboarding: Union[OnboardingData, dict, None],
    location_context: Optional[LocationContext] = None,
) -> list[GeneratedPrompt]:
    """Generate prompts with palette, themes and variation seed taken from onboarding."""
    return generate_batch_prompts(photo_configs, _options_from_onboarding(onboarding, location_context))


def generate_prompts_with_location(
    photo_configs: list[PhotoConfiguration],
    location_context: LocationContext,
    onboarding: Union[OnboardingData, dict, None],
) -> list[GeneratedPrompt]:
    """Generate prompts enhanced with location context."""
    logger.debug("Generating prompts with location context for %s", location_context.name)
    return generate_batch_prompts(photo_configs, _options_from_onboarding(onboarding, location_context))
