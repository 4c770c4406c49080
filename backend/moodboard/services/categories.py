"""Static category table, element pools and helper pools.

Definitions are validated at import time, so a malformed table fails fast
with a pydantic ``ValidationError`` instead of producing odd scenes later.
"""
from moodboard.core.errors import UnknownCategoryError
from moodboard.models.scene import Category, CategoryDefinition, ElementKind

_R = "required"
_O = "optional"


def _define(
    category: Category,
    name: str,
    subcategories: list[str],
    visibility: tuple[str, str, str, str],
    probabilities: tuple[float, float, float, float],
) -> CategoryDefinition:
    kinds = list(ElementKind)
    return CategoryDefinition(
        name=name,
        subcategories=subcategories,
        visibility=dict(zip(kinds, visibility)),
        probabilities=dict(zip(kinds, probabilities)),
        template_key=category,
    )


CATEGORY_DEFINITIONS: dict[Category, CategoryDefinition] = {
    Category.ceremony: _define(
        Category.ceremony,
        "Ceremony",
        [
            "circle floral arch",
            "asymmetrical floral arch",
            "grounded meadow arch",
            "cross arch",
            "chuppah arch",
            "mandap arch",
            "petal aisle",
            "lantern aisle",
            "candle aisle",
            "greenery runner aisle",
            "fabric drape aisle",
        ],
        (_R, _O, _O, _R),
        (0.90, 0.20, 0.15, 0.85),
    ),
    Category.reception_ballroom: _define(
        Category.reception_ballroom,
        "Reception / Ballroom",
        [
            "panoramic room view",
            "vignette corners",
            "ceiling decor focus",
            "stage backdrop",
            "chandelier ceiling",
            "string lights ceiling",
            "hanging florals ceiling",
            "fabric drape ceiling",
            "floral doorway entrance",
            "staircase entrance",
            "statement sign entrance",
        ],
        (_R, _R, _R, _R),
        (0.80, 0.85, 0.80, 0.80),
    ),
    Category.reception_table: _define(
        Category.reception_table,
        "Reception Table",
        [
            "low compact centerpieces",
            "tall stand centerpieces",
            "bud-vase cluster centerpieces",
            "candles-only centerpieces",
            "mixed greenery centerpieces",
            "silver place settings",
            "gold place settings",
            "modern matte place settings",
            "crystal glassware",
            "round table shape",
            "long banquet table",
            "oval table",
            "mirrored table",
            "marble table",
        ],
        (_R, _R, _R, _O),
        (0.90, 1.00, 0.90, 0.50),
    ),
    Category.wedding_cake: _define(
        Category.wedding_cake,
        "Wedding Cake",
        [
            "3 tier cake",
            "4 tier cake",
            "5 tier cake",
            "smooth fondant finish",
            "textured buttercream finish",
            "pressed florals finish",
            "metallic accents finish",
            "dessert table display",
            "cake pedestal display",
            "floral base display",
            "candle ring display",
        ],
        (_R, _O, _O, _O),
        (0.70, 0.50, 0.40, 0.10),
    ),
    Category.photo_booth: _define(
        Category.photo_booth,
        "Photo Booth / Photo Corner",
        [
            "floral wall backdrop",
            "neon sign backdrop",
            "hedge backdrop",
            "fabric drape backdrop",
            "geometric panel backdrop",
            "minimal chic props",
            "fun signs props",
            "vintage props",
            "no props",
            "softbox lighting",
            "string lights lighting",
            "neon glow lighting",
        ],
        (_O, _O, _O, _O),
        (0.40, 0.25, 0.25, 0.20),
    ),
    Category.decorative_details: _define(
        Category.decorative_details,
        "Decorative Details",
        [
            "invitation stationery",
            "menu stationery",
            "place card stationery",
            "vow book stationery",
            "candle cluster objects",
            "matchbook objects",
            "favor box objects",
            "napkin ribbon objects",
            "macro ring shot",
            "tray styling rings",
            "soft fabric base rings",
        ],
        (_O, _O, _O, _O),
        (0.30, 0.10, 0.20, 0.05),
    ),
    Category.couple_entrance: _define(
        Category.couple_entrance,
        "Couple Entrance",
        [
            "floral install doorway",
            "arch doorway",
            "draped curtain doorway",
            "lantern aisle path",
            "sparkler style path",
            "LED tunnel path",
            "vintage car vehicle",
            "boat vehicle",
            "golf cart vehicle",
        ],
        (_O, _O, _O, _O),
        (0.50, 0.10, 0.15, 0.25),
    ),
    Category.venue_aerial: _define(
        Category.venue_aerial,
        "Venue Aerial / Grounds",
        [
            "ceremonial layout aerial",
            "tented reception aerial",
            "terrace aerial",
            "courtyard aerial",
            "beachfront aerial",
            "rooftop aerial",
            "golden hour time",
            "blue hour time",
            "night lights time",
            "top-down grid composition",
            "45° sweep composition",
            "wide panorama composition",
        ],
        (_O, _O, _O, _O),
        (0.25, 0.35, 0.25, 0.30),
    ),
    Category.lighting_atmosphere: _define(
        Category.lighting_atmosphere,
        "Lighting & Atmosphere",
        [
            "string lights lighting",
            "chandelier lighting",
            "lantern lighting",
            "candle lighting",
            "neon text lighting",
            "romantic glow mood",
            "modern contrast mood",
            "whimsical fairy-lights mood",
        ],
        (_O, _O, _O, _O),
        (0.25, 0.20, 0.15, 0.15),
    ),
    Category.traditions_rituals: _define(
        Category.traditions_rituals,
        "Traditions & Rituals",
        [
            "vow exchange ritual",
            "ring signing ritual",
            "unity ceremony ritual",
            "tea ceremony ritual",
            "first dance ritual",
            "cultural dance ritual",
        ],
        (_O, _O, _O, _O),
        (0.35, 0.10, 0.10, 0.25),
    ),
}

# Relative likelihood of each category being chosen for a scene.
CATEGORY_WEIGHTS: dict[Category, float] = {
    Category.ceremony: 1.2,
    Category.reception_ballroom: 1.1,
    Category.reception_table: 1.0,
    Category.wedding_cake: 0.8,
    Category.photo_booth: 0.7,
    Category.decorative_details: 0.9,
    Category.couple_entrance: 0.6,
    Category.venue_aerial: 0.5,
    Category.lighting_atmosphere: 0.8,
    Category.traditions_rituals: 0.7,
}

ELEMENT_POOLS: dict[ElementKind, list[str]] = {
    ElementKind.flowers: [
        "white roses",
        "garden roses",
        "peonies (pastel)",
        "orchids (tropical)",
        "hydrangeas (blue)",
        "lavender + eucalyptus",
        "tulips",
        "wildflower mix",
        "lilies",
        "protea + tropical foliage",
    ],
    ElementKind.tables: [
        "round classic",
        "long banquet wood",
        "oval modern",
        "mirrored top",
        "marble top",
        "minimalist glass-metal",
        "rustic plank",
        "lounge-height cocktail",
    ],
    ElementKind.linens: [
        "ivory cotton",
        "natural beige linen",
        "deep burgundy velvet",
        "champagne satin",
        "romantic lace",
        "matte black",
        "pastel floral print",
        "navy",
        "bare table + colored runner",
    ],
    ElementKind.chairs: [
        "gold Chiavari",
        "clear ghost chairs",
        "rustic wood with white cushion",
        "black metal minimalist",
        "velvet upholstered (green/blue)",
        "benches",
        "white folding",
    ],
}

HELPER_POOLS: dict[str, list[str]] = {
    "environments": [
        "garden courtyard",
        "beachfront terrace",
        "rooftop city view",
        "historic ballroom",
        "vineyard",
        "forest clearing",
    ],
    "times": [
        "golden hour",
        "blue hour",
        "candlelit night",
        "bright daytime",
    ],
    "aisle_deco": [
        "petals",
        "lanterns",
        "candles",
        "greenery runners",
        "fabric drape",
    ],
    "ceiling_deco": [
        "chandeliers",
        "string lights",
        "hanging florals",
        "fabric drape",
    ],
    "centerpiece_styles": [
        "low compact",
        "tall stands",
        "bud-vase cluster",
        "candles-only",
    ],
    "place_settings": [
        "silver",
        "gold",
        "matte black",
        "modern crystal",
    ],
    "backdrops": [
        "floral wall",
        "neon sign",
        "hedge",
        "draped fabric",
        "geometric panel",
    ],
    "lighting_options": [
        "string lights",
        "lanterns",
        "chandeliers",
        "neon text",
    ],
}


def get_category(category: Category | str) -> CategoryDefinition:
    """Look up a category definition by enum member or key.

    Raises:
        UnknownCategoryError: When the key is not in the category table.
    """
    try:
        return CATEGORY_DEFINITIONS[Category(category)]
    except (ValueError, KeyError) as exc:
        raise UnknownCategoryError(category) from exc
