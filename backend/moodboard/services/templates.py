"""Per-category prompt templates.

Every category has exactly one renderer in ``PROMPT_TEMPLATES``. Renderers
return a base paragraph; whitespace is normalised by the prompt assembler.
"""
from typing import Callable, Optional

from moodboard.core.errors import TemplateNotFoundError
from moodboard.models.prompt import TemplateData
from moodboard.models.scene import Category, ElementKind

QUALITY_SUFFIX = (
    "Editorial wedding photography, cinematic lighting, ultra high resolution, "
    "no people, focus on {focus}."
)

TemplateFn = Callable[[TemplateData], str]


def _element(data: TemplateData, kind: ElementKind) -> Optional[str]:
    value = getattr(data, kind.value)
    if not value:
        return None
    if getattr(data, f"{kind.value}_subtle"):
        return f"understated {value}"
    return value


def _clause(template: str, value: Optional[str]) -> str:
    return template.format(value) if value else ""


def _join(*parts: str) -> str:
    return " ".join(part for part in parts if part)


def _ceremony(data: TemplateData) -> str:
    ceremony = f"{data.ceremony_type} wedding ceremony" if data.ceremony_type else "wedding ceremony"
    return _join(
        f"Outdoor {ceremony} with a {data.sub_type}"
        + _clause(" featuring {}", _element(data, ElementKind.flowers))
        + ",",
        _clause("{} aligned in perfect rows,", _element(data, ElementKind.chairs)),
        _clause("aisle decorated with {},", data.aisle_deco),
        f"set in a {data.environment} at {data.time}.",
        QUALITY_SUFFIX.format(focus="the ceremony setup"),
    )


def _reception_ballroom(data: TemplateData) -> str:
    return _join(
        f"Wide view of a {data.environment} reception showing "
        f"{data.ceiling_decor or 'elegant ceiling'} and styled tables,",
        _clause("{} layout,", _element(data, ElementKind.tables)),
        _clause("tables dressed in {},", _element(data, ElementKind.linens)),
        _clause("seating with {},", _element(data, ElementKind.chairs)),
        _clause("floral arrangements of {},", _element(data, ElementKind.flowers)),
        f"golden ambient glow at {data.time}.",
        QUALITY_SUFFIX.format(focus="room ambience"),
    )


def _reception_table(data: TemplateData) -> str:
    return _join(
        f"Close-up of a reception table with {data.sub_type},",
        _clause("{} style arrangement,", data.centerpiece_style),
        _clause("dressed in {},", _element(data, ElementKind.linens)),
        _clause("featuring {},", _element(data, ElementKind.flowers)),
        _clause("on a {} table,", _element(data, ElementKind.tables)),
        _clause("with {} place settings,", data.place_setting),
        f"set in a {data.environment} at {data.time}.",
        QUALITY_SUFFIX.format(focus="tablescape details"),
    )


def _wedding_cake(data: TemplateData) -> str:
    return _join(
        f"Wedding cake display: {data.sub_type},",
        _clause("accented by {},", _element(data, ElementKind.flowers)),
        _clause("set on a {} dessert display,", _element(data, ElementKind.tables)),
        _clause("with {} linen styling,", _element(data, ElementKind.linens)),
        f"photographed in a {data.environment} at {data.time}.",
        QUALITY_SUFFIX.format(focus="the cake"),
    )


def _photo_booth(data: TemplateData) -> str:
    backdrop = data.backdrop
    if backdrop and backdrop.lower() in data.sub_type.lower():
        backdrop = None
    return _join(
        f"Photo corner with a {data.sub_type},",
        _clause("{} backdrop,", backdrop),
        _clause("floral touches in {},", _element(data, ElementKind.flowers)),
        _clause("styled console with {} runner,", _element(data, ElementKind.linens)),
        _clause("subtle {} highlights,", data.lighting),
        f"in a {data.environment} at {data.time}.",
        QUALITY_SUFFIX.format(focus="the photo area"),
    )


def _decorative_details(data: TemplateData) -> str:
    return _join(
        f"Wedding detail styling featuring {data.sub_type},",
        _clause("with {} accents,", _element(data, ElementKind.flowers)),
        _clause("arranged on {} surfaces,", _element(data, ElementKind.linens)),
        _clause("in a {} mood,", " and ".join(data.themes[:2])),
        _clause("styled in {} hues,", " and ".join(data.colors[:3])),
        f"elegant flat lay composition photographed in a {data.environment} at {data.time}.",
        QUALITY_SUFFIX.format(focus="detailed styling"),
    )


def _couple_entrance(data: TemplateData) -> str:
    return _join(
        f"Wedding entrance featuring {data.sub_type},",
        _clause("with {} installations,", _element(data, ElementKind.flowers)),
        _clause("illuminated with {},", data.lighting),
        f"romantic pathway in a {data.environment} at {data.time}.",
        QUALITY_SUFFIX.format(focus="the entrance"),
    )


def _venue_aerial(data: TemplateData) -> str:
    return _join(
        f"Aerial view of wedding {data.sub_type},",
        _clause("with {} visible from above,", _element(data, ElementKind.flowers)),
        _clause("{} arrangement,", _element(data, ElementKind.tables)),
        f"captured in a {data.environment}"
        + _clause(" near {}", data.location)
        + f" at {data.time}.",
        QUALITY_SUFFIX.format(focus="venue layout"),
    )


def _lighting_atmosphere(data: TemplateData) -> str:
    return _join(
        f"Wedding atmosphere featuring {data.sub_type},",
        _clause("with {} in soft focus,", _element(data, ElementKind.flowers)),
        _clause("{} subtly illuminated,", _element(data, ElementKind.tables)),
        f"romantic ambience shot in a {data.environment} at {data.time}.",
        QUALITY_SUFFIX.format(focus="lighting mood"),
    )


def _traditions_rituals(data: TemplateData) -> str:
    return _join(
        f"Wedding {data.sub_type} moment,",
        _clause("honoring {} customs,", data.religion),
        _clause("with {} ceremony elements,", _element(data, ElementKind.flowers)),
        _clause("{} arrangement for guests,", _element(data, ElementKind.chairs)),
        f"meaningful tradition in a {data.environment} at {data.time}.",
        QUALITY_SUFFIX.format(focus="ceremonial elements"),
    )


PROMPT_TEMPLATES: dict[Category, TemplateFn] = {
    Category.ceremony: _ceremony,
    Category.reception_ballroom: _reception_ballroom,
    Category.reception_table: _reception_table,
    Category.wedding_cake: _wedding_cake,
    Category.photo_booth: _photo_booth,
    Category.decorative_details: _decorative_details,
    Category.couple_entrance: _couple_entrance,
    Category.venue_aerial: _venue_aerial,
    Category.lighting_atmosphere: _lighting_atmosphere,
    Category.traditions_rituals: _traditions_rituals,
}


def get_template(category: Category) -> TemplateFn:
    """Return the renderer registered for ``category``.

    Raises:
        TemplateNotFoundError: When no renderer is registered.
    """
    try:
        return PROMPT_TEMPLATES[category]
    except KeyError as exc:
        raise TemplateNotFoundError(category) from exc


def render_template(data: TemplateData) -> str:
    return get_template(data.category)(data)
