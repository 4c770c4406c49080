"""Location context lookup with an injectable TTL cache."""
import logging
import re
import time
from datetime import datetime, timezone
from typing import Callable, Optional
from urllib.parse import quote

import httpx

from moodboard.models.location import LocationContext

logger = logging.getLogger(__name__)

WIKIPEDIA_SUMMARY_URL = "https://en.wikipedia.org/api/rest_v1/page/summary/{title}"
DEFAULT_TTL_SECONDS = 7 * 24 * 60 * 60

# (architecture keyword, style description); first match wins.
ARCHITECTURE_STYLES: list[tuple[str, str]] = [
    ("art deco", "Art Deco elegance and modern sophistication"),
    ("victorian", "Victorian grandeur and historic charm"),
    ("colonial", "Colonial architecture and traditional elegance"),
    ("gothic", "Gothic cathedrals and medieval charm"),
    ("modern", "Contemporary design and modern sophistication"),
    ("baroque", "Baroque opulence and classical beauty"),
]

VENUE_KEYWORDS: list[tuple[tuple[str, ...], str]] = [
    (("beach", "coast"), "Beachfront venues"),
    (("mountain", "hill"), "Mountain venues"),
    (("garden", "park"), "Garden venues"),
    (("castle", "palace"), "Historic castles"),
    (("museum", "gallery"), "Cultural venues"),
    (("hotel", "resort"), "Luxury hotels"),
]

CULTURAL_KEYWORDS: list[tuple[tuple[str, ...], str]] = [
    (("wine", "vineyard"), "Wine culture"),
    (("art", "cultural"), "Artistic heritage"),
    (("historic", "heritage"), "Historic traditions"),
]

CLIMATE_KEYWORDS: list[tuple[tuple[str, ...], str]] = [
    (("tropical", "humid"), "tropical"),
    (("mediterranean",), "mediterranean"),
    (("desert", "arid"), "arid"),
    (("temperate",), "temperate"),
]

# Matched as substrings of the lowercased location.
KNOWN_DESTINATIONS: list[tuple[tuple[str, ...], dict]] = [
    (
        ("paris", "france"),
        {
            "architecture_style": "Haussmann elegance and Gothic cathedrals",
            "popular_venues": ["Châteaux", "Historic mansions", "Seine riverboats"],
            "cultural_elements": ["French sophistication", "Wine culture", "Haute cuisine"],
            "climate": "temperate",
        },
    ),
    (
        ("tuscany", "italy"),
        {
            "architecture_style": "Renaissance villas and rustic farmhouses",
            "popular_venues": ["Vineyard estates", "Historic villas", "Olive groves"],
            "cultural_elements": ["Italian romance", "Wine traditions", "Mediterranean lifestyle"],
            "climate": "mediterranean",
        },
    ),
    (
        ("santorini", "greece"),
        {
            "architecture_style": "Whitewashed Cycladic houses and blue domes",
            "popular_venues": ["Caldera terraces", "Clifftop chapels", "Seaside villas"],
            "cultural_elements": ["Greek island hospitality", "Aegean cuisine", "Sunset rituals"],
            "climate": "mediterranean",
        },
    ),
    (
        ("bali", "indonesia"),
        {
            "architecture_style": "Traditional Balinese temples and tropical pavilions",
            "popular_venues": ["Clifftop venues", "Beach resorts", "Rice terrace locations"],
            "cultural_elements": ["Balinese ceremonies", "Tropical flowers", "Spiritual traditions"],
            "climate": "tropical",
        },
    ),
    (
        ("miami", "florida"),
        {
            "architecture_style": "Art Deco and modern beachfront",
            "popular_venues": ["Beach clubs", "Rooftop terraces", "Historic hotels"],
            "cultural_elements": ["Latin influence", "Beach culture", "Vibrant nightlife"],
            "climate": "tropical",
        },
    ),
    (
        ("napa", "california"),
        {
            "architecture_style": "Wine country estates and modern pavilions",
            "popular_venues": ["Vineyards", "Ranch estates", "Garden venues"],
            "cultural_elements": ["Wine culture", "Farm-to-table", "Outdoor lifestyle"],
            "climate": "mediterranean",
        },
    ),
]

GENERIC_DESTINATION: dict = {
    "architecture_style": "Local architectural charm",
    "popular_venues": ["Traditional venues", "Local landmarks"],
    "cultural_elements": ["Regional traditions", "Local customs"],
    "climate": "seasonal",
}


def normalize_location(location: str) -> str:
    """Normalise a location string into a cache key."""
    lowered = re.sub(r"[^a-z0-9\s]", "", location.lower().strip())
    return re.sub(r"\s+", "_", lowered)


class LocationCache:
    """In-memory location cache with a fixed time-to-live.

    Create one per application and pass it to ``LocationContextService``;
    tests build their own instance with a fake clock.
    """

    def __init__(
        self,
        ttl_seconds: float = DEFAULT_TTL_SECONDS,
        clock: Callable[[], float] = time.time,
    ) -> None:
        self.ttl_seconds = ttl_seconds
        self._clock = clock
        # key -> (stored_at, expires_at, context)
        self._entries: dict[str, tuple[float, float, LocationContext]] = {}

    def get(self, location: str) -> Optional[LocationContext]:
        key = normalize_location(location)
        entry = self._entries.get(key)
        if entry is None:
            return None
        if self._clock() >= entry[1]:
            del self._entries[key]
            logger.debug("Expired cache entry removed for %s", location)
            return None
        return entry[2]

    def set(self, location: str, context: LocationContext) -> None:
        now = self._clock()
        self._entries[normalize_location(location)] = (now, now + self.ttl_seconds, context)

    def clear_expired(self) -> int:
        """Drop expired entries and return how many were removed."""
        now = self._clock()
        expired = [key for key, entry in self._entries.items() if now >= entry[1]]
        for key in expired:
            del self._entries[key]
        if expired:
            logger.info("Cleared %d expired location cache entries", len(expired))
        return len(expired)

    def stats(self) -> dict:
        oldest = min(self._entries, key=lambda k: self._entries[k][0], default=None)
        return {"size": len(self._entries), "entries": list(self._entries), "oldest": oldest}

    def __len__(self) -> int:
        return len(self._entries)


def parse_location_description(description: str) -> dict:
    """Infer architecture, venues, cultural elements and climate from free text."""
    desc = description.lower()

    architecture_style = next(
        (style for keyword, style in ARCHITECTURE_STYLES if keyword in desc), "Classic elegance"
    )
    venues = [label for keywords, label in VENUE_KEYWORDS if any(k in desc for k in keywords)]
    cultural = ["Local traditions"] + [
        label for keywords, label in CULTURAL_KEYWORDS if any(k in desc for k in keywords)
    ]
    climate = next(
        (label for keywords, label in CLIMATE_KEYWORDS if any(k in desc for k in keywords)),
        "seasonal",
    )

    return {
        "architecture_style": architecture_style,
        "popular_venues": venues or ["Traditional venues", "Historic locations"],
        "cultural_elements": cultural,
        "climate": climate,
    }


def fallback_destination(location: str) -> dict:
    lowered = location.lower()
    for keywords, data in KNOWN_DESTINATIONS:
        if any(keyword in lowered for keyword in keywords):
            return data
    return GENERIC_DESTINATION


class LocationContextService:
    """Resolves a wedding location to a ``LocationContext``.

    Lookups go cache -> Wikipedia summary -> known-destination table. Known
    destinations take precedence over values parsed from the summary; the
    summary still supplies the description and search keywords.
    """

    def __init__(
        self,
        cache: LocationCache,
        lookup_enabled: bool = True,
        timeout_s: float = 5.0,
    ) -> None:
        self.cache = cache
        self.lookup_enabled = lookup_enabled
        self.timeout_s = timeout_s

    def get_location_context(self, location: str) -> LocationContext:
        """Return the context for ``location``, using the cache when fresh.

        Raises:
            ValueError: When ``location`` is empty.
        """
        if not location or not location.strip():
            raise ValueError("Location is required")

        cached = self.cache.get(location)
        if cached is not None:
            logger.debug("Location cache hit for %s", location)
            return cached

        started = time.perf_counter()
        context = self._aggregate(location.strip())
        logger.info(
            "Location context for %s resolved in %.0fms",
            location,
            (time.perf_counter() - started) * 1000,
        )
        self.cache.set(location, context)
        return context

    def _aggregate(self, location: str) -> LocationContext:
        summary: Optional[dict] = None
        if self.lookup_enabled:
            try:
                summary = self._fetch_wikipedia_summary(location)
            except (httpx.HTTPError, ValueError) as exc:
                logger.warning(
                    "Wikipedia lookup failed for %s: %s",
                    location,
                    exc,
                    extra={"service": "LocationContextService", "error_type": type(exc).__name__},
                )

        description = (summary or {}).get("extract") or ""
        parsed = parse_location_description(description) if description else {}
        known = fallback_destination(location)
        merged = {**GENERIC_DESTINATION, **parsed}
        if known is not GENERIC_DESTINATION:
            merged.update(known)

        title = (summary or {}).get("title")
        keywords = [location, title, *merged["popular_venues"][:2]]

        return LocationContext(
            name=location,
            architecture_style=merged["architecture_style"],
            cultural_elements=list(merged["cultural_elements"]),
            climate=merged["climate"],
            popular_venues=list(merged["popular_venues"]),
            local_traditions=list(merged["cultural_elements"]),
            description=description or f"{location} offers unique wedding opportunities.",
            search_keywords=list(dict.fromkeys(k for k in keywords if k)),
            cached_at=datetime.now(timezone.utc).isoformat(),
        )

    def _fetch_wikipedia_summary(self, location: str) -> dict:
        """Fetch the Wikipedia REST summary for a location.

        Raises:
            httpx.HTTPError: On transport errors or non-2xx responses.
            ValueError: When the body is not JSON.
        """
        url = WIKIPEDIA_SUMMARY_URL.format(title=quote(location, safe=""))
        with httpx.Client(timeout=self.timeout_s) as client:
            response = client.get(
                url,
                headers={"User-Agent": "wedding-moodboard/0.1", "Accept": "application/json"},
                follow_redirects=True,
            )
            response.raise_for_status()
            return response.json()
