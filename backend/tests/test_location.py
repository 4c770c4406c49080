"""Tests for the location cache and LocationContextService."""
from unittest.mock import MagicMock, patch

import httpx
import pytest

from moodboard.models.location import LocationContext
from moodboard.services.location import (
    LocationCache,
    LocationContextService,
    fallback_destination,
    normalize_location,
    parse_location_description,
)


class FakeClock:
    def __init__(self, now: float = 1_000.0) -> None:
        self.now = now

    def __call__(self) -> float:
        return self.now


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def cache(clock: FakeClock) -> LocationCache:
    return LocationCache(ttl_seconds=60, clock=clock)


def _mock_http(mock_client_cls: MagicMock, payload: dict) -> MagicMock:
    client = mock_client_cls.return_value.__enter__.return_value
    client.get.return_value.json.return_value = payload
    return client


# ---------------------------------------------------------------------------
# LocationCache
# ---------------------------------------------------------------------------

class TestLocationCache:
    def test_normalize_location(self) -> None:
        assert normalize_location("  Paris, France! ") == "paris_france"
        assert normalize_location("Napa   Valley") == "napa_valley"

    def test_set_and_get_by_normalised_key(self, cache: LocationCache) -> None:
        context = LocationContext(name="Paris")
        cache.set("Paris, France", context)
        assert cache.get("paris france") is context

    def test_expired_entry_is_dropped(self, cache: LocationCache, clock: FakeClock) -> None:
        cache.set("Bali", LocationContext(name="Bali"))
        clock.now += 60

        assert cache.get("Bali") is None
        assert len(cache) == 0

    def test_clear_expired(self, cache: LocationCache, clock: FakeClock) -> None:
        cache.set("Bali", LocationContext(name="Bali"))
        clock.now += 30
        cache.set("Miami", LocationContext(name="Miami"))
        clock.now += 40

        assert cache.clear_expired() == 1
        assert cache.stats()["entries"] == ["miami"]

    def test_stats(self, cache: LocationCache, clock: FakeClock) -> None:
        cache.set("Bali", LocationContext(name="Bali"))
        clock.now += 1
        cache.set("Miami", LocationContext(name="Miami"))

        stats = cache.stats()
        assert stats["size"] == 2
        assert stats["oldest"] == "bali"

    def test_empty_stats(self, cache: LocationCache) -> None:
        assert cache.stats() == {"size": 0, "entries": [], "oldest": None}


# ---------------------------------------------------------------------------
# Parsing and fallbacks
# ---------------------------------------------------------------------------

class TestParsing:
    def test_parse_description(self) -> None:
        parsed = parse_location_description("A historic town with a castle and a temperate climate.")

        assert parsed["architecture_style"] == "Classic elegance"
        assert parsed["popular_venues"] == ["Historic castles"]
        assert parsed["cultural_elements"] == ["Local traditions", "Historic traditions"]
        assert parsed["climate"] == "temperate"

    def test_parse_architecture_keyword(self) -> None:
        parsed = parse_location_description("Famous for Victorian terraces and beaches along the coast")
        assert parsed["architecture_style"] == "Victorian grandeur and historic charm"
        assert "Beachfront venues" in parsed["popular_venues"]

    def test_parse_defaults(self) -> None:
        parsed = parse_location_description("Quiet place.")
        assert parsed["popular_venues"] == ["Traditional venues", "Historic locations"]
        assert parsed["climate"] == "seasonal"

    @pytest.mark.parametrize(
        "location,climate",
        [
            ("Santorini", "mediterranean"),
            ("Ubud, Bali", "tropical"),
            ("Napa Valley, California", "mediterranean"),
            ("Lyon, France", "temperate"),
            ("Reykjavik", "seasonal"),
        ],
    )
    def test_fallback_destination(self, location: str, climate: str) -> None:
        assert fallback_destination(location)["climate"] == climate


# ---------------------------------------------------------------------------
# LocationContextService
# ---------------------------------------------------------------------------

class TestLocationContextService:
    def test_empty_location_raises(self, cache: LocationCache) -> None:
        service = LocationContextService(cache)
        with pytest.raises(ValueError):
            service.get_location_context("   ")

    def test_known_destination_overrides_parsed_values(self, cache: LocationCache) -> None:
        service = LocationContextService(cache, timeout_s=2.0)
        with patch("moodboard.services.location.httpx.Client") as mock_client_cls:
            client = _mock_http(
                mock_client_cls,
                {"title": "Paris", "extract": "Paris is a modern city with museums and a temperate climate."},
            )
            context = service.get_location_context("Paris, France")

        mock_client_cls.assert_called_once_with(timeout=2.0)
        assert "Paris%2C%20France" in client.get.call_args.args[0]
        assert context.architecture_style == "Haussmann elegance and Gothic cathedrals"
        assert context.climate == "temperate"
        assert context.description.startswith("Paris is a modern city")
        assert context.search_keywords[:2] == ["Paris, France", "Paris"]
        assert context.cached_at

    def test_unknown_location_uses_parsed_summary(self, cache: LocationCache) -> None:
        service = LocationContextService(cache)
        with patch("moodboard.services.location.httpx.Client") as mock_client_cls:
            _mock_http(
                mock_client_cls,
                {"title": "Smalltown", "extract": "A historic town with a castle and a temperate climate."},
            )
            context = service.get_location_context("Smalltown")

        assert context.architecture_style == "Classic elegance"
        assert context.popular_venues == ["Historic castles"]
        assert context.climate == "temperate"

    def test_second_lookup_hits_cache(self, cache: LocationCache) -> None:
        service = LocationContextService(cache)
        with patch("moodboard.services.location.httpx.Client") as mock_client_cls:
            client = _mock_http(mock_client_cls, {"title": "Bali", "extract": "Tropical island."})
            first = service.get_location_context("Bali")
            second = service.get_location_context("bali")

        assert first is second
        assert client.get.call_count == 1

    def test_http_failure_falls_back_to_known_destination(self, cache: LocationCache) -> None:
        service = LocationContextService(cache)
        with patch("moodboard.services.location.httpx.Client") as mock_client_cls:
            client = mock_client_cls.return_value.__enter__.return_value
            client.get.side_effect = httpx.ConnectError("network down")
            context = service.get_location_context("Bali")

        assert context.climate == "tropical"
        assert context.description == "Bali offers unique wedding opportunities."
        assert "Clifftop venues" in context.popular_venues

    def test_invalid_json_falls_back(self, cache: LocationCache) -> None:
        service = LocationContextService(cache)
        with patch("moodboard.services.location.httpx.Client") as mock_client_cls:
            client = mock_client_cls.return_value.__enter__.return_value
            client.get.return_value.json.side_effect = ValueError("not json")
            context = service.get_location_context("Reykjavik")

        assert context.architecture_style == "Local architectural charm"
        assert context.climate == "seasonal"

    def test_lookup_disabled_never_calls_http(self, cache: LocationCache) -> None:
        service = LocationContextService(cache, lookup_enabled=False)
        with patch("moodboard.services.location.httpx.Client") as mock_client_cls:
            context = service.get_location_context("Santorini")

        mock_client_cls.assert_not_called()
        assert context.climate == "mediterranean"
        assert context.name == "Santorini"

    def test_expired_entry_is_refetched(self, cache: LocationCache, clock: FakeClock) -> None:
        service = LocationContextService(cache)
        with patch("moodboard.services.location.httpx.Client") as mock_client_cls:
            client = _mock_http(mock_client_cls, {"title": "Miami", "extract": "Beach city."})
            service.get_location_context("Miami")
            clock.now += 120
            service.get_location_context("Miami")

        assert client.get.call_count == 2
