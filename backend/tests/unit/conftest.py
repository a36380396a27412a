"""Shared fakes for unit tests."""

import pytest

from tourguide.models import (
    CityNotFoundError,
    Coordinates,
    GeoLocation,
    PlaceCandidate,
    PlaceDetails,
)
from tourguide.services.geocoding import GeocodingService
from tourguide.services.places import PlacesService


class FakeGeocoder(GeocodingService):
    """Resolves every city to fixed coordinates, or fails on demand."""

    def __init__(self, country: str = "France", error: Exception | None = None) -> None:
        self.country = country
        self.error = error
        self.calls: list[tuple[str, str | None]] = []

    async def resolve(self, city_name: str, country: str | None = None) -> GeoLocation:
        self.calls.append((city_name, country))
        if self.error is not None:
            raise self.error
        return GeoLocation(
            locality=city_name,
            country=self.country,
            coordinates=Coordinates(lat=48.8566, lng=2.3522),
            formatted_address=f"{city_name}, {self.country}",
        )


class FakePlaces(PlacesService):
    """Serves candidates and details from dictionaries.

    ``details`` maps place_id to a PlaceDetails, None (incomplete) or an
    exception to raise.
    """

    def __init__(self, candidates: list[PlaceCandidate], details: dict | None = None) -> None:
        self.candidates = candidates
        self.details = details or {}
        self.detail_calls: list[str] = []

    async def nearby_attractions(self, location, radius=10000, place_type="tourist_attraction"):
        return list(self.candidates)

    async def get_place_details(self, place_id: str):
        self.detail_calls.append(place_id)
        value = self.details.get(place_id)
        if isinstance(value, Exception):
            raise value
        return value


def make_candidate(place_id: str, rating: float | None, reviews: int, name: str | None = None):
    return PlaceCandidate(
        place_id=place_id,
        name=name or f"Place {place_id}",
        rating=rating,
        user_ratings_total=reviews,
        types=["tourist_attraction"],
    )


def make_details(place_id: str, name: str | None = None, **overrides) -> PlaceDetails:
    fields = {
        "place_id": place_id,
        "name": name or f"Place {place_id}",
        "formatted_address": f"{place_id} Main Street",
        "coordinates": Coordinates(lat=48.86, lng=2.34),
        "types": ["tourist_attraction", "establishment"],
        "rating": 4.5,
        "user_ratings_total": 1200,
    }
    fields.update(overrides)
    return PlaceDetails(**fields)


@pytest.fixture
def geocoder() -> FakeGeocoder:
    return FakeGeocoder()


@pytest.fixture
def missing_city_geocoder() -> FakeGeocoder:
    return FakeGeocoder(error=CityNotFoundError())


@pytest.fixture
def three_places() -> FakePlaces:
    candidates = [
        make_candidate("a", 4.5, 10),
        make_candidate("b", 4.2, 10000),
        make_candidate("c", 4.8, 500),
    ]
    return FakePlaces(candidates, {c.place_id: make_details(c.place_id) for c in candidates})
