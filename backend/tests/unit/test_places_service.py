"""Unit tests for the places service."""

import httpx
import pytest

from tourguide.models import Coordinates, NoAttractionsFoundError, UpstreamError
from tourguide.services.places import GooglePlacesService

from .conftest import FakePlaces, make_candidate, make_details

CENTER = Coordinates(lat=48.8566, lng=2.3522)


def _service(handler) -> GooglePlacesService:
    return GooglePlacesService("test-key", transport=httpx.MockTransport(handler))


class TestNearbyAttractions:
    @pytest.mark.asyncio
    async def test_sends_radius_and_type(self) -> None:
        seen = {}

        def handler(request: httpx.Request) -> httpx.Response:
            seen.update(request.url.params)
            return httpx.Response(
                200,
                json={
                    "status": "OK",
                    "results": [
                        {"place_id": "p1", "name": "Louvre", "rating": 4.7, "user_ratings_total": 300000},
                        {"name": "No id"},
                    ],
                },
            )

        candidates = await _service(handler).nearby_attractions(CENTER)
        assert seen["radius"] == "10000"
        assert seen["type"] == "tourist_attraction"
        assert seen["location"] == "48.8566,2.3522"
        assert [c.place_id for c in candidates] == ["p1"]
        assert candidates[0].user_ratings_total == 300000

    @pytest.mark.asyncio
    async def test_empty_results(self) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(200, json={"status": "ZERO_RESULTS", "results": []})

        with pytest.raises(NoAttractionsFoundError, match="No tourist attractions found"):
            await _service(handler).nearby_attractions(CENTER)

    @pytest.mark.asyncio
    async def test_provider_error(self) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(200, json={"status": "OVER_QUERY_LIMIT", "results": []})

        with pytest.raises(UpstreamError, match="OVER_QUERY_LIMIT"):
            await _service(handler).nearby_attractions(CENTER)


class TestGetPlaceDetails:
    @pytest.mark.asyncio
    async def test_parses_details(self) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            assert request.url.params["place_id"] == "p1"
            assert "opening_hours" in request.url.params["fields"]
            return httpx.Response(
                200,
                json={
                    "result": {
                        "name": "Louvre",
                        "formatted_address": "Rue de Rivoli, Paris",
                        "geometry": {"location": {"lat": 48.86, "lng": 2.33}},
                        "types": ["museum"],
                        "rating": 4.7,
                        "user_ratings_total": 300000,
                        "website": "https://www.louvre.fr",
                    }
                },
            )

        place = await _service(handler).get_place_details("p1")
        assert place is not None
        assert place.name == "Louvre"
        assert place.types == ["museum"]
        assert place.website == "https://www.louvre.fr"
        assert place.opening_hours is None

    @pytest.mark.asyncio
    async def test_missing_result_is_none(self) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(200, json={"status": "NOT_FOUND"})

        assert await _service(handler).get_place_details("p1") is None

    @pytest.mark.asyncio
    async def test_empty_id_rejected(self) -> None:
        with pytest.raises(ValueError):
            await _service(lambda r: httpx.Response(200, json={})).get_place_details("")

    def test_parse_details_without_geometry(self) -> None:
        assert GooglePlacesService.parse_details("p1", {"name": "Louvre"}) is None


class TestFetchDetails:
    @pytest.mark.asyncio
    async def test_drops_failed_and_incomplete_places(self) -> None:
        candidates = [
            make_candidate("a", 4.5, 100),
            make_candidate("b", 4.5, 100),
            make_candidate("c", 4.5, 100),
        ]
        places = FakePlaces(
            candidates,
            {"a": make_details("a"), "b": RuntimeError("boom"), "c": None},
        )
        details = await places.fetch_details(candidates)
        assert [d.place_id for d in details] == ["a"]
        assert places.detail_calls == ["a", "b", "c"]
