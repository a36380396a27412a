"""Unit tests for the tour generation pipeline."""

import pytest

from tourguide.models import (
    CityNotFoundError,
    InputMissingError,
    NoSuitableAttractionsError,
    PersistenceError,
    TourGenerationError,
)
from tourguide.services.repository import InMemoryTourRepository
from tourguide.services.tours import TourOrchestrator

from .conftest import FakePlaces, make_candidate, make_details


class TestGenerateTour:
    @pytest.mark.asyncio
    async def test_success(self, geocoder, three_places) -> None:
        repo = InMemoryTourRepository()
        orchestrator = TourOrchestrator(geocoder, three_places, repo)

        result = await orchestrator.generate_tour("  Paris ", "France")

        assert result.city_name == "Paris"
        assert result.country == "France"
        assert result.tour_stops == 3
        assert result.message == "Successfully generated tour for Paris with 3 stops"
        assert geocoder.calls == [("Paris", "France")]

        stops = await repo.list_stops(result.route_id)
        # Ranked order: b (4.2 x ln 10000), c (4.8 x ln 500), a (4.5 x ln 10)
        assert [s.name for s in stops] == ["Place b", "Place c", "Place a"]
        assert [s.duration_minutes for s in stops] == [20, 25, 30]

    @pytest.mark.asyncio
    async def test_camel_case_payload(self, geocoder, three_places) -> None:
        orchestrator = TourOrchestrator(geocoder, three_places, InMemoryTourRepository())
        result = await orchestrator.generate_tour("Paris")
        payload = result.model_dump(by_alias=True, mode="json")
        assert set(payload) == {
            "cityId", "routeId", "cityName", "country", "coordinates", "tourStops", "message",
        }

    @pytest.mark.asyncio
    async def test_stop_order_dense_when_details_fail(self, geocoder) -> None:
        candidates = [
            make_candidate("a", 4.9, 5000),
            make_candidate("b", 4.8, 4000),
            make_candidate("c", 4.7, 3000),
        ]
        places = FakePlaces(
            candidates,
            {"a": make_details("a"), "b": RuntimeError("timeout"), "c": make_details("c")},
        )
        repo = InMemoryTourRepository()
        result = await TourOrchestrator(geocoder, places, repo).generate_tour("Paris")

        stops = await repo.list_stops(result.route_id)
        assert result.tour_stops == 2
        assert [s.stop_order for s in stops] == [1, 2]
        assert [s.duration_minutes for s in stops] == [20, 25]

    @pytest.mark.asyncio
    async def test_regeneration_keeps_identity(self, geocoder, three_places) -> None:
        orchestrator = TourOrchestrator(geocoder, three_places, InMemoryTourRepository())
        first = await orchestrator.generate_tour("Paris")
        second = await orchestrator.generate_tour("Paris")
        assert (first.city_id, first.route_id) == (second.city_id, second.route_id)

        tours = await orchestrator.get_city_tours(city_id=first.city_id)
        assert tours.total_routes == 1
        assert tours.total_stops == 3


class TestGenerateTourFailures:
    @pytest.mark.asyncio
    @pytest.mark.parametrize("name", [None, "", "   "])
    async def test_blank_city_name(self, geocoder, three_places, name) -> None:
        orchestrator = TourOrchestrator(geocoder, three_places, InMemoryTourRepository())
        with pytest.raises(InputMissingError, match="City name is required"):
            await orchestrator.generate_tour(name)
        assert geocoder.calls == []

    @pytest.mark.asyncio
    async def test_city_not_found(self, missing_city_geocoder, three_places) -> None:
        repo = InMemoryTourRepository()
        orchestrator = TourOrchestrator(missing_city_geocoder, three_places, repo)
        with pytest.raises(TourGenerationError) as exc_info:
            await orchestrator.generate_tour("Nowhereville")
        assert exc_info.value.stage == "resolved"
        assert isinstance(exc_info.value.reason, CityNotFoundError)
        assert str(exc_info.value) == "City not found"
        assert await repo.search_cities("Nowhereville") == []

    @pytest.mark.asyncio
    async def test_no_qualifying_candidates(self, geocoder) -> None:
        places = FakePlaces([make_candidate("a", 3.2, 100), make_candidate("b", None, 100)])
        orchestrator = TourOrchestrator(geocoder, places, InMemoryTourRepository())
        with pytest.raises(TourGenerationError) as exc_info:
            await orchestrator.generate_tour("Paris")
        assert exc_info.value.stage == "ranked"
        assert isinstance(exc_info.value.reason, NoSuitableAttractionsError)
        assert places.detail_calls == []

    @pytest.mark.asyncio
    async def test_all_details_fail(self, geocoder) -> None:
        places = FakePlaces([make_candidate("a", 4.5, 100)], {"a": None})
        repo = InMemoryTourRepository()
        orchestrator = TourOrchestrator(geocoder, places, repo)
        with pytest.raises(TourGenerationError) as exc_info:
            await orchestrator.generate_tour("Paris")
        assert exc_info.value.stage == "discovered"
        assert await repo.search_cities("Paris") == []

    @pytest.mark.asyncio
    async def test_detail_fetch_error_is_a_discovery_failure(
        self, geocoder, three_places, monkeypatch, caplog
    ) -> None:
        async def broken_fetch(candidates):
            raise RuntimeError("quota exceeded")

        monkeypatch.setattr(three_places, "fetch_details", broken_fetch)
        orchestrator = TourOrchestrator(geocoder, three_places, InMemoryTourRepository())
        with caplog.at_level("WARNING", logger="tourguide.services.tours.service"):
            with pytest.raises(TourGenerationError) as exc_info:
                await orchestrator.generate_tour("Paris")
        assert exc_info.value.stage == "discovered"
        assert any(
            r.levelname == "WARNING" and "failed at discovered" in r.getMessage()
            for r in caplog.records
        )


    @pytest.mark.asyncio
    async def test_persistence_failure(self, geocoder, three_places, monkeypatch) -> None:
        repo = InMemoryTourRepository()

        async def failing_insert_city(draft):
            raise PersistenceError("create city record", "connection reset")

        monkeypatch.setattr(repo, "insert_city", failing_insert_city)
        orchestrator = TourOrchestrator(geocoder, three_places, repo)
        with pytest.raises(TourGenerationError) as exc_info:
            await orchestrator.generate_tour("Paris")
        assert exc_info.value.stage == "persisted"
        assert str(exc_info.value) == "Failed to create city record: connection reset"
