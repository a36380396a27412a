"""Tour generation pipeline.

    Start -> Resolved -> Discovered -> Ranked -> Synthesized -> Persisted -> Done

Each stage runs once, in order. A failure at any stage stops the run and
raises ``TourGenerationError`` naming the stage that failed.
"""

import logging
from enum import Enum

from tourguide.models import (
    CityTours,
    InputMissingError,
    NoSuitableAttractionsError,
    TourGenerationError,
    TourGenerationResult,
)
from tourguide.services.content import build_city_draft, build_route_draft, synthesize_stops
from tourguide.services.geocoding import GeocodingService
from tourguide.services.places import PlacesService
from tourguide.services.ranking import rank_attractions
from tourguide.services.repository import TourRepository

logger = logging.getLogger(__name__)


class TourStage(str, Enum):
    START = "start"
    RESOLVED = "resolved"
    DISCOVERED = "discovered"
    RANKED = "ranked"
    SYNTHESIZED = "synthesized"
    PERSISTED = "persisted"
    DONE = "done"


# Each stage may only move to the one listed here.
_NEXT_STAGE = {
    TourStage.START: TourStage.RESOLVED,
    TourStage.RESOLVED: TourStage.DISCOVERED,
    TourStage.DISCOVERED: TourStage.RANKED,
    TourStage.RANKED: TourStage.SYNTHESIZED,
    TourStage.SYNTHESIZED: TourStage.PERSISTED,
    TourStage.PERSISTED: TourStage.DONE,
}


class TourOrchestrator:
    """Composes geocoding, discovery, ranking, synthesis and persistence."""

    def __init__(
        self,
        geocoder: GeocodingService,
        places: PlacesService,
        repository: TourRepository,
    ) -> None:
        self._geocoder = geocoder
        self._places = places
        self._repository = repository

    async def generate_tour(
        self, city_name: str | None, country: str | None = None
    ) -> TourGenerationResult:
        """Generate (or regenerate) the tour for a city and persist it.

        Args:
            city_name: Free-text city name; also the stored city name.
            country: Optional country hint for geocoding.

        Returns:
            Identifiers and a summary of the stored tour.

        Raises:
            InputMissingError: ``city_name`` is missing or blank.
            TourGenerationError: Any stage failed; ``stage`` is the stage
                that was being attempted and ``reason`` the original error.
        """
        city_name = (city_name or "").strip()
        country = (country or "").strip() or None
        if not city_name:
            raise InputMissingError("City name is required")

        stage = TourStage.START
        attempting = TourStage.RESOLVED
        logger.info(f"[TOUR] Generating tour for {city_name} (country hint: {country})")

        try:
            location = await self._geocoder.resolve(city_name, country)
            stage = self._advance(stage, attempting, city_name)

            attempting = TourStage.DISCOVERED
            candidates = await self._places.nearby_attractions(location.coordinates)

            attempting = TourStage.RANKED
            ranked = rank_attractions(candidates)
            if not ranked:
                raise NoSuitableAttractionsError()

            # Detail lookups are part of discovery; only ranked places get one.
            attempting = TourStage.DISCOVERED
            details = await self._places.fetch_details(ranked)
            if not details:
                raise NoSuitableAttractionsError()
            stage = self._advance(stage, TourStage.DISCOVERED, city_name)
            stage = self._advance(stage, TourStage.RANKED, city_name)

            attempting = TourStage.SYNTHESIZED
            stops = synthesize_stops(details, city_name)
            stage = self._advance(stage, attempting, city_name)

            attempting = TourStage.PERSISTED
            saved = await self._repository.save_tour(
                build_city_draft(city_name, location.country, location.coordinates),
                build_route_draft(city_name, len(stops)),
                stops,
            )
            stage = self._advance(stage, attempting, city_name)
        except Exception as e:
            logger.warning(
                f"[TOUR] {city_name}: failed at {attempting.value}: {type(e).__name__}: {e}"
            )
            raise TourGenerationError(attempting.value, e) from e

        self._advance(stage, TourStage.DONE, city_name)
        return TourGenerationResult(
            city_id=saved.city_id,
            route_id=saved.route_id,
            city_name=city_name,
            country=location.country,
            coordinates=location.coordinates,
            tour_stops=saved.stop_count,
            message=f"Successfully generated tour for {city_name} with {saved.stop_count} stops",
        )

    async def get_city_tours(
        self,
        city_id: int | None = None,
        city_name: str | None = None,
        country: str | None = None,
    ) -> CityTours | None:
        return await self._repository.get_city_tours(
            city_id=city_id, name=city_name, country=country
        )

    @staticmethod
    def _advance(stage: TourStage, next_stage: TourStage, city_name: str) -> TourStage:
        if _NEXT_STAGE.get(stage) is not next_stage:
            raise RuntimeError(f"Invalid stage transition {stage.value} -> {next_stage.value}")
        logger.debug(f"[TOUR] {city_name}: {stage.value} -> {next_stage.value}")
        return next_stage
