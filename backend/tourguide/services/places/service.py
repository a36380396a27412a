"""Attraction discovery via the Google Places API.

Two calls are involved:
1. Nearby Search: tourist attractions within a fixed radius of the city
   center. An empty result set is a terminal failure.
2. Place Details: one call per ranked candidate for the fields content
   synthesis needs. Each call is best-effort; a failed or incomplete
   response drops that single place.

Detail calls run one at a time.
"""

import logging
from abc import ABC, abstractmethod
from typing import Any

import httpx

from tourguide.models import (
    Coordinates,
    NoAttractionsFoundError,
    PlaceCandidate,
    PlaceDetails,
    UpstreamError,
)

logger = logging.getLogger(__name__)

SEARCH_RADIUS_METERS = 10000
ATTRACTION_TYPE = "tourist_attraction"

DETAIL_FIELDS = (
    "name",
    "formatted_address",
    "geometry",
    "types",
    "rating",
    "user_ratings_total",
    "opening_hours",
    "website",
    "formatted_phone_number",
)


class PlacesService(ABC):
    """Abstract base class for attraction discovery."""

    @abstractmethod
    async def nearby_attractions(
        self,
        location: Coordinates,
        radius: int = SEARCH_RADIUS_METERS,
        place_type: str = ATTRACTION_TYPE,
    ) -> list[PlaceCandidate]:
        pass

    @abstractmethod
    async def get_place_details(self, place_id: str) -> PlaceDetails | None:
        pass

    async def fetch_details(self, candidates: list[PlaceCandidate]) -> list[PlaceDetails]:
        """Fetch details for each candidate in order, dropping failures."""
        details: list[PlaceDetails] = []
        for i, candidate in enumerate(candidates):
            try:
                logger.info(f"[PLACES] ({i+1}/{len(candidates)}) Details: {candidate.name}")
                place = await self.get_place_details(candidate.place_id)
            except Exception as e:
                logger.info(f"[PLACES] Dropping {candidate.name}: {type(e).__name__}: {e}")
                continue
            if place is None:
                logger.info(f"[PLACES] Dropping {candidate.name}: incomplete details")
                continue
            details.append(place)
        logger.info(f"[PLACES] Got details for {len(details)}/{len(candidates)} places")
        return details


class GooglePlacesService(PlacesService):
    """Google Places (legacy JSON web service) implementation."""

    NEARBY_URL = "https://maps.googleapis.com/maps/api/place/nearbysearch/json"
    DETAILS_URL = "https://maps.googleapis.com/maps/api/place/details/json"

    def __init__(
        self,
        api_key: str,
        timeout: float = 30.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        if not api_key:
            raise ValueError("Google Maps API key not provided")
        self._api_key = api_key
        self._timeout = timeout
        self._transport = transport

    def _client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(timeout=self._timeout, transport=self._transport)

    async def nearby_attractions(
        self,
        location: Coordinates,
        radius: int = SEARCH_RADIUS_METERS,
        place_type: str = ATTRACTION_TYPE,
    ) -> list[PlaceCandidate]:
        params = {
            "location": f"{location.lat},{location.lng}",
            "radius": radius,
            "type": place_type,
            "key": self._api_key,
        }
        try:
            async with self._client() as client:
                response = await client.get(self.NEARBY_URL, params=params)
                response.raise_for_status()
                data = response.json()
        except httpx.HTTPError as e:
            raise UpstreamError("places", f"{type(e).__name__}: {e}") from e

        status = data.get("status", "OK")
        if status not in ("OK", "ZERO_RESULTS"):
            raise UpstreamError("places", data.get("error_message") or status)

        candidates = [
            candidate
            for candidate in (self.parse_candidate(row) for row in data.get("results") or [])
            if candidate is not None
        ]
        if not candidates:
            raise NoAttractionsFoundError()

        logger.info(f"[PLACES] Nearby search returned {len(candidates)} candidates")
        return candidates

    async def get_place_details(self, place_id: str) -> PlaceDetails | None:
        if not place_id:
            raise ValueError("place_id cannot be empty")

        params = {
            "place_id": place_id,
            "fields": ",".join(DETAIL_FIELDS),
            "key": self._api_key,
        }
        async with self._client() as client:
            response = await client.get(self.DETAILS_URL, params=params)
            response.raise_for_status()
            data = response.json()

        result = data.get("result")
        if not result:
            return None
        return self.parse_details(place_id, result)

    @staticmethod
    def parse_candidate(row: dict[str, Any]) -> PlaceCandidate | None:
        """Convert a nearby-search row; rows without an id are skipped."""
        place_id = row.get("place_id")
        if not place_id:
            return None
        return PlaceCandidate(
            place_id=place_id,
            name=row.get("name", ""),
            rating=row.get("rating"),
            user_ratings_total=row.get("user_ratings_total") or 0,
            types=row.get("types") or [],
            vicinity=row.get("vicinity"),
        )

    @staticmethod
    def parse_details(place_id: str, result: dict[str, Any]) -> PlaceDetails | None:
        """Convert a details ``result``; returns None without name or geometry."""
        location = (result.get("geometry") or {}).get("location")
        name = result.get("name")
        if not location or not name:
            return None
        return PlaceDetails(
            place_id=place_id,
            name=name,
            formatted_address=result.get("formatted_address", ""),
            coordinates=Coordinates(lat=float(location["lat"]), lng=float(location["lng"])),
            types=result.get("types") or [],
            rating=result.get("rating"),
            user_ratings_total=result.get("user_ratings_total") or 0,
            opening_hours=result.get("opening_hours"),
            website=result.get("website"),
            formatted_phone_number=result.get("formatted_phone_number"),
        )
