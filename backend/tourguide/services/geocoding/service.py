"""City geocoding via the Google Geocoding API.

Resolves a free-text city name (plus an optional country hint) to a
canonical locality, country, coordinates, and formatted address.
There is no retry: a provider error surfaces as a single failure.
"""

import logging
from abc import ABC, abstractmethod
from typing import Any

import httpx

from tourguide.models import (
    CityNotFoundError,
    Coordinates,
    GeoLocation,
    UpstreamError,
)

logger = logging.getLogger(__name__)

UNKNOWN_COUNTRY = "Unknown"


class GeocodingService(ABC):
    """Abstract base class for city geocoders."""

    @abstractmethod
    async def resolve(self, city_name: str, country: str | None = None) -> GeoLocation:
        """Resolve a city name to a ``GeoLocation``.

        Args:
            city_name: Free-text city name.
            country: Optional country hint appended to the query.

        Raises:
            CityNotFoundError: The provider returned zero results.
            UpstreamError: The provider or network failed.
        """
        pass


class GoogleGeocodingService(GeocodingService):
    """Google Geocoding API implementation."""

    GEOCODE_URL = "https://maps.googleapis.com/maps/api/geocode/json"

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

    @staticmethod
    def build_query(city_name: str, country: str | None = None) -> str:
        """Concatenate city and optional country into one address query."""
        return f"{city_name}, {country}" if country else city_name

    async def resolve(self, city_name: str, country: str | None = None) -> GeoLocation:
        query = self.build_query(city_name, country)
        logger.info(f"[GEO] Geocoding '{query}'")

        try:
            async with self._client() as client:
                response = await client.get(
                    self.GEOCODE_URL,
                    params={"address": query, "key": self._api_key},
                )
                response.raise_for_status()
                data = response.json()
        except httpx.HTTPError as e:
            raise UpstreamError("geocoding", f"{type(e).__name__}: {e}") from e

        status = data.get("status", "OK")
        results = data.get("results") or []

        if status not in ("OK", "ZERO_RESULTS"):
            message = data.get("error_message") or status
            raise UpstreamError("geocoding", message)

        if not results:
            logger.info(f"[GEO] No results for '{query}'")
            raise CityNotFoundError()

        location = self.parse_result(results[0], city_name, country)
        logger.info(
            f"[GEO] {city_name} -> {location.locality}, {location.country} "
            f"({location.coordinates.lat:.4f}, {location.coordinates.lng:.4f})"
        )
        return location

    @staticmethod
    def parse_result(
        result: dict[str, Any], city_name: str, country: str | None = None
    ) -> GeoLocation:
        """Extract locality, country and coordinates from one geocode result.

        The locality falls back to the requested name and the country to the
        caller's hint (then ``"Unknown"``) when the matching address
        component type is absent.
        """
        locality = None
        detected_country = None
        for component in result.get("address_components", []):
            types = component.get("types", [])
            if "locality" in types and locality is None:
                locality = component.get("long_name")
            elif "country" in types and detected_country is None:
                detected_country = component.get("long_name")

        geometry = result.get("geometry", {}).get("location")
        if not geometry:
            raise UpstreamError("geocoding", "result has no geometry")

        return GeoLocation(
            locality=locality or city_name,
            country=detected_country or country or UNKNOWN_COUNTRY,
            coordinates=Coordinates(lat=float(geometry["lat"]), lng=float(geometry["lng"])),
            formatted_address=result.get("formatted_address", city_name),
        )
