"""Core data models for the virtual tour guide.

Pydantic models for coordinates, provider place records, and the three
persisted entities (City, TourRoute, TourStop) plus the summary returned
after a tour is generated.

Persisted rows keep the store's snake_case column names. Models that are
returned directly to the client use camelCase aliases.
"""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


class Coordinates(BaseModel):
    """Geographic coordinates with validation.

    Latitude must be between -90 and 90 degrees.
    Longitude must be between -180 and 180 degrees.
    """

    lat: float = Field(..., ge=-90, le=90, description="Latitude in degrees")
    lng: float = Field(..., ge=-180, le=180, description="Longitude in degrees")


class GeoLocation(BaseModel):
    """A city resolved by the geocoding provider."""

    locality: str = Field(..., description="Canonical locality name")
    country: str = Field(..., description="Country long name, or the caller's hint")
    coordinates: Coordinates
    formatted_address: str = ""


class PlaceCandidate(BaseModel):
    """A single row from a nearby-search response."""

    place_id: str = Field(..., min_length=1)
    name: str
    rating: Optional[float] = None
    user_ratings_total: int = Field(default=0, ge=0)
    types: list[str] = Field(default_factory=list)
    vicinity: Optional[str] = None


class PlaceDetails(BaseModel):
    """Per-place detail record used for content synthesis."""

    place_id: str
    name: str
    formatted_address: str = ""
    coordinates: Coordinates
    types: list[str] = Field(default_factory=list)
    rating: Optional[float] = None
    user_ratings_total: int = Field(default=0, ge=0)
    opening_hours: Optional[dict] = None
    website: Optional[str] = None
    formatted_phone_number: Optional[str] = None


class TourStopDraft(BaseModel):
    """A synthesized stop, not yet attached to a route."""

    name: str
    category: str
    coordinates: Coordinates
    address: str
    description: str
    audio_script: str
    duration_minutes: int = Field(..., ge=0)
    tips: list[str] = Field(default_factory=list)
    stop_order: int = Field(..., ge=1, description="1-based position within the route")
    rating: Optional[float] = None
    total_ratings: Optional[int] = None


class TourStop(TourStopDraft):
    """A persisted stop row."""

    id: int
    route_id: int
    audio_url: Optional[str] = None
    created_at: Optional[datetime] = None


class TourRouteDraft(BaseModel):
    """Descriptive fields of a route; rewritten on every regeneration."""

    name: str
    description: str
    duration: str
    difficulty: str


class TourRoute(TourRouteDraft):
    """A persisted route row, optionally carrying its ordered stops."""

    id: int
    city_id: int
    created_at: Optional[datetime] = None
    tour_stops: list[TourStop] = Field(default_factory=list)


class CityDraft(BaseModel):
    """City fields written on first generation for a (name, country) pair."""

    name: str
    country: str
    description: str
    coordinates: Coordinates
    timezone: str = "UTC"


class City(CityDraft):
    """A persisted city row, optionally carrying its routes."""

    id: int
    created_at: Optional[datetime] = None
    tour_routes: list[TourRoute] = Field(default_factory=list)


class SavedTour(BaseModel):
    """Identifiers produced by a successful persistence step."""

    city_id: int
    route_id: int
    stop_count: int
    city_created: bool = False
    route_replaced: bool = False


class CityTours(BaseModel):
    """A city with all of its routes and their ordered stops."""

    model_config = ConfigDict(populate_by_name=True)

    city: City
    total_routes: int = Field(..., alias="totalRoutes")
    total_stops: int = Field(..., alias="totalStops")


class TourGenerationResult(BaseModel):
    """Summary returned after a tour has been generated and stored."""

    model_config = ConfigDict(populate_by_name=True)

    city_id: int = Field(..., alias="cityId")
    route_id: int = Field(..., alias="routeId")
    city_name: str = Field(..., alias="cityName")
    country: str
    coordinates: Coordinates
    tour_stops: int = Field(..., ge=1, alias="tourStops")
    message: str
