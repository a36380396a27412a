"""Attraction discovery (Google Places API)."""

from .service import (
    ATTRACTION_TYPE,
    DETAIL_FIELDS,
    SEARCH_RADIUS_METERS,
    GooglePlacesService,
    PlacesService,
)

__all__ = [
    "ATTRACTION_TYPE",
    "DETAIL_FIELDS",
    "SEARCH_RADIUS_METERS",
    "GooglePlacesService",
    "PlacesService",
]
