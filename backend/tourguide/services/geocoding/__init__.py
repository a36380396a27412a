"""City geocoding (Google Geocoding API)."""

from .service import UNKNOWN_COUNTRY, GeocodingService, GoogleGeocodingService

__all__ = [
    "UNKNOWN_COUNTRY",
    "GeocodingService",
    "GoogleGeocodingService",
]
