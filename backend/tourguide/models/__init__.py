"""Data models for the virtual tour guide."""

from .core import (
    City,
    CityDraft,
    CityTours,
    Coordinates,
    GeoLocation,
    PlaceCandidate,
    PlaceDetails,
    SavedTour,
    TourGenerationResult,
    TourRoute,
    TourRouteDraft,
    TourStop,
    TourStopDraft,
)
from .errors import (
    AppError,
    CityNotFoundError,
    ConfigurationError,
    ErrorCode,
    ErrorResponse,
    InputMissingError,
    NoAttractionsFoundError,
    NoSuitableAttractionsError,
    PersistenceError,
    TourGenerationError,
    TourGuideError,
    UpstreamError,
)
from .research import BriefingInsights, CityBriefing, CityInsights, InsightsSource

__all__ = [
    # Core
    "City",
    "CityDraft",
    "CityTours",
    "Coordinates",
    "GeoLocation",
    "PlaceCandidate",
    "PlaceDetails",
    "SavedTour",
    "TourGenerationResult",
    "TourRoute",
    "TourRouteDraft",
    "TourStop",
    "TourStopDraft",
    # Errors
    "AppError",
    "CityNotFoundError",
    "ConfigurationError",
    "ErrorCode",
    "ErrorResponse",
    "InputMissingError",
    "NoAttractionsFoundError",
    "NoSuitableAttractionsError",
    "PersistenceError",
    "TourGenerationError",
    "TourGuideError",
    "UpstreamError",
    # Research
    "BriefingInsights",
    "CityBriefing",
    "CityInsights",
    "InsightsSource",
]
