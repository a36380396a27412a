"""Error codes, the API error envelope, and the exception hierarchy.

Every failure raised inside the tour and research pipelines derives from
``TourGuideError``. Route handlers translate any exception into the uniform
``{"error": {"code": ..., "message": ...}}`` envelope with HTTP 500.
"""

from enum import Enum

from pydantic import BaseModel


class ErrorCode(str, Enum):
    """Error codes surfaced in API error envelopes."""

    TOUR_GENERATION_FAILED = "TOUR_GENERATION_FAILED"
    GET_TOURS_FAILED = "GET_TOURS_FAILED"
    RESEARCH_FAILED = "RESEARCH_FAILED"
    AUDIO_GENERATION_FAILED = "AUDIO_GENERATION_FAILED"
    INVALID_REQUEST = "INVALID_REQUEST"
    INTERNAL_ERROR = "INTERNAL_ERROR"


class AppError(BaseModel):
    """Body of the ``error`` key in an error response."""

    code: ErrorCode
    message: str


class ErrorResponse(BaseModel):
    error: AppError


class TourGuideError(Exception):
    """Base class for all domain errors."""


class InputMissingError(TourGuideError):
    """A required request field was absent or blank."""


class ConfigurationError(TourGuideError):
    """A required setting (API key, store URL) is not configured."""


class CityNotFoundError(TourGuideError):
    """The geocoding provider returned no results."""

    def __init__(self, message: str = "City not found") -> None:
        super().__init__(message)


class NoAttractionsFoundError(TourGuideError):
    """The places provider returned an empty result set."""

    def __init__(self, message: str = "No tourist attractions found for this city") -> None:
        super().__init__(message)


class NoSuitableAttractionsError(TourGuideError):
    """No candidate survived ranking and detail lookup."""

    def __init__(
        self, message: str = "No suitable attractions found for tour generation"
    ) -> None:
        super().__init__(message)


class UpstreamError(TourGuideError):
    """An external provider failed (HTTP error, network error, bad status)."""

    def __init__(self, provider: str, message: str) -> None:
        self.provider = provider
        super().__init__(f"{provider}: {message}")


class PersistenceError(TourGuideError):
    """A backing-store operation failed."""

    def __init__(self, operation: str, detail: str) -> None:
        self.operation = operation
        self.detail = detail
        super().__init__(f"Failed to {operation}: {detail}")


class TourGenerationError(TourGuideError):
    """Tour generation stopped at ``stage``; ``reason`` is the original error."""

    def __init__(self, stage: str, reason: Exception) -> None:
        self.stage = stage
        self.reason = reason
        super().__init__(str(reason))
