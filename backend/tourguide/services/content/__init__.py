"""Deterministic stop, route and city content."""

from .service import (
    CATEGORY_BY_TYPE,
    DEFAULT_CATEGORY,
    build_audio_script,
    build_city_draft,
    build_description,
    build_route_draft,
    build_tips,
    categorize,
    estimate_duration,
    synthesize_stop,
    synthesize_stops,
)

__all__ = [
    "CATEGORY_BY_TYPE",
    "DEFAULT_CATEGORY",
    "build_audio_script",
    "build_city_draft",
    "build_description",
    "build_route_draft",
    "build_tips",
    "categorize",
    "estimate_duration",
    "synthesize_stop",
    "synthesize_stops",
]
