"""Attraction ranking."""

from .service import MAX_STOPS, MIN_RATING, is_qualified, quality_score, rank_attractions

__all__ = [
    "MAX_STOPS",
    "MIN_RATING",
    "is_qualified",
    "quality_score",
    "rank_attractions",
]
