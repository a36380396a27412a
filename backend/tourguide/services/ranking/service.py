"""Attraction ranking by rating and review volume.

score = rating * ln(max(review_count, 1))

The logarithm damps review volume so a handful of five-star reviews does
not outrank a well-known landmark with tens of thousands of 4.2-star
reviews. Ties keep the provider's original order.
"""

import math

from tourguide.models import PlaceCandidate

MIN_RATING = 4.0
MAX_STOPS = 6


def quality_score(candidate: PlaceCandidate) -> float:
    """Return the ranking score for one candidate (0 when unrated)."""
    rating = candidate.rating or 0.0
    return rating * math.log(max(candidate.user_ratings_total, 1))


def is_qualified(candidate: PlaceCandidate, min_rating: float = MIN_RATING) -> bool:
    return candidate.rating is not None and candidate.rating >= min_rating


def rank_attractions(
    candidates: list[PlaceCandidate],
    min_rating: float = MIN_RATING,
    limit: int = MAX_STOPS,
) -> list[PlaceCandidate]:
    """Filter, score and order candidates, keeping at most ``limit``.

    Args:
        candidates: Raw nearby-search candidates in provider order.
        min_rating: Candidates without a rating or below this are dropped.
        limit: Maximum number of candidates returned.

    Returns:
        The qualifying candidates, best first. May be empty; callers treat
        an empty list as a terminal failure.
    """
    qualified = [c for c in candidates if is_qualified(c, min_rating)]
    # sorted() is stable, so equal scores keep provider order
    ranked = sorted(qualified, key=quality_score, reverse=True)
    return ranked[:limit]
