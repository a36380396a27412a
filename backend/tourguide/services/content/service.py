"""Deterministic content synthesis for tour stops.

Turns a detailed place record into the narrative fields of a stop:
category label, description, audio-guide script, visitor tips and a
duration estimate. No external calls; identical inputs always produce
identical output.
"""

import math

from tourguide.models import CityDraft, Coordinates, PlaceDetails, TourRouteDraft, TourStopDraft

# Checked in this order; the first type present wins.
CATEGORY_BY_TYPE: tuple[tuple[str, str], ...] = (
    ("museum", "Museum"),
    ("park", "Park"),
    ("place_of_worship", "Religious Site"),
    ("shopping_mall", "Shopping"),
    ("amusement_park", "Entertainment"),
    ("natural_feature", "Natural Landmark"),
    ("establishment", "Landmark"),
)
DEFAULT_CATEGORY = "Attraction"

TIP_CHECK_HOURS = "Check opening hours before visiting"
TIP_WEBSITE = "Visit the official website for more information"
TIP_MUSEUM = "Allow 1-2 hours for your visit"
TIP_PARK = "Great for photos and relaxation"
TIP_ARRIVE_EARLY = "Popular with visitors - arrive early to avoid crowds"

BASE_DURATION_MINUTES = 20
DURATION_STEP_MINUTES = 5

ROUTE_DIFFICULTY = "Easy to Moderate"
DEFAULT_TIMEZONE = "UTC"


def _fmt_rating(rating: float | None) -> str:
    # 4.0 -> "4", 4.5 -> "4.5"
    if rating is None:
        return "unrated"
    return f"{rating:g}"


def categorize(types: list[str]) -> str:
    """Map provider place types to a display category."""
    for place_type, label in CATEGORY_BY_TYPE:
        if place_type in types:
            return label
    return DEFAULT_CATEGORY


def build_description(place: PlaceDetails, category: str, city_name: str) -> str:
    return (
        f"A highly-rated {category.lower()} in {city_name}, known for its "
        f"{_fmt_rating(place.rating)}-star rating from "
        f"{place.user_ratings_total} visitor reviews."
    )


def build_audio_script(place: PlaceDetails, category: str, city_name: str) -> str:
    """Narration read aloud by the audio guide at this stop."""
    return (
        f"Welcome to {place.name}, one of the must-see attractions in {city_name}. "
        f"This {category.lower()} is highly rated by visitors with "
        f"{_fmt_rating(place.rating)} stars from {place.user_ratings_total} reviews. "
        f"Located at {place.formatted_address}, this destination offers a unique "
        f"experience that captures the essence of {city_name}. Take your time to "
        f"explore and appreciate what makes this place special."
    )


def build_tips(place: PlaceDetails) -> list[str]:
    tips: list[str] = []
    if place.opening_hours:
        tips.append(TIP_CHECK_HOURS)
    if place.website:
        tips.append(TIP_WEBSITE)
    if "museum" in place.types:
        tips.append(TIP_MUSEUM)
    if "park" in place.types:
        tips.append(TIP_PARK)
    tips.append(TIP_ARRIVE_EARLY)
    return tips


def estimate_duration(index: int) -> int:
    """Minutes to spend at the stop in 0-based position ``index``."""
    return BASE_DURATION_MINUTES + DURATION_STEP_MINUTES * index


def synthesize_stop(place: PlaceDetails, index: int, city_name: str) -> TourStopDraft:
    """Build the stop at 0-based position ``index`` of the route."""
    category = categorize(place.types)
    return TourStopDraft(
        name=place.name,
        category=category,
        coordinates=place.coordinates,
        address=place.formatted_address,
        description=build_description(place, category, city_name),
        audio_script=build_audio_script(place, category, city_name),
        duration_minutes=estimate_duration(index),
        tips=build_tips(place),
        stop_order=index + 1,
        rating=place.rating,
        total_ratings=place.user_ratings_total,
    )


def synthesize_stops(places: list[PlaceDetails], city_name: str) -> list[TourStopDraft]:
    """Synthesize stops in order; stop_order is 1..N with no gaps."""
    return [synthesize_stop(place, i, city_name) for i, place in enumerate(places)]


def build_city_draft(city_name: str, country: str, coordinates: Coordinates) -> CityDraft:
    return CityDraft(
        name=city_name,
        country=country,
        description=(
            f"Discover the highlights of {city_name}, a vibrant destination in {country}. "
            f"This dynamic tour will take you through the city's most popular "
            f"attractions and landmarks."
        ),
        coordinates=coordinates,
        timezone=DEFAULT_TIMEZONE,
    )


def build_route_draft(city_name: str, stop_count: int) -> TourRouteDraft:
    """Route fields; the duration range scales with the number of stops."""
    low = math.ceil(stop_count * 0.5)
    high = math.ceil(stop_count * 0.7)
    return TourRouteDraft(
        name=f"{city_name} Highlights Tour",
        description=(
            f"Explore the best of {city_name} with this comprehensive tour of "
            f"top-rated attractions and landmarks."
        ),
        duration=f"{low}-{high} hours",
        difficulty=ROUTE_DIFFICULTY,
    )
