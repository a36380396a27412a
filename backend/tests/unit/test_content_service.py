"""Unit tests for deterministic stop content."""

from tourguide.models import Coordinates
from tourguide.services.content import (
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

from .conftest import make_details


class TestCategorize:
    def test_museum(self) -> None:
        assert categorize(["museum", "establishment"]) == "Museum"

    def test_first_match_in_priority_order(self) -> None:
        # park is checked before place_of_worship regardless of list order
        assert categorize(["place_of_worship", "park"]) == "Park"

    def test_establishment_is_landmark(self) -> None:
        assert categorize(["point_of_interest", "establishment"]) == "Landmark"

    def test_unknown_types(self) -> None:
        assert categorize(["point_of_interest"]) == DEFAULT_CATEGORY
        assert categorize([]) == "Attraction"


class TestNarrative:
    def test_description(self) -> None:
        place = make_details("louvre", name="Louvre", rating=4.7, user_ratings_total=250000)
        assert build_description(place, "Museum", "Paris") == (
            "A highly-rated museum in Paris, known for its 4.7-star rating "
            "from 250000 visitor reviews."
        )

    def test_audio_script(self) -> None:
        place = make_details(
            "louvre",
            name="Louvre",
            rating=4.0,
            user_ratings_total=10,
            formatted_address="Rue de Rivoli, Paris",
        )
        script = build_audio_script(place, "Museum", "Paris")
        assert script.startswith("Welcome to Louvre, one of the must-see attractions in Paris.")
        assert "with 4 stars from 10 reviews" in script
        assert "Located at Rue de Rivoli, Paris" in script
        assert script.endswith("appreciate what makes this place special.")

    def test_tips_for_museum_with_hours_and_website(self) -> None:
        place = make_details(
            "m",
            types=["museum"],
            opening_hours={"open_now": True},
            website="https://example.org",
        )
        assert build_tips(place) == [
            "Check opening hours before visiting",
            "Visit the official website for more information",
            "Allow 1-2 hours for your visit",
            "Popular with visitors - arrive early to avoid crowds",
        ]

    def test_tips_minimal(self) -> None:
        place = make_details("p", types=["park"])
        assert build_tips(place) == [
            "Great for photos and relaxation",
            "Popular with visitors - arrive early to avoid crowds",
        ]


class TestSynthesizeStops:
    def test_durations_and_order(self) -> None:
        places = [make_details(pid) for pid in ("a", "b", "c")]
        stops = synthesize_stops(places, "Paris")
        assert [s.duration_minutes for s in stops] == [20, 25, 30]
        assert [s.stop_order for s in stops] == [1, 2, 3]

    def test_estimate_duration(self) -> None:
        assert estimate_duration(0) == 20
        assert estimate_duration(5) == 45

    def test_stop_carries_place_fields(self) -> None:
        place = make_details("a", name="Tower", rating=4.6, user_ratings_total=321)
        stop = synthesize_stop(place, 0, "Paris")
        assert stop.name == "Tower"
        assert stop.category == "Landmark"
        assert stop.rating == 4.6
        assert stop.total_ratings == 321
        assert stop.coordinates == place.coordinates
        assert stop.address == place.formatted_address

    def test_deterministic(self) -> None:
        places = [make_details("a"), make_details("b")]
        assert synthesize_stops(places, "Paris") == synthesize_stops(places, "Paris")


class TestDrafts:
    def test_route_duration_range(self) -> None:
        assert build_route_draft("Paris", 6).duration == "3-5 hours"
        assert build_route_draft("Paris", 1).duration == "1-1 hours"

    def test_route_fields(self) -> None:
        route = build_route_draft("Paris", 4)
        assert route.name == "Paris Highlights Tour"
        assert route.difficulty == "Easy to Moderate"

    def test_city_draft(self) -> None:
        city = build_city_draft("Paris", "France", Coordinates(lat=48.85, lng=2.35))
        assert city.name == "Paris"
        assert city.country == "France"
        assert city.timezone == "UTC"
        assert "vibrant destination in France" in city.description
