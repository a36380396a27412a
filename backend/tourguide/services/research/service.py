"""City research assistant.

Builds a travel briefing for a city from three independent, best-effort
sources:
1. Geocoding for canonical name, country and coordinates
2. Web search snippets (only with a configured search token)
3. Generative-text insights (only with a configured AI key)

No source can make the assistant fail: geocoding falls back to an
"Unknown" country, search to no snippets, and insights degrade from AI
JSON to salvaged text to a hand-written document. Research never writes
to the tour store.
"""

import logging
from datetime import date
from typing import Any

from tourguide.models import (
    BriefingInsights,
    CityBriefing,
    CityInsights,
    Coordinates,
    InputMissingError,
    InsightsSource,
)
from tourguide.services.ai_insights import AIInsightsService
from tourguide.services.geocoding import UNKNOWN_COUNTRY, GeocodingService
from tourguide.services.web_search import WebSearchService

logger = logging.getLogger(__name__)


def fallback_insights(city: str) -> CityInsights:
    """Hand-written insights used when no AI provider answers."""
    insights = CityInsights(
        summary=(
            f"{city} offers a unique blend of culture, history, and modern attractions "
            f"waiting to be discovered by adventurous travelers. This vibrant destination "
            f"provides countless opportunities for exploration and memorable experiences."
        ),
        recommendations=[
            f"Explore the historic city center of {city}",
            "Visit local museums and cultural institutions",
            "Try authentic local cuisine at traditional restaurants",
            "Take guided walking tours of significant areas",
            "Experience the local markets and shopping districts",
        ],
        hidden_gems=[
            "Local neighborhood cafes frequented by residents",
            "Off-the-beaten-path scenic viewpoints",
            "Traditional markets away from tourist areas",
        ],
        cultural_tips=[
            "Respect local customs and traditions",
            "Learn basic greetings in the local language",
            "Dress appropriately when visiting religious or cultural sites",
            "Observe local dining and social etiquette",
        ],
        culture=[
            f"Rich cultural heritage of {city}",
            "Welcoming and friendly locals",
            "Traditional festivals and celebrations",
            "Blend of historical and modern influences",
        ],
        food=[
            f"Traditional {city} specialties",
            "Local street food favorites",
            "Regional dishes and delicacies",
            "Modern culinary scene",
            "Local beverages and drinks",
        ],
        transportation=[
            "Comprehensive public transportation system",
            "Walking-friendly city areas",
            "Local taxi and ride-sharing services",
            "Bicycle rental options",
        ],
        safety=(
            "Generally safe for tourists with standard travel precautions recommended. "
            "Stay aware of surroundings and keep valuables secure."
        ),
        budget="Moderate",
        best_time_to_visit="Year-round destination with seasonal variations",
        weather="Temperate climate with distinct seasons",
        highlights=[
            f"Historic landmarks in {city}",
            "Cultural attractions and museums",
            "Local markets and shopping areas",
            "Parks and recreational spaces",
            "Dining and entertainment districts",
        ],
    )
    insights.source = InsightsSource.FALLBACK
    return insights


class CityResearchAssistant:
    """Aggregates geocoding, web search and AI insights into a briefing."""

    def __init__(
        self,
        geocoder: GeocodingService | None,
        web_search: WebSearchService,
        ai_service: AIInsightsService,
    ) -> None:
        self._geocoder = geocoder
        self._web_search = web_search
        self._ai = ai_service

    async def research(self, city: str | None) -> CityBriefing:
        """Produce a complete briefing for ``city``.

        Raises:
            InputMissingError: ``city`` is missing or blank. Nothing else
                propagates.
        """
        city = (city or "").strip()
        if not city:
            raise InputMissingError("City name is required")

        logger.info(f"[RESEARCH] Starting research for city: {city}")

        basic = await self._basic_city_data(city)
        news = await self._search(city)
        insights = await self._insights(city, {"country": basic["country"], "news": news})

        briefing = self.assemble(city, basic, news, insights)
        logger.info(
            f"[RESEARCH] Completed {city}: country={briefing.country}, "
            f"news={len(news)}, insights={insights.source.value}"
        )
        return briefing

    async def _basic_city_data(self, city: str) -> dict[str, Any]:
        defaults: dict[str, Any] = {
            "city": city,
            "country": UNKNOWN_COUNTRY,
            "coordinates": None,
            "formatted_address": city,
        }
        if self._geocoder is None:
            logger.info("[RESEARCH] Geocoding not configured, using defaults")
            return defaults
        try:
            location = await self._geocoder.resolve(city)
        except Exception as e:
            logger.info(f"[RESEARCH] Geocoding failed for {city}: {e}")
            return defaults
        return {
            "city": location.locality,
            "country": location.country,
            "coordinates": location.coordinates,
            "formatted_address": location.formatted_address,
        }

    async def _search(self, city: str) -> list[dict[str, Any]]:
        if not self._web_search.enabled:
            return []
        try:
            return await self._web_search.search(city)
        except Exception as e:
            logger.info(f"[RESEARCH] Web search failed for {city}: {e}")
            return []

    async def _insights(self, city: str, context: dict[str, Any]) -> CityInsights:
        if not self._ai.enabled:
            logger.info("[RESEARCH] AI provider not available, using fallback insights")
            return fallback_insights(city)
        try:
            insights = await self._ai.generate_city_insights(city, context)
        except Exception as e:
            logger.info(f"[RESEARCH] AI insights failed for {city}: {e}")
            insights = None
        return insights if insights is not None else fallback_insights(city)

    @staticmethod
    def assemble(
        city: str,
        basic: dict[str, Any],
        news: list[dict[str, Any]],
        insights: CityInsights,
    ) -> CityBriefing:
        """Merge sources into a briefing, filling empty fields with defaults."""
        coordinates = basic.get("coordinates")
        return CityBriefing(
            city=basic.get("city") or city,
            country=basic.get("country") or UNKNOWN_COUNTRY,
            coordinates=coordinates if isinstance(coordinates, Coordinates) else None,
            population=basic.get("population") or "Data not available",
            currency=basic.get("currency") or "Local currency",
            language=basic.get("language") or ["Local language"],
            best_time_to_visit=insights.best_time_to_visit or "Year-round",
            weather=insights.weather or "Temperate climate",
            highlights=insights.highlights
            or [f"Explore {city}", f"Cultural sites in {city}", "Local attractions"],
            culture=insights.culture
            or [f"Rich {city} culture", "Welcoming locals", "Traditional values"],
            food=insights.food
            or [f"Local {city} specialties", "Traditional dishes", "Street food"],
            transportation=insights.transportation or ["Public transport", "Walking", "Taxis"],
            safety=insights.safety or "Standard travel precautions recommended",
            budget=insights.budget or "Moderate",
            news=news,
            images=basic.get("images") or [],
            ai_insights=BriefingInsights(
                summary=insights.summary
                or (
                    f"Discover the vibrant culture and attractions of {city}, a fascinating "
                    f"destination with rich history and modern amenities."
                ),
                recommendations=insights.recommendations
                or [
                    f"Visit the main attractions in {city}",
                    "Explore local markets and shops",
                    "Try traditional local cuisine",
                    "Take walking tours of historic areas",
                    "Experience the local nightlife",
                ],
                hidden_gems=insights.hidden_gems
                or [
                    "Local neighborhood cafes",
                    "Off-the-beaten-path viewpoints",
                    "Hidden local markets",
                ],
                cultural_tips=insights.cultural_tips
                or [
                    "Respect local customs and traditions",
                    "Learn basic greetings in the local language",
                    "Observe local dress codes when visiting religious sites",
                ],
            ),
            insights_source=insights.source,
            last_updated=date.today().isoformat(),
        )
