"""Virtual Tour Guide Services.

Service layer components:
- Geocoding: Google Geocoding API city resolution
- Places: Google Places nearby search and place details
- Ranking: rating x log(review count) attraction ordering
- Content: deterministic stop descriptions, audio scripts and tips
- Repository: Supabase (PostgREST) or in-memory tour storage
- Tours: the generate-tour pipeline
- AI Insights: Anthropic / Groq / Gemini city insights
- Web Search: Apify Google Search scraper
- Research: city briefings assembled from the above
- Audio: client-side TTS fallback
- Cache: Redis-based caching for briefings
"""

from .cache import CacheService, RedisCacheService
from .geocoding import GeocodingService, GoogleGeocodingService
from .places import GooglePlacesService, PlacesService
from .ranking import rank_attractions
from .content import synthesize_stops
from .repository import InMemoryTourRepository, SupabaseTourRepository, TourRepository
from .tours import TourOrchestrator, TourStage
from .ai_insights import AIInsightsService, create_ai_service
from .web_search import WebSearchService, create_web_search_service
from .research import CityResearchAssistant
from .audio import AudioGenerationService

__all__ = [
    # Cache
    "CacheService",
    "RedisCacheService",
    # Tour pipeline
    "GeocodingService",
    "GoogleGeocodingService",
    "PlacesService",
    "GooglePlacesService",
    "rank_attractions",
    "synthesize_stops",
    "TourRepository",
    "SupabaseTourRepository",
    "InMemoryTourRepository",
    "TourOrchestrator",
    "TourStage",
    # Research
    "AIInsightsService",
    "create_ai_service",
    "WebSearchService",
    "create_web_search_service",
    "CityResearchAssistant",
    # Audio
    "AudioGenerationService",
]
