"""API routes for the virtual tour guide.

Four endpoints, each a thin wrapper around one service:
- POST /generate-city-tour: geocode, discover, rank, synthesize, persist
- GET  /get-city-tours:     load a stored city with routes and stops
- POST /research-city:      travel briefing (cached, never persisted)
- POST /generate-audio:     client-side TTS fallback

Every handler catches all errors and answers HTTP 500 with
``{"error": {"code": <endpoint code>, "message": str(error)}}``.
Services are module-level singletons built lazily from settings.
"""

from typing import Optional, TypeVar
import logging

from fastapi import APIRouter, Query, Request
from fastapi.responses import JSONResponse
from pydantic import BaseModel, ConfigDict, Field

from tourguide.config import get_settings
from tourguide.models import (
    AppError,
    ConfigurationError,
    ErrorCode,
    ErrorResponse,
    InputMissingError,
    InsightsSource,
)
from tourguide.services import (
    AudioGenerationService,
    CityResearchAssistant,
    GoogleGeocodingService,
    GooglePlacesService,
    InMemoryTourRepository,
    RedisCacheService,
    SupabaseTourRepository,
    TourOrchestrator,
    TourRepository,
    create_ai_service,
    create_web_search_service,
)
from tourguide.services.cache import BRIEFING_TTL_SECONDS, CacheService
from tourguide.utils.cache import LRUCache

logger = logging.getLogger(__name__)

router = APIRouter()

BaseModelT = TypeVar("BaseModelT", bound=BaseModel)


# ─── Request models ───
# Bodies are parsed inside each handler and fields are optional, so a
# missing or malformed value is reported with the endpoint's error code.

class GenerateTourRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    city_name: Optional[str] = Field(None, alias="cityName")
    country: Optional[str] = None


class ResearchCityRequest(BaseModel):
    city: Optional[str] = None


class GenerateAudioRequest(BaseModel):
    text: Optional[str] = None
    language: str = "en"
    voice: str = "alloy"
    speed: float = 1.0


def error_response(code: ErrorCode, error: Exception) -> JSONResponse:
    body = ErrorResponse(error=AppError(code=code, message=str(error)))
    return JSONResponse(status_code=500, content=body.model_dump(mode="json"))


# ─── In-Memory LRU Cache (process-level, instant) ───

_briefing_cache = LRUCache(max_size=100, ttl_seconds=BRIEFING_TTL_SECONDS)


async def _redis_get_briefing(city: str) -> dict | None:
    """Try to get a cached briefing from Redis."""
    cache = get_cache_service()
    if cache is None:
        return None
    try:
        return await cache.get_briefing(city)
    except Exception as e:
        logger.info(f"[RESEARCH] Redis read skipped: {e}")
        return None


async def _redis_set_briefing(city: str, value: dict) -> None:
    """Cache a briefing in Redis (fire-and-forget)."""
    cache = get_cache_service()
    if cache is None:
        return
    try:
        await cache.put_briefing(city, value)
    except Exception as e:
        logger.info(f"[RESEARCH] Redis write skipped: {e}")


# ─── Service singletons ───

_repository: TourRepository | None = None
_tour_orchestrator: TourOrchestrator | None = None
_research_assistant: CityResearchAssistant | None = None
_audio_service: AudioGenerationService | None = None
_cache_service: RedisCacheService | None = None


def get_repository() -> TourRepository:
    global _repository
    if _repository is None:
        settings = get_settings()
        if settings.tour_store == "memory":
            logger.info("[STORE] Using in-memory tour store")
            _repository = InMemoryTourRepository()
        elif settings.tour_store == "supabase":
            if not settings.has_supabase:
                raise ConfigurationError("Supabase configuration missing")
            _repository = SupabaseTourRepository(
                settings.supabase_url,
                settings.supabase_service_role_key,
                timeout=settings.http_timeout_sec,
            )
        else:
            raise ConfigurationError(f"Unknown TOUR_STORE: {settings.tour_store}")
    return _repository


def get_tour_orchestrator() -> TourOrchestrator:
    global _tour_orchestrator
    if _tour_orchestrator is None:
        settings = get_settings()
        if not settings.google_maps_api_key:
            raise ConfigurationError("Google Maps API key not configured")
        _tour_orchestrator = TourOrchestrator(
            geocoder=GoogleGeocodingService(
                settings.google_maps_api_key, timeout=settings.http_timeout_sec
            ),
            places=GooglePlacesService(
                settings.google_maps_api_key, timeout=settings.http_timeout_sec
            ),
            repository=get_repository(),
        )
    return _tour_orchestrator


def get_research_assistant() -> CityResearchAssistant:
    global _research_assistant
    if _research_assistant is None:
        settings = get_settings()
        geocoder = None
        if settings.google_maps_api_key:
            geocoder = GoogleGeocodingService(
                settings.google_maps_api_key, timeout=settings.http_timeout_sec
            )
        _research_assistant = CityResearchAssistant(
            geocoder=geocoder,
            web_search=create_web_search_service(settings),
            ai_service=create_ai_service(settings),
        )
    return _research_assistant


def get_audio_service() -> AudioGenerationService:
    global _audio_service
    if _audio_service is None:
        _audio_service = AudioGenerationService()
    return _audio_service


def get_cache_service() -> CacheService | None:
    """Redis briefing cache, or None when ``REDIS_URL`` is not set."""
    global _cache_service
    if _cache_service is None:
        redis_url = get_settings().redis_url
        if not redis_url:
            return None
        _cache_service = RedisCacheService(redis_url)
    return _cache_service


async def shutdown_services() -> None:
    """Release connections held by service singletons."""
    if _cache_service is not None:
        await _cache_service.disconnect()


# ─── Endpoints ───

# Error code each endpoint reports, whatever fails inside it.
ENDPOINT_ERROR_CODES = {
    "/generate-city-tour": ErrorCode.TOUR_GENERATION_FAILED,
    "/get-city-tours": ErrorCode.GET_TOURS_FAILED,
    "/research-city": ErrorCode.RESEARCH_FAILED,
    "/generate-audio": ErrorCode.AUDIO_GENERATION_FAILED,
}


async def _read_body(request: Request, model: type[BaseModelT]) -> BaseModelT:
    """Parse the JSON body inside the handler so a bad body gets its error code."""
    return model.model_validate(await request.json())


@router.post("/generate-city-tour")
async def generate_city_tour(request: Request):
    """Generate and store the walking tour for a city."""
    try:
        body = await _read_body(request, GenerateTourRequest)
        if not (body.city_name or "").strip():
            raise InputMissingError("City name is required")
        orchestrator = get_tour_orchestrator()
        result = await orchestrator.generate_tour(body.city_name, body.country)
        return {"data": result.model_dump(by_alias=True, mode="json")}
    except Exception as e:
        logger.exception(f"[TOUR] Error generating city tour: {e}")
        return error_response(ErrorCode.TOUR_GENERATION_FAILED, e)


@router.get("/get-city-tours")
async def get_city_tours(
    city_id: Optional[int] = Query(None, alias="cityId"),
    city_name: Optional[str] = Query(None, alias="cityName"),
    country: Optional[str] = Query(None),
):
    """Fetch a stored city by id or by name (and optional country)."""
    try:
        repository = get_repository()
        tours = await repository.get_city_tours(
            city_id=city_id, name=city_name, country=country
        )
        if tours is None:
            return {"data": None, "message": "City not found"}
        return {"data": tours.model_dump(by_alias=True, mode="json")}
    except Exception as e:
        logger.exception(f"[STORE] Error fetching city tours: {e}")
        return error_response(ErrorCode.GET_TOURS_FAILED, e)


@router.post("/research-city")
async def research_city(request: Request):
    """Build a travel briefing for a city.

    Briefings whose insights came from the AI provider are cached per
    normalized city name, in-process LRU first, then Redis. Salvaged and
    fallback briefings are never cached, so the next request retries the AI.
    """
    try:
        body = await _read_body(request, ResearchCityRequest)
        assistant = get_research_assistant()
        city = (body.city or "").strip()
        key = CacheService.build_briefing_key(city) if city else None

        if key:
            cached = _briefing_cache.get(key)
            if cached is not None:
                logger.info(f"[RESEARCH] LRU hit for {city}")
                return cached
            cached = await _redis_get_briefing(city)
            if cached is not None:
                logger.info(f"[RESEARCH] Redis hit for {city}")
                _briefing_cache.set(key, cached)
                return cached

        briefing = await assistant.research(body.city)
        payload = briefing.model_dump(by_alias=True, mode="json")

        if briefing.insights_source is InsightsSource.AI:
            _briefing_cache.set(key, payload)
            await _redis_set_briefing(city, payload)
        else:
            source = briefing.insights_source.value
            logger.info(f"[RESEARCH] Not caching {source} briefing for {city}")
        return payload
    except Exception as e:
        logger.exception(f"[RESEARCH] Error researching city: {e}")
        return error_response(ErrorCode.RESEARCH_FAILED, e)


@router.post("/generate-audio")
async def generate_audio(request: Request):
    """Return narration for client-side speech synthesis."""
    try:
        body = await _read_body(request, GenerateAudioRequest)
        audio = get_audio_service()
        result = await audio.generate_audio(
            body.text,
            language=body.language,
            voice=body.voice,
            speed=body.speed,
        )
        return {"data": result.model_dump(by_alias=True, mode="json")}
    except Exception as e:
        logger.exception(f"[AUDIO] Error generating audio: {e}")
        return error_response(ErrorCode.AUDIO_GENERATION_FAILED, e)
