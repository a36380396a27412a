"""Briefing cache (Redis)."""

from .service import BRIEFING_TTL_SECONDS, CacheService, RedisCacheService

__all__ = ["BRIEFING_TTL_SECONDS", "CacheService", "RedisCacheService"]
