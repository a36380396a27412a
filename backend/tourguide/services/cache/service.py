"""Briefing cache backed by Redis.

Research briefings cost a geocode, a web search and a generative-text call
and change slowly, so they are stored as JSON under a key derived from the
city name. Redis is optional; callers treat every cache error as a miss.

Property: a briefing stored for a city is returned for any request whose
city name differs only in case or surrounding whitespace.
"""

import json
import logging
from abc import ABC, abstractmethod
from typing import Any

import redis.asyncio as redis

logger = logging.getLogger(__name__)

BRIEFING_TTL_SECONDS = 86400
BRIEFING_KEY_PREFIX = "briefing"


class CacheService(ABC):
    """Key/value cache for JSON documents, with briefing helpers on top."""

    @abstractmethod
    async def get(self, key: str) -> Any | None:
        """Return the decoded value for ``key``, or None on a miss."""
        pass

    @abstractmethod
    async def set(self, key: str, value: Any, ttl_seconds: int | None = None) -> None:
        pass

    @staticmethod
    def build_briefing_key(city: str) -> str:
        """Cache key for a city briefing.

        Example:
            >>> CacheService.build_briefing_key("  Paris ")
            'briefing:paris'
        """
        return f"{BRIEFING_KEY_PREFIX}:{city.strip().lower()}"

    async def get_briefing(self, city: str) -> dict | None:
        cached = await self.get(self.build_briefing_key(city))
        return cached if isinstance(cached, dict) else None

    async def put_briefing(self, city: str, briefing: dict) -> None:
        await self.set(self.build_briefing_key(city), briefing, BRIEFING_TTL_SECONDS)


class RedisCacheService(CacheService):
    """Redis implementation; the connection is opened on first use."""

    def __init__(self, redis_url: str, default_ttl: int = BRIEFING_TTL_SECONDS) -> None:
        self._redis_url = redis_url
        self._default_ttl = default_ttl
        self._client: redis.Redis | None = None

    @property
    def default_ttl(self) -> int:
        return self._default_ttl

    def _redis(self) -> redis.Redis:
        if self._client is None:
            logger.info("[CACHE] Connecting to Redis")
            self._client = redis.from_url(
                self._redis_url, encoding="utf-8", decode_responses=True
            )
        return self._client

    async def disconnect(self) -> None:
        """Close the connection pool; called on application shutdown."""
        if self._client is None:
            return
        client, self._client = self._client, None
        await client.aclose()

    async def get(self, key: str) -> Any | None:
        raw = await self._redis().get(key)
        if raw is None:
            return None
        try:
            return json.loads(raw)
        except json.JSONDecodeError:
            logger.warning(f"[CACHE] Dropping undecodable value at {key}")
            return None

    async def set(self, key: str, value: Any, ttl_seconds: int | None = None) -> None:
        expiry = self._default_ttl if ttl_seconds is None else ttl_seconds
        await self._redis().set(key, json.dumps(value), ex=expiry)
