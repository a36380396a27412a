"""Web search enrichment via Apify's Google Search scraper.

Best-effort only: any failure yields an empty result list. Without an
``APIFY_API_TOKEN`` the disabled service is used and no call is made.
"""

import logging
from abc import ABC, abstractmethod
from datetime import date
from typing import Any

import httpx

from tourguide.config import Settings, get_settings

logger = logging.getLogger(__name__)

MAX_RESULTS = 5


class WebSearchService(ABC):
    """Abstract base class for city web search."""

    @property
    def enabled(self) -> bool:
        return True

    @abstractmethod
    async def search(self, city: str) -> list[dict[str, Any]]:
        """Return up to ``MAX_RESULTS`` snippets about ``city``; never raises."""
        pass


class DisabledWebSearchService(WebSearchService):
    """Stand-in used when no search token is configured."""

    @property
    def enabled(self) -> bool:
        return False

    async def search(self, city: str) -> list[dict[str, Any]]:
        return []


class ApifyWebSearchService(WebSearchService):
    """Apify ``google-search-scraper`` actor, run synchronously."""

    ACTOR_URL = (
        "https://api.apify.com/v2/acts/apify~google-search-scraper/run-sync-get-dataset-items"
    )

    def __init__(
        self,
        api_token: str,
        timeout: float = 60.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        if not api_token:
            raise ValueError("APIFY_API_TOKEN not provided")
        self._api_token = api_token
        self._timeout = timeout
        self._transport = transport

    @staticmethod
    def build_queries(city: str) -> list[str]:
        return [
            f"{city} travel guide latest news",
            f"{city} tourism attractions {date.today().year}",
        ]

    async def search(self, city: str) -> list[dict[str, Any]]:
        payload = {
            "queries": "\n".join(self.build_queries(city)),
            "maxPagesPerQuery": 2,
            "resultsPerPage": 5,
        }
        headers = {"Authorization": f"Bearer {self._api_token}"}
        try:
            async with httpx.AsyncClient(
                timeout=self._timeout, transport=self._transport
            ) as client:
                response = await client.post(self.ACTOR_URL, json=payload, headers=headers)
                response.raise_for_status()
                items = response.json()
        except Exception as e:
            logger.info(f"[SEARCH] Apify search failed for {city}: {type(e).__name__}: {e}")
            return []

        results = self.normalize(items if isinstance(items, list) else [])
        logger.info(f"[SEARCH] {city}: {len(results)} results")
        return results

    @staticmethod
    def normalize(items: list[Any]) -> list[dict[str, Any]]:
        """Flatten dataset items into ``{title, url, description}`` snippets.

        Items that carry ``organicResults`` (one item per results page) are
        expanded; anything else is read as a single result.
        """
        results: list[dict[str, Any]] = []
        for item in items:
            if not isinstance(item, dict):
                continue
            rows = item.get("organicResults")
            for row in rows if isinstance(rows, list) else [item]:
                if not isinstance(row, dict) or not row.get("title"):
                    continue
                results.append({
                    "title": row.get("title"),
                    "url": row.get("url"),
                    "description": row.get("description", ""),
                })
                if len(results) >= MAX_RESULTS:
                    return results
        return results


def create_web_search_service(settings: Settings | None = None) -> WebSearchService:
    settings = settings or get_settings()
    if settings.apify_api_token:
        return ApifyWebSearchService(settings.apify_api_token)
    logger.info("[SEARCH] Apify API token not available, skipping web search")
    return DisabledWebSearchService()
