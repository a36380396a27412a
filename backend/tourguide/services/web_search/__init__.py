"""Web search enrichment (Apify)."""

from .service import (
    MAX_RESULTS,
    ApifyWebSearchService,
    DisabledWebSearchService,
    WebSearchService,
    create_web_search_service,
)

__all__ = [
    "MAX_RESULTS",
    "ApifyWebSearchService",
    "DisabledWebSearchService",
    "WebSearchService",
    "create_web_search_service",
]
