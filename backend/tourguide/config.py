"""Environment-driven settings.

Values are read once from the process environment (after loading a local
``.env`` file when present) and cached for the life of the process.
"""

import logging
import os
from functools import lru_cache

from dotenv import load_dotenv

logger = logging.getLogger(__name__)

try:
    load_dotenv()
except Exception:
    pass  # Python 3.14+ compat


def _float_env(name: str, default: float) -> float:
    try:
        return float(os.getenv(name, str(default)))
    except ValueError:
        logger.warning(f"[CONFIG] Invalid {name}, using {default}")
        return default


class Settings:
    """Runtime configuration for the service."""

    def __init__(self) -> None:
        # Required for tour generation
        self.google_maps_api_key: str | None = os.getenv("GOOGLE_MAPS_API_KEY")
        self.supabase_url: str | None = (os.getenv("SUPABASE_URL") or "").rstrip("/") or None
        self.supabase_service_role_key: str | None = os.getenv("SUPABASE_SERVICE_ROLE_KEY")

        # Optional enrichment providers
        self.anthropic_api_key: str | None = os.getenv("ANTHROPIC_API_KEY")
        self.groq_api_key: str | None = os.getenv("GROQ_API_KEY")
        self.gemini_api_key: str | None = os.getenv("GEMINI_API_KEY")
        self.apify_api_token: str | None = os.getenv("APIFY_API_TOKEN")
        self.ai_provider: str | None = (os.getenv("AI_PROVIDER") or "").lower() or None
        self.anthropic_model: str = os.getenv("ANTHROPIC_MODEL", "claude-haiku-4-5-20251001")
        self.groq_model: str = os.getenv("GROQ_MODEL", "llama-3.1-8b-instant")
        self.gemini_model: str = os.getenv("GEMINI_MODEL", "gemma-3-4b-it")

        # Optional briefing cache
        self.redis_url: str | None = os.getenv("REDIS_URL")

        # "supabase" or "memory"; default follows whether Supabase is configured
        store = (os.getenv("TOUR_STORE") or "").lower()
        if not store:
            store = "supabase" if self.supabase_url and self.supabase_service_role_key else "memory"
        self.tour_store: str = store

        self.http_timeout_sec: float = _float_env("HTTP_TIMEOUT_SEC", 30.0)
        self.log_level: str = os.getenv("LOG_LEVEL", "INFO").upper()

    @property
    def has_supabase(self) -> bool:
        return bool(self.supabase_url and self.supabase_service_role_key)


@lru_cache
def get_settings() -> Settings:
    return Settings()
