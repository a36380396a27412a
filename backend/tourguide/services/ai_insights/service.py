"""AI city insights: Anthropic, Groq or Gemini, with a disabled stand-in.

Provider-agnostic base class with three concrete implementations:
- AnthropicInsightsService: Claude via the Messages API
- GroqInsightsService:      Groq LPU, llama-3.1-8b-instant
- GeminiInsightsService:    Google Gemini

``create_ai_service()`` picks the first provider with a configured key and
falls back to ``DisabledInsightsService``, whose insights are always
empty. Callers never need to know whether a credential exists.

Content tiers produced by ``generate_city_insights``:
1. Parsed JSON document from the provider (source=ai)
2. Unparseable text salvaged into a generic document (source=salvaged)
3. None when the provider fails or is disabled; the caller substitutes
   hand-written fallback content.
"""

import asyncio
import json
import logging
import re
from abc import ABC, abstractmethod

from pydantic import ValidationError

from tourguide.config import Settings, get_settings
from tourguide.models import CityInsights, InsightsSource

logger = logging.getLogger(__name__)

SYSTEM_PROMPT = (
    "You are an expert travel guide and cultural researcher. "
    "You give engaging, accurate and practical advice for travelers, "
    "focused on current and useful information. "
    "Respond ONLY with valid JSON. No explanations, no markdown, no extra text."
)

SALVAGE_SUMMARY_CHARS = 300

# Generic lists used when the provider answered with prose instead of JSON
SALVAGED_DEFAULTS = {
    "recommendations": [
        "Explore local attractions",
        "Try local cuisine",
        "Visit cultural sites",
        "Take walking tours",
        "Experience nightlife",
    ],
    "hiddenGems": ["Local neighborhoods", "Hidden cafes", "Secret viewpoints"],
    "culturalTips": [
        "Respect local customs",
        "Learn basic phrases",
        "Observe dress codes",
        "Follow local etiquette",
    ],
    "culture": ["Rich history", "Diverse traditions", "Friendly locals", "Cultural festivals"],
    "food": [
        "Local specialties",
        "Street food",
        "Traditional dishes",
        "Modern cuisine",
        "Local beverages",
    ],
    "transportation": ["Public transport", "Walking", "Taxis", "Ride-sharing"],
    "safety": "Standard travel precautions recommended",
    "budget": "Moderate",
    "bestTimeToVisit": "Year-round",
    "weather": "Temperate climate",
    "highlights": ["City center", "Historical sites", "Museums", "Parks", "Markets"],
}


class AIInsightsService(ABC):
    """Base class for generative-text city insights.

    Prompt construction and response parsing live here. Subclasses only
    implement ``_generate()`` for their specific API client.
    """

    _timeout: float

    @abstractmethod
    async def _generate(self, prompt: str, timeout: float | None = None) -> str:
        """Send prompt to the AI provider and return raw text."""
        ...

    @property
    @abstractmethod
    def provider_name(self) -> str:
        """Human-readable provider name for logging."""
        ...

    @property
    def enabled(self) -> bool:
        return True

    # ── Utilities ─────────────────────────────────────────────────────

    async def _bounded(self, call, timeout: float | None = None):
        """Await a provider SDK call under this service's timeout."""
        limit = timeout or self._timeout
        try:
            return await asyncio.wait_for(call, timeout=limit)
        except asyncio.TimeoutError:
            logger.warning(f"[{self.provider_name}] Timeout after {limit}s")
            raise
        except Exception as e:
            logger.warning(f"[{self.provider_name}] Error: {e}")
            raise

    @staticmethod
    def _sanitize_input(text: str, max_length: int = 500) -> str:
        """Strip control characters and limit length before prompting."""
        cleaned = re.sub(r'[\x00-\x08\x0b\x0c\x0e-\x1f\x7f]', '', text)
        return cleaned[:max_length].strip()

    @staticmethod
    def _extract_json(text: str) -> str | None:
        """Return the outermost ``{...}`` span of ``text``, if any."""
        if "```json" in text:
            text = text.split("```json")[1].split("```")[0]
        match = re.search(r"\{[\s\S]*\}", text)
        return match.group(0) if match else None

    @staticmethod
    def build_prompt(city: str, context: dict | None = None) -> str:
        lines = [
            f"Please provide detailed travel insights for {city}.",
            "",
        ]
        if context:
            if context.get("country"):
                lines.append(f"Country: {context['country']}")
            headlines = [n.get("title") for n in context.get("news", []) if n.get("title")]
            if headlines:
                lines.append("Recent headlines: " + "; ".join(headlines[:5]))
            lines.append("")
        lines.extend([
            "Respond with a valid JSON object containing:",
            "{",
            f'  "summary": "A compelling 2-sentence overview highlighting what makes {city} unique",',
            '  "recommendations": ["5 specific must-do activities or places to visit"],',
            '  "hiddenGems": ["3 lesser-known places most tourists miss"],',
            '  "culturalTips": ["3-4 important cultural etiquette and practical tips"],',
            '  "culture": ["3-4 key cultural characteristics and traditions"],',
            '  "food": ["4-5 must-try local foods or dishes"],',
            '  "transportation": ["3-4 main transportation options"],',
            '  "safety": "Brief safety advice and current safety level",',
            '  "budget": "Budget level: Budget/Moderate/Expensive/Luxury",',
            '  "bestTimeToVisit": "Best months/season to visit",',
            '  "weather": "Brief description of typical weather",',
            '  "highlights": ["5 top attractions or experiences"]',
            "}",
        ])
        return "\n".join(lines)

    @classmethod
    def parse_insights(cls, text: str) -> CityInsights:
        """Parse a provider response, salvaging prose when it is not JSON."""
        raw = cls._extract_json(text)
        if raw is not None:
            try:
                data = json.loads(raw)
                if isinstance(data, dict):
                    return CityInsights.model_validate(data)
            except (json.JSONDecodeError, ValidationError) as e:
                logger.info(f"[AI] Could not parse insights JSON: {type(e).__name__}")
        return cls.salvage_insights(text)

    @staticmethod
    def salvage_insights(text: str) -> CityInsights:
        insights = CityInsights.model_validate({
            "summary": text[:SALVAGE_SUMMARY_CHARS] + "...",
            **SALVAGED_DEFAULTS,
        })
        insights.source = InsightsSource.SALVAGED
        return insights

    # ── Capability ────────────────────────────────────────────────────

    async def generate_city_insights(
        self, city: str, context: dict | None = None
    ) -> CityInsights | None:
        """Ask the provider for a travel-facts document.

        Returns:
            Parsed or salvaged insights, or None if the provider call failed.
        """
        city = self._sanitize_input(city, max_length=100)
        prompt = self.build_prompt(city, context)
        logger.info(f"[{self.provider_name}] Generating insights for {city}")
        try:
            text = await self._generate(prompt)
        except asyncio.TimeoutError:
            logger.info(f"[{self.provider_name}] Timeout generating insights for {city}")
            return None
        except Exception as e:
            logger.info(f"[{self.provider_name}] Insights error: {e}")
            return None

        insights = self.parse_insights(text)
        logger.info(f"[{self.provider_name}] Insights for {city}: {insights.source.value}")
        return insights


# ═══════════════════════════════════════════════════════════════════════
# Disabled (no credential configured)
# ═══════════════════════════════════════════════════════════════════════

class DisabledInsightsService(AIInsightsService):
    """Stand-in used when no provider key is configured."""

    _timeout = 0.0

    @property
    def provider_name(self) -> str:
        return "Disabled"

    @property
    def enabled(self) -> bool:
        return False

    async def _generate(self, prompt: str, timeout: float | None = None) -> str:
        raise RuntimeError("No AI provider configured")

    async def generate_city_insights(
        self, city: str, context: dict | None = None
    ) -> CityInsights | None:
        return None


# ═══════════════════════════════════════════════════════════════════════
# Provider: Anthropic
# ═══════════════════════════════════════════════════════════════════════

class AnthropicInsightsService(AIInsightsService):
    """Anthropic Claude via the Messages API."""

    def __init__(
        self,
        api_key: str | None = None,
        model_name: str | None = None,
        timeout_seconds: float = 45.0,
    ) -> None:
        from anthropic import AsyncAnthropic

        settings = get_settings()
        self._api_key = api_key or settings.anthropic_api_key
        if not self._api_key:
            raise ValueError("ANTHROPIC_API_KEY not provided")
        self._client = AsyncAnthropic(api_key=self._api_key)
        self._model_name = model_name or settings.anthropic_model
        self._timeout = timeout_seconds
        logger.info(f"[AI] Anthropic ready: {self._model_name}")

    @property
    def provider_name(self) -> str:
        return "Anthropic"

    async def _generate(self, prompt: str, timeout: float | None = None) -> str:
        message = await self._bounded(
            self._client.messages.create(
                model=self._model_name,
                max_tokens=2000,
                system=SYSTEM_PROMPT,
                messages=[{"role": "user", "content": prompt}],
            ),
            timeout,
        )
        parts = [block.text for block in message.content if getattr(block, "type", "") == "text"]
        return "".join(parts).strip()


# ═══════════════════════════════════════════════════════════════════════
# Provider: Groq
# ═══════════════════════════════════════════════════════════════════════

class GroqInsightsService(AIInsightsService):
    """Groq-hosted Llama via the chat completions API."""

    def __init__(
        self,
        api_key: str | None = None,
        model_name: str | None = None,
        timeout_seconds: float = 15.0,
    ) -> None:
        from groq import AsyncGroq

        settings = get_settings()
        self._api_key = api_key or settings.groq_api_key
        if not self._api_key:
            raise ValueError("GROQ_API_KEY not provided")
        self._client = AsyncGroq(api_key=self._api_key)
        self._model_name = model_name or settings.groq_model
        self._timeout = timeout_seconds
        logger.info(f"[AI] Groq ready: {self._model_name}")

    @property
    def provider_name(self) -> str:
        return "Groq"

    async def _generate(self, prompt: str, timeout: float | None = None) -> str:
        completion = await self._bounded(
            self._client.chat.completions.create(
                model=self._model_name,
                messages=[
                    {"role": "system", "content": SYSTEM_PROMPT},
                    {"role": "user", "content": prompt},
                ],
                temperature=0.3,
                max_tokens=2000,
            ),
            timeout,
        )
        return (completion.choices[0].message.content or "").strip()


# ═══════════════════════════════════════════════════════════════════════
# Provider: Gemini
# ═══════════════════════════════════════════════════════════════════════

class GeminiInsightsService(AIInsightsService):
    """Google Gemini via the google-genai async client."""

    def __init__(
        self,
        api_key: str | None = None,
        model_name: str | None = None,
        timeout_seconds: float = 30.0,
    ) -> None:
        from google import genai

        settings = get_settings()
        self._api_key = api_key or settings.gemini_api_key
        if not self._api_key:
            raise ValueError("GEMINI_API_KEY not provided")
        self._client = genai.Client(api_key=self._api_key)
        self._model_name = model_name or settings.gemini_model
        self._timeout = timeout_seconds
        logger.info(f"[AI] Gemini ready: {self._model_name}")

    @property
    def provider_name(self) -> str:
        return "Gemini"

    async def _generate(self, prompt: str, timeout: float | None = None) -> str:
        # Gemma models reject system instructions, so the prompt carries it
        response = await self._bounded(
            self._client.aio.models.generate_content(
                model=self._model_name,
                contents=f"{SYSTEM_PROMPT}\n\n{prompt}",
            ),
            timeout,
        )
        return (response.text or "").strip()


# ═══════════════════════════════════════════════════════════════════════
# Factory
# ═══════════════════════════════════════════════════════════════════════

# name -> (key setting, model setting, service class)
_PROVIDERS: dict[str, tuple[str, str, type[AIInsightsService]]] = {
    "anthropic": ("anthropic_api_key", "anthropic_model", AnthropicInsightsService),
    "groq": ("groq_api_key", "groq_model", GroqInsightsService),
    "gemini": ("gemini_api_key", "gemini_model", GeminiInsightsService),
}


def create_ai_service(settings: Settings | None = None) -> AIInsightsService:
    """Create the best available insights service.

    ``AI_PROVIDER`` is tried first when set, then Anthropic, Groq and
    Gemini in that order. Without any key the disabled service is returned.
    """
    settings = settings or get_settings()
    order = list(_PROVIDERS)
    if settings.ai_provider in _PROVIDERS:
        order.remove(settings.ai_provider)
        order.insert(0, settings.ai_provider)

    for name in order:
        key_attr, model_attr, service_cls = _PROVIDERS[name]
        api_key = getattr(settings, key_attr)
        if not api_key:
            continue
        try:
            return service_cls(api_key=api_key, model_name=getattr(settings, model_attr))
        except Exception as e:
            logger.info(f"[AI] {name} init failed: {e}")

    logger.info("[AI] No AI provider configured, insights will use fallback content")
    return DisabledInsightsService()
