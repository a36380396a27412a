"""Unit tests for AI city insights.

Providers are replaced by an in-process subclass; no network calls.
"""

import asyncio
from types import SimpleNamespace

import pytest

from tourguide.models import InsightsSource
from tourguide.services.ai_insights import (
    AIInsightsService,
    DisabledInsightsService,
    create_ai_service,
)


class ScriptedInsightsService(AIInsightsService):
    """Returns a canned response, or raises it when it is an exception."""

    _timeout = 1.0

    def __init__(self, response) -> None:
        self.response = response
        self.prompts: list[str] = []

    @property
    def provider_name(self) -> str:
        return "Scripted"

    async def _generate(self, prompt: str, timeout: float | None = None) -> str:
        self.prompts.append(prompt)
        if isinstance(self.response, BaseException):
            raise self.response
        return self.response


def _settings(**keys) -> SimpleNamespace:
    values = {
        "ai_provider": None,
        "anthropic_api_key": None,
        "groq_api_key": None,
        "gemini_api_key": None,
        "anthropic_model": "claude-test",
        "groq_model": "llama-test",
        "gemini_model": "gemini-test",
    }
    values.update(keys)
    return SimpleNamespace(**values)


class TestParseInsights:
    def test_plain_json(self) -> None:
        insights = AIInsightsService.parse_insights(
            '{"summary": "Lovely city.", "hiddenGems": ["Canal walk"], "budget": "Expensive"}'
        )
        assert insights.source == InsightsSource.AI
        assert insights.summary == "Lovely city."
        assert insights.hidden_gems == ["Canal walk"]
        assert insights.budget == "Expensive"
        assert insights.food is None

    def test_json_inside_fence_and_prose(self) -> None:
        text = 'Here you go:\n```json\n{"summary": "Fenced."}\n```\nEnjoy!'
        assert AIInsightsService.parse_insights(text).summary == "Fenced."

    def test_json_with_leading_prose(self) -> None:
        text = 'Sure! {"summary": "Embedded.", "culture": ["Jazz"]} Hope this helps.'
        insights = AIInsightsService.parse_insights(text)
        assert insights.summary == "Embedded."
        assert insights.culture == ["Jazz"]

    def test_prose_is_salvaged(self) -> None:
        text = "Paris is wonderful. " * 30
        insights = AIInsightsService.parse_insights(text)
        assert insights.source == InsightsSource.SALVAGED
        assert insights.summary == text[:300] + "..."
        assert insights.recommendations[0] == "Explore local attractions"
        assert insights.best_time_to_visit == "Year-round"

    def test_broken_json_is_salvaged(self) -> None:
        insights = AIInsightsService.parse_insights('{"summary": "unterminated}')
        assert insights.source == InsightsSource.SALVAGED

    def test_wrong_field_types_are_salvaged(self) -> None:
        insights = AIInsightsService.parse_insights('{"recommendations": "not a list"}')
        assert insights.source == InsightsSource.SALVAGED


class TestBuildPrompt:
    def test_includes_city_and_context(self) -> None:
        prompt = AIInsightsService.build_prompt(
            "Lisbon",
            {"country": "Portugal", "news": [{"title": "Tram 28 returns"}]},
        )
        assert "travel insights for Lisbon" in prompt
        assert "Country: Portugal" in prompt
        assert "Tram 28 returns" in prompt
        assert '"hiddenGems"' in prompt

    def test_sanitize_strips_control_characters(self) -> None:
        assert AIInsightsService._sanitize_input("Par\x00is\x07", max_length=100) == "Paris"


class TestGenerateCityInsights:
    @pytest.mark.asyncio
    async def test_parsed_response(self) -> None:
        service = ScriptedInsightsService('{"summary": "Great food."}')
        insights = await service.generate_city_insights("Lyon", {"country": "France"})
        assert insights.summary == "Great food."
        assert "Lyon" in service.prompts[0]

    @pytest.mark.asyncio
    async def test_provider_error_returns_none(self) -> None:
        service = ScriptedInsightsService(RuntimeError("rate limited"))
        assert await service.generate_city_insights("Lyon") is None

    @pytest.mark.asyncio
    async def test_timeout_returns_none(self) -> None:
        service = ScriptedInsightsService(asyncio.TimeoutError())
        assert await service.generate_city_insights("Lyon") is None

    @pytest.mark.asyncio
    async def test_disabled_service(self) -> None:
        service = DisabledInsightsService()
        assert service.enabled is False
        assert await service.generate_city_insights("Lyon") is None


class TestCreateAIService:
    def test_no_keys_returns_disabled(self) -> None:
        service = create_ai_service(_settings())
        assert isinstance(service, DisabledInsightsService)
        assert service.enabled is False

    def test_failed_init_falls_through_to_disabled(self, monkeypatch) -> None:
        from tourguide.services.ai_insights import service as ai_module

        class Broken(ScriptedInsightsService):
            def __init__(self, api_key=None, model_name=None):
                raise RuntimeError("sdk missing")

        monkeypatch.setitem(ai_module._PROVIDERS, "groq", ("groq_api_key", "groq_model", Broken))
        service = create_ai_service(_settings(groq_api_key="gsk-test"))
        assert isinstance(service, DisabledInsightsService)

    def test_preferred_provider_first(self, monkeypatch) -> None:
        from tourguide.services.ai_insights import service as ai_module

        created: list[tuple[str, str]] = []

        def fake(name):
            class Fake(ScriptedInsightsService):
                def __init__(self, api_key=None, model_name=None):
                    created.append((name, model_name))
                    super().__init__("{}")
            return Fake

        for name, (key_attr, model_attr, _) in list(ai_module._PROVIDERS.items()):
            monkeypatch.setitem(ai_module._PROVIDERS, name, (key_attr, model_attr, fake(name)))

        create_ai_service(
            _settings(ai_provider="gemini", anthropic_api_key="a", gemini_api_key="g")
        )
        assert created == [("gemini", "gemini-test")]

    def test_model_name_comes_from_settings(self, monkeypatch) -> None:
        from tourguide.services.ai_insights import service as ai_module

        seen: dict = {}

        class Recording(ScriptedInsightsService):
            def __init__(self, api_key=None, model_name=None):
                seen.update(api_key=api_key, model_name=model_name)
                super().__init__("{}")

        monkeypatch.setitem(
            ai_module._PROVIDERS, "groq", ("groq_api_key", "groq_model", Recording)
        )
        create_ai_service(_settings(groq_api_key="gsk-test", groq_model="llama-custom"))
        assert seen == {"api_key": "gsk-test", "model_name": "llama-custom"}
