"""AI city insights: Anthropic, Groq or Gemini, disabled without a key."""

from .service import (
    AIInsightsService,
    AnthropicInsightsService,
    DisabledInsightsService,
    GeminiInsightsService,
    GroqInsightsService,
    create_ai_service,
)

__all__ = [
    "AIInsightsService",
    "AnthropicInsightsService",
    "DisabledInsightsService",
    "GeminiInsightsService",
    "GroqInsightsService",
    "create_ai_service",
]
