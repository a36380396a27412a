"""City research briefings."""

from .service import CityResearchAssistant, fallback_insights

__all__ = ["CityResearchAssistant", "fallback_insights"]
