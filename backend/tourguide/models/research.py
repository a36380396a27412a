"""Models for the city research briefing.

All fields serialize with the camelCase names the client reads.
"""

from enum import Enum
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field

from .core import Coordinates


class InsightsSource(str, Enum):
    """Which content tier produced a briefing's insights."""

    AI = "ai"
    SALVAGED = "salvaged"
    FALLBACK = "fallback"


class CityInsights(BaseModel):
    """Structured travel facts produced by a generative-text provider.

    Every field is optional because providers return partial documents;
    the research assistant fills gaps with per-field defaults.
    """

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    summary: Optional[str] = None
    recommendations: Optional[list[str]] = None
    hidden_gems: Optional[list[str]] = Field(None, alias="hiddenGems")
    cultural_tips: Optional[list[str]] = Field(None, alias="culturalTips")
    culture: Optional[list[str]] = None
    food: Optional[list[str]] = None
    transportation: Optional[list[str]] = None
    safety: Optional[str] = None
    budget: Optional[str] = None
    best_time_to_visit: Optional[str] = Field(None, alias="bestTimeToVisit")
    weather: Optional[str] = None
    highlights: Optional[list[str]] = None
    source: InsightsSource = Field(InsightsSource.AI, exclude=True)


class BriefingInsights(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    summary: str
    recommendations: list[str]
    hidden_gems: list[str] = Field(..., alias="hiddenGems")
    cultural_tips: list[str] = Field(..., alias="culturalTips")


class CityBriefing(BaseModel):
    """Complete travel briefing returned by ``research-city``."""

    model_config = ConfigDict(populate_by_name=True)

    city: str
    country: str
    coordinates: Optional[Coordinates] = None
    population: str
    currency: str
    language: list[str]
    best_time_to_visit: str = Field(..., alias="bestTimeToVisit")
    weather: str
    highlights: list[str]
    culture: list[str]
    food: list[str]
    transportation: list[str]
    safety: str
    budget: str
    news: list[dict[str, Any]] = Field(default_factory=list)
    images: list[str] = Field(default_factory=list)
    ai_insights: BriefingInsights = Field(..., alias="aiInsights")
    insights_source: InsightsSource = Field(..., alias="insightsSource")
    last_updated: str = Field(..., alias="lastUpdated")
