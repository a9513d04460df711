from datetime import datetime, timezone
from typing import Literal

from pydantic import Field

from tafa.models.base import CamelModel


def _now() -> str:
    return datetime.now(timezone.utc).isoformat()


class Insight(CamelModel):
    id: str
    type: Literal["habit", "goal", "pattern", "recommendation"]
    title: str
    content: str
    priority: Literal["low", "medium", "high"]
    created_at: str = Field(default_factory=_now)


class WeeklyReport(CamelModel):
    id: str
    week_start: str
    week_end: str
    summary: str
    achievements: list[str] = Field(default_factory=list)
    recommendations: list[str] = Field(default_factory=list)
    created_at: str = Field(default_factory=_now)


class SmartSuggestion(CamelModel):
    id: str
    title: str
    description: str
    category: Literal["productivity", "health", "learning", "mindfulness", "social", "custom"]
    difficulty: Literal["easy", "medium", "hard"]
    estimated_time: int  # minutes
    frequency: Literal["daily", "weekly", "monthly"]
    impact_score: int  # 1-10
    ai_reasoning: str
    related_goals: list[str] = Field(default_factory=list)
    suggested_time: Literal["morning", "afternoon", "evening", "anytime"] = "anytime"
    tags: list[str] = Field(default_factory=list)


class ChatTurn(CamelModel):
    type: Literal["user", "ai"]
    content: str
