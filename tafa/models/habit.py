from datetime import datetime, timezone

from pydantic import Field

from tafa.models.base import CamelModel

HABIT_CATEGORIES = [
    "Health & Fitness", "Learning", "Productivity", "Mindfulness", "Social", "Creative", "Other",
]


class Habit(CamelModel):
    id: str
    name: str
    category: str  # free text; HABIT_CATEGORIES is the default catalog
    streak: int = 0
    completed: bool = False  # derived: today in completions
    target: int = 30  # days
    completions: list[str] = Field(default_factory=list)  # ISO dates, unique
    created_at: str = Field(default_factory=lambda: datetime.now(timezone.utc).isoformat())
