from datetime import datetime, timezone
from typing import Literal, Optional

from pydantic import Field

from tafa.models.base import CamelModel

GOAL_CATEGORIES = [
    "Health & Fitness",
    "Career & Professional",
    "Financial",
    "Learning & Education",
    "Personal Development",
    "Relationships",
    "Travel & Adventure",
    "Creative & Hobbies",
    "Other",
]

Priority = Literal["low", "medium", "high"]
GoalStatus = Literal["active", "completed", "paused"]


class Goal(CamelModel):
    id: str
    title: str
    description: str = ""
    category: str
    progress: int = 0  # percent, 0-100
    deadline: str  # ISO date
    priority: Priority = "medium"
    status: GoalStatus = "active"
    milestones: list[str] = Field(default_factory=list)
    created_at: str = Field(default_factory=lambda: datetime.now(timezone.utc).isoformat())
    completed_at: Optional[str] = None
