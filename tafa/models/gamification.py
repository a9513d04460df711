from typing import Literal, Optional

from pydantic import Field

from tafa.models.base import CamelModel


class UserStats(CamelModel):
    level: int = 1
    xp: int = 0  # XP inside the current level
    xp_to_next_level: int = 100
    total_xp: int = Field(0, alias="totalXP")  # cumulative, never decreases
    streak_record: int = 0
    habits_completed: int = 0  # cumulative completions over all habits
    goals_completed: int = 0
    days_active: int = 1


class Achievement(CamelModel):
    id: str
    name: str
    description: str
    icon: str = "star"
    category: Literal["habit", "goal", "streak", "consistency", "milestone"]
    requirement: int
    xp_reward: int
    progress: int = 0
    unlocked: bool = False
    unlocked_at: Optional[str] = None


class DailyChallenge(CamelModel):
    id: str
    title: str
    description: str
    type: Literal["habit", "goal", "streak", "completion"]
    target: int
    xp_reward: int
    date: str  # ISO date the challenge belongs to
    progress: int = 0
    completed: bool = False
