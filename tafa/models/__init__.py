# Import all models so they register with SQLAlchemy Base.metadata

from tafa.models.kv_entry import KVEntry
from tafa.models.habit import Habit, HABIT_CATEGORIES
from tafa.models.goal import Goal, GOAL_CATEGORIES
from tafa.models.gamification import UserStats, Achievement, DailyChallenge
from tafa.models.insight import Insight, WeeklyReport, SmartSuggestion, ChatTurn

__all__ = [
    "KVEntry",
    "Habit",
    "HABIT_CATEGORIES",
    "Goal",
    "GOAL_CATEGORIES",
    "UserStats",
    "Achievement",
    "DailyChallenge",
    "Insight",
    "WeeklyReport",
    "SmartSuggestion",
    "ChatTurn",
]
