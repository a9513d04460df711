"""
dashboard_service.py — Application state & ledger orchestration
Loads the persisted ledgers, applies one mutation, saves the changed keys and
re-runs the gamification engine. One controller per request/session.
"""

import logging
from dataclasses import dataclass, field
from datetime import date
from typing import Optional, Type, TypeVar

from pydantic import ValidationError

from tafa.config import ACHIEVEMENTS_KEY, CHALLENGES_KEY, GOALS_KEY, HABITS_KEY, STATS_KEY
from tafa.models.base import CamelModel
from tafa.models.gamification import Achievement, DailyChallenge, UserStats
from tafa.models.goal import Goal
from tafa.models.habit import Habit
from tafa.services.gamification_service import GamificationEngine, GamificationUpdate, daily_challenges
from tafa.services.goal_service import GoalLedger
from tafa.services.habit_service import HabitLedger, streak_milestone, utc_today
from tafa.services.storage_service import StorageAdapter

logger = logging.getLogger(__name__)

M = TypeVar("M", bound=CamelModel)


@dataclass
class AppState:
    habits: list[Habit] = field(default_factory=list)
    goals: list[Goal] = field(default_factory=list)
    stats: UserStats = field(default_factory=UserStats)
    achievements: list[Achievement] = field(default_factory=list)
    challenges: list[DailyChallenge] = field(default_factory=list)


@dataclass
class MutationResult:
    record: Optional[CamelModel] = None
    update: Optional[GamificationUpdate] = None
    milestone: Optional[int] = None

    @property
    def xp_gained(self) -> int:
        if self.update is None:
            return 0
        return self.update.xp_gained + self.update.reward_xp

    def to_json(self) -> dict:
        data = {
            "status": "success",
            "data": self.record.to_json() if self.record is not None else None,
            "xpGained": self.xp_gained,
            "levelsGained": self.update.levels_gained if self.update else 0,
            "unlockedAchievements": [a.to_json() for a in self.update.unlocked] if self.update else [],
            "completedChallenges": [c.to_json() for c in self.update.completed_challenges] if self.update else [],
        }
        if self.milestone is not None:
            data["milestone"] = self.milestone
        return data


def _parse_list(raw, model: Type[M], key: str) -> list[M]:
    if not isinstance(raw, list):
        if raw is not None:
            logger.error(f"Saved '{key}' is not a list, ignoring it")
        return []
    items = []
    for entry in raw:
        try:
            items.append(model.model_validate(entry))
        except ValidationError as e:
            logger.error(f"Skipping invalid entry in '{key}': {e}")
    return items


class DashboardController:
    def __init__(self, storage: StorageAdapter, engine: Optional[GamificationEngine] = None,
                 today: Optional[date] = None):
        self.storage = storage
        self.engine = engine or GamificationEngine()
        self.today = today
        self.state = AppState()

    @property
    def day(self) -> date:
        return self.today or utc_today()

    # ── Load / save ──────────────────────────────────────────────
    def load(self) -> AppState:
        habits = _parse_list(self.storage.load(HABITS_KEY), Habit, HABITS_KEY)
        goals = _parse_list(self.storage.load(GOALS_KEY), Goal, GOALS_KEY)

        raw_stats = self.storage.load(STATS_KEY)
        try:
            stats = UserStats.model_validate(raw_stats) if raw_stats is not None else UserStats()
        except ValidationError as e:
            logger.error(f"Invalid saved '{STATS_KEY}', starting fresh: {e}")
            stats = UserStats()

        achievements = self.engine.merge_catalog(
            _parse_list(self.storage.load(ACHIEVEMENTS_KEY), Achievement, ACHIEVEMENTS_KEY))
        challenges = _parse_list(self.storage.load(CHALLENGES_KEY), DailyChallenge, CHALLENGES_KEY)
        if not challenges or any(c.date != self.day.isoformat() for c in challenges):
            challenges = daily_challenges(self.day, len(habits))

        ledger = HabitLedger(habits)
        ledger.sync_today(self.day)

        self.state = AppState(habits=ledger.habits, goals=goals, stats=stats,
                              achievements=achievements, challenges=challenges)
        return self.state

    def save_habits(self) -> bool:
        return self.storage.save(HABITS_KEY, [h.to_json() for h in self.state.habits])

    def save_goals(self) -> bool:
        return self.storage.save(GOALS_KEY, [g.to_json() for g in self.state.goals])

    def save_gamification(self) -> bool:
        ok = self.storage.save(STATS_KEY, self.state.stats.to_json())
        ok = self.storage.save(ACHIEVEMENTS_KEY, [a.to_json() for a in self.state.achievements]) and ok
        return self.storage.save(CHALLENGES_KEY, [c.to_json() for c in self.state.challenges]) and ok

    def rebuild(self) -> GamificationUpdate:
        """Re-run the engine over the current ledgers and persist the result."""
        update = self.engine.recompute(
            self.state.habits,
            self.state.goals,
            stats=self.state.stats,
            achievements=self.state.achievements,
            challenges=self.state.challenges,
            today=self.day,
        )
        self.state.stats = update.stats
        self.state.achievements = update.achievements
        self.state.challenges = update.challenges
        self.save_gamification()
        return update

    # ── Habits ───────────────────────────────────────────────────
    def add_habit(self, name: str, category: str, target: int = 30) -> MutationResult:
        ledger = HabitLedger(self.state.habits)
        habit = ledger.add(name, category, target)
        if habit is None:
            return MutationResult()
        self.state.habits = ledger.habits
        self.save_habits()
        logger.info(f"Habit added: {habit.name} ({habit.category})")
        return MutationResult(record=habit, update=self.rebuild())

    def toggle_habit(self, habit_id: str) -> Optional[MutationResult]:
        ledger = HabitLedger(self.state.habits)
        habit = ledger.toggle_completion(habit_id, self.day)
        if habit is None:
            return None
        self.save_habits()
        milestone = streak_milestone(habit.streak) if habit.completed else None
        if milestone:
            logger.info(f"Streak milestone reached: {habit.name} hit {milestone} days")
        return MutationResult(record=habit, update=self.rebuild(), milestone=milestone)

    def remove_habit(self, habit_id: str) -> Optional[MutationResult]:
        ledger = HabitLedger(self.state.habits)
        if not ledger.remove(habit_id):
            return None
        self.state.habits = ledger.habits
        self.save_habits()
        return MutationResult(update=self.rebuild())

    # ── Goals ────────────────────────────────────────────────────
    def add_goal(self, title: str, category: str, deadline: str, priority: str = "medium",
                 milestones: Optional[list[str]] = None, description: str = "") -> MutationResult:
        ledger = GoalLedger(self.state.goals)
        goal = ledger.add(title, category, deadline, priority, milestones, description)
        if goal is None:
            return MutationResult()
        self.state.goals = ledger.goals
        self.save_goals()
        logger.info(f"Goal added: {goal.title} (due {goal.deadline})")
        return MutationResult(record=goal, update=self.rebuild())

    def set_goal_progress(self, goal_id: str, percent: int) -> Optional[MutationResult]:
        ledger = GoalLedger(self.state.goals)
        goal = ledger.set_progress(goal_id, percent)
        if goal is None:
            return None
        self.save_goals()
        return MutationResult(record=goal, update=self.rebuild())

    def update_goal(self, goal_id: str, data: dict) -> Optional[MutationResult]:
        ledger = GoalLedger(self.state.goals)
        goal = ledger.update(goal_id, data)
        if goal is None:
            return None
        self.save_goals()
        return MutationResult(record=goal, update=self.rebuild())

    def remove_goal(self, goal_id: str) -> Optional[MutationResult]:
        ledger = GoalLedger(self.state.goals)
        if not ledger.remove(goal_id):
            return None
        self.state.goals = ledger.goals
        self.save_goals()
        return MutationResult(update=self.rebuild())
