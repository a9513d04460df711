"""
gamification_service.py — XP, levels, achievements & daily challenges
Recomputes the user's stats from the habit/goal ledgers on every change.
XP earned from the ledgers is a ratchet: only a positive delta over the stored
total is credited. Achievement and challenge rewards are added on top.
"""

import logging
from dataclasses import dataclass, field
from datetime import date, datetime, timezone
from typing import Callable, Optional

from tafa.models.gamification import Achievement, DailyChallenge, UserStats
from tafa.models.goal import Goal
from tafa.models.habit import Habit
from tafa.services.habit_service import utc_today

logger = logging.getLogger(__name__)

XP_PER_HABIT_TODAY = 10
XP_PER_GOAL_COMPLETED = 50
XP_PER_STREAK_DAY = 5
LEVEL_GROWTH = 1.2

ACHIEVEMENT_CATALOG = [
    {"id": "first-habit", "name": "Getting Started", "description": "Create your first habit",
     "icon": "target", "category": "habit", "requirement": 1, "xp_reward": 50},
    {"id": "week-streak", "name": "7-Day Warrior", "description": "Maintain a 7-day streak",
     "icon": "flame", "category": "streak", "requirement": 7, "xp_reward": 100},
    {"id": "month-streak", "name": "Consistency King", "description": "Maintain a 30-day streak",
     "icon": "crown", "category": "streak", "requirement": 30, "xp_reward": 500},
    {"id": "goal-crusher", "name": "Goal Crusher", "description": "Complete 5 goals",
     "icon": "trophy", "category": "goal", "requirement": 5, "xp_reward": 300},
    {"id": "habit-master", "name": "Habit Master", "description": "Complete 100 habit instances",
     "icon": "medal", "category": "consistency", "requirement": 100, "xp_reward": 1000},
    {"id": "level-10", "name": "Rising Star", "description": "Reach level 10",
     "icon": "star", "category": "milestone", "requirement": 10, "xp_reward": 200},
]

# achievement id -> statistic it is measured against
ACHIEVEMENT_STATISTICS: dict[str, Callable[[UserStats, list[Habit]], int]] = {
    "first-habit": lambda stats, habits: len(habits),
    "week-streak": lambda stats, habits: stats.streak_record,
    "month-streak": lambda stats, habits: stats.streak_record,
    "goal-crusher": lambda stats, habits: stats.goals_completed,
    "habit-master": lambda stats, habits: stats.habits_completed,
    "level-10": lambda stats, habits: stats.level,
}


def default_achievements() -> list[Achievement]:
    return [Achievement(**entry) for entry in ACHIEVEMENT_CATALOG]


def daily_challenges(today: date, habit_count: int) -> list[DailyChallenge]:
    d = today.isoformat()
    return [
        DailyChallenge(id="daily-complete-3", title="Triple Threat", description="Complete 3 habits today",
                       type="completion", target=3, xp_reward=75, date=d),
        DailyChallenge(id="daily-goal-progress", title="Goal Getter", description="Make progress on any goal",
                       type="goal", target=1, xp_reward=50, date=d),
        DailyChallenge(id="daily-perfect", title="Perfect Day", description="Complete all your habits",
                       type="completion", target=habit_count or 1, xp_reward=150, date=d),
    ]


def level_up(stats: UserStats) -> int:
    """Consume xp into levels; returns the number of levels gained."""
    gained = 0
    while stats.xp >= stats.xp_to_next_level:
        stats.xp -= stats.xp_to_next_level
        stats.level += 1
        stats.xp_to_next_level = int(stats.xp_to_next_level * LEVEL_GROWTH)
        gained += 1
    return gained


def ledger_xp(habits: list[Habit], goals: list[Goal]) -> int:
    completed_today = sum(1 for h in habits if h.completed)
    completed_goals = sum(1 for g in goals if g.status == "completed")
    longest = max((h.streak for h in habits), default=0)
    return (
        completed_today * XP_PER_HABIT_TODAY
        + completed_goals * XP_PER_GOAL_COMPLETED
        + longest * XP_PER_STREAK_DAY
    )


@dataclass
class GamificationUpdate:
    stats: UserStats
    achievements: list[Achievement]
    challenges: list[DailyChallenge]
    xp_gained: int = 0
    reward_xp: int = 0
    levels_gained: int = 0
    unlocked: list[Achievement] = field(default_factory=list)
    completed_challenges: list[DailyChallenge] = field(default_factory=list)


def _log_xp(amount: int):
    logger.info(f"+{amount} XP earned!")


class GamificationEngine:
    def __init__(self, on_xp_gained: Optional[Callable[[int], None]] = _log_xp):
        self.on_xp_gained = on_xp_gained

    @staticmethod
    def merge_catalog(saved: list[Achievement]) -> list[Achievement]:
        """Catalog order and rewards win; unlock state is carried over from *saved*."""
        by_id = {a.id: a for a in saved}
        merged = []
        for a in default_achievements():
            prev = by_id.get(a.id)
            if prev is not None and prev.unlocked:
                a.unlocked = True
                a.unlocked_at = prev.unlocked_at
            merged.append(a)
        return merged

    def recompute(
        self,
        habits: list[Habit],
        goals: list[Goal],
        stats: Optional[UserStats] = None,
        achievements: Optional[list[Achievement]] = None,
        challenges: Optional[list[DailyChallenge]] = None,
        today: Optional[date] = None,
    ) -> GamificationUpdate:
        d = today or utc_today()
        stats = stats.model_copy() if stats is not None else UserStats()
        achievements = self.merge_catalog([a.model_copy() for a in (achievements or [])])
        challenges = [c.model_copy() for c in (challenges or [])]
        if not challenges or any(c.date != d.isoformat() for c in challenges):
            challenges = daily_challenges(d, len(habits))

        longest = max((h.streak for h in habits), default=0)
        stats.streak_record = max(stats.streak_record, longest)
        stats.habits_completed = sum(len(h.completions) for h in habits)
        stats.goals_completed = sum(1 for g in goals if g.status == "completed")
        stats.days_active = max(1, len({c for h in habits for c in h.completions}))

        update = GamificationUpdate(stats=stats, achievements=achievements, challenges=challenges)

        earned = ledger_xp(habits, goals)
        if earned > stats.total_xp:
            update.xp_gained = earned - stats.total_xp
            stats.total_xp = earned
            stats.xp += update.xp_gained
        update.levels_gained += level_up(stats)

        # Rewards can level the user up, which can unlock "Rising Star"
        changed = True
        while changed:
            changed = self._evaluate_achievements(update, habits)
            changed = self._evaluate_challenges(update, habits, goals) or changed
            update.levels_gained += level_up(stats)

        if update.xp_gained > 0 and self.on_xp_gained is not None:
            self.on_xp_gained(update.xp_gained)
        for a in update.unlocked:
            logger.info(f"Achievement unlocked: {a.name} (+{a.xp_reward} XP)")
        return update

    # ------------------------------------------------------------------
    def _reward(self, update: GamificationUpdate, amount: int):
        update.stats.xp += amount
        update.stats.total_xp += amount
        update.reward_xp += amount

    def _evaluate_achievements(self, update: GamificationUpdate, habits: list[Habit]) -> bool:
        changed = False
        now = datetime.now(timezone.utc).isoformat()
        for a in update.achievements:
            statistic = ACHIEVEMENT_STATISTICS.get(a.id)
            if statistic is None:
                continue
            value = statistic(update.stats, habits)
            a.progress = min(value, a.requirement)
            if value >= a.requirement and not a.unlocked:
                a.unlocked = True
                a.unlocked_at = now
                self._reward(update, a.xp_reward)
                update.unlocked.append(a)
                changed = True
        return changed

    def _evaluate_challenges(self, update: GamificationUpdate, habits: list[Habit], goals: list[Goal]) -> bool:
        changed = False
        completed_today = sum(1 for h in habits if h.completed)
        for c in update.challenges:
            if c.id == "daily-complete-3":
                progress = completed_today
            elif c.id == "daily-goal-progress":
                progress = 1 if any(g.progress > 0 for g in goals) else 0
            elif c.id == "daily-perfect":
                if not c.completed:
                    c.target = len(habits) or 1
                progress = completed_today
            else:
                continue
            c.progress = min(progress, c.target)
            if progress >= c.target and not c.completed:
                c.completed = True
                self._reward(update, c.xp_reward)
                update.completed_challenges.append(c)
                changed = True
        return changed
