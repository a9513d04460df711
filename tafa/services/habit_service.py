"""
habit_service.py — Habit ledger & streaks
Owns the habit list, toggles today's completion and keeps the streak counter
with the incremental rule (no full-history recount).
"""

import time
from datetime import date, datetime, timedelta, timezone
from typing import Optional

from tafa.models.habit import Habit

STREAK_MILESTONES = [7, 14, 21, 30, 60, 90, 100, 365]


def utc_today() -> date:
    return datetime.now(timezone.utc).date()


def new_id(existing: set[str]) -> str:
    """Millisecond timestamp id, bumped until unique within *existing*."""
    candidate = int(time.time() * 1000)
    while str(candidate) in existing:
        candidate += 1
    return str(candidate)


def streak_milestone(streak: int) -> Optional[int]:
    return streak if streak in STREAK_MILESTONES else None


class HabitLedger:
    def __init__(self, habits: Optional[list[Habit]] = None):
        self.habits: list[Habit] = list(habits or [])

    def get(self, habit_id: str) -> Optional[Habit]:
        for h in self.habits:
            if h.id == habit_id:
                return h
        return None

    def add(self, name: str, category: str, target: int = 30) -> Optional[Habit]:
        """Create a habit; blank name or category is a no-op (returns None)."""
        if not name or not name.strip() or not category or not category.strip():
            return None
        h = Habit(
            id=new_id({x.id for x in self.habits}),
            name=name.strip(),
            category=category,
            target=target,
        )
        self.habits.append(h)
        return h

    def toggle_completion(self, habit_id: str, today: Optional[date] = None) -> Optional[Habit]:
        """Flip today's membership in the completion set and adjust the streak.

        Off: streak - 1 (floor 0). On: streak + 1 when yesterday is completed or
        the streak is 0, otherwise a fresh start at 1.
        """
        h = self.get(habit_id)
        if h is None:
            return None

        d = today or utc_today()
        today_str = d.isoformat()
        yesterday_str = (d - timedelta(days=1)).isoformat()

        if today_str in h.completions:
            completions = [c for c in h.completions if c != today_str]
            streak = max(0, h.streak - 1)
        else:
            completions = h.completions + [today_str]
            if yesterday_str in h.completions or h.streak == 0:
                streak = h.streak + 1
            else:
                streak = 1

        h.completions = completions
        h.streak = streak
        h.completed = today_str in completions
        return h

    def remove(self, habit_id: str) -> bool:
        before = len(self.habits)
        self.habits = [h for h in self.habits if h.id != habit_id]
        return len(self.habits) != before

    def sync_today(self, today: Optional[date] = None):
        """Re-derive the completed flag after a day rollover."""
        today_str = (today or utc_today()).isoformat()
        for h in self.habits:
            h.completed = today_str in h.completions

    # ------------------------------------------------------------------
    def completed_today(self) -> int:
        return sum(1 for h in self.habits if h.completed)

    def longest_streak(self) -> int:
        return max((h.streak for h in self.habits), default=0)

    def total_completions(self) -> int:
        return sum(len(h.completions) for h in self.habits)
