"""
goal_service.py — Goal ledger
Manual progress percentages, completion status derived from progress, and
deadline pacing (overdue / urgent / approaching).
"""

from datetime import date, datetime, timezone
from typing import Optional

from tafa.models.goal import Goal
from tafa.services.habit_service import new_id, utc_today

EDITABLE_FIELDS = ("title", "description", "category", "deadline", "priority", "milestones", "status")


def _parse_day(value: str) -> Optional[date]:
    try:
        return date.fromisoformat(value[:10])
    except (TypeError, ValueError):
        return None


class GoalLedger:
    def __init__(self, goals: Optional[list[Goal]] = None):
        self.goals: list[Goal] = list(goals or [])

    def get(self, goal_id: str) -> Optional[Goal]:
        for g in self.goals:
            if g.id == goal_id:
                return g
        return None

    def add(
        self,
        title: str,
        category: str,
        deadline: str,
        priority: str = "medium",
        milestones: Optional[list[str]] = None,
        description: str = "",
    ) -> Optional[Goal]:
        """Create a goal; blank title, category or deadline is a no-op."""
        if not title or not title.strip() or not category or not category.strip() \
                or not deadline or not deadline.strip():
            return None
        g = Goal(
            id=new_id({x.id for x in self.goals}),
            title=title.strip(),
            description=(description or "").strip(),
            category=category,
            deadline=deadline,
            priority=priority,
            milestones=[m for m in (milestones or []) if m and m.strip()],
        )
        self.goals.append(g)
        return g

    def set_progress(self, goal_id: str, percent: int) -> Optional[Goal]:
        """Clamp to [0, 100]; crossing 100 completes, dropping below reactivates."""
        g = self.get(goal_id)
        if g is None:
            return None

        progress = max(0, min(100, int(percent)))
        g.progress = progress
        if progress >= 100 and g.status != "completed":
            g.status = "completed"
            g.completed_at = datetime.now(timezone.utc).isoformat()
        elif progress < 100 and g.status == "completed":
            g.status = "active"
            g.completed_at = None
        return g

    def update(self, goal_id: str, data: dict) -> Optional[Goal]:
        """Edit descriptive fields. Status follows progress; only 'paused'/'active' may be set by hand."""
        g = self.get(goal_id)
        if g is None:
            return None

        for k, v in data.items():
            if k not in EDITABLE_FIELDS or v is None:
                continue
            if k == "status":
                if g.progress < 100 and v in ("active", "paused"):
                    g.status = v
                continue
            if k == "milestones":
                v = [m for m in v if m and m.strip()]
            if k == "title":
                if not v.strip():
                    continue
                v = v.strip()
            setattr(g, k, v)
        return g

    def remove(self, goal_id: str) -> bool:
        before = len(self.goals)
        self.goals = [g for g in self.goals if g.id != goal_id]
        return len(self.goals) != before

    # ------------------------------------------------------------------
    def completed_count(self) -> int:
        return sum(1 for g in self.goals if g.status == "completed")


def days_until_deadline(goal: Goal, today: Optional[date] = None) -> Optional[int]:
    deadline = _parse_day(goal.deadline)
    if deadline is None:
        return None
    now = today or utc_today()
    return (deadline - now).days


def deadline_status(goal: Goal, today: Optional[date] = None) -> str:
    if goal.status == "completed":
        return "completed"
    days = days_until_deadline(goal, today)
    if days is None:
        return "normal"
    if days < 0:
        return "overdue"
    if days <= 7:
        return "urgent"
    if days <= 30:
        return "approaching"
    return "normal"
