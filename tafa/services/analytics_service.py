"""
analytics_service.py — Chart series & dashboard numbers
Pure functions over habit/goal snapshots; nothing here is cached or stored.
"""

import math
from datetime import date, timedelta
from typing import Optional

from tafa.models.goal import Goal
from tafa.models.habit import Habit
from tafa.services.goal_service import days_until_deadline
from tafa.services.habit_service import utc_today

TIME_RANGES = (7, 30, 90)
HEATMAP_DAYS = 30
GOAL_LABEL_LENGTH = 20

CHART_COLORS = ["#164e63", "#8b5cf6", "#ec4899", "#6b7280", "#10b981", "#f59e0b"]


def round_half_up(value: float, digits: int = 0) -> float:
    scale = 10 ** digits
    return math.floor(value * scale + 0.5) / scale


def _day_label(d: date) -> str:
    return f"{d.strftime('%b')} {d.day}"


def _completions_on(habits: list[Habit], day: str) -> int:
    return sum(1 for h in habits if day in h.completions)


def _average_streak(habits: list[Habit]) -> float:
    return sum(h.streak for h in habits) / len(habits) if habits else 0


def habit_time_series(habits: list[Habit], days: int = 30, today: Optional[date] = None) -> list[dict]:
    """One point per day for the last *days* days, oldest first."""
    d = today or utc_today()
    avg_streak = int(round_half_up(_average_streak(habits)))
    series = []
    for offset in range(days - 1, -1, -1):
        day = d - timedelta(days=offset)
        series.append({
            "date": _day_label(day),
            "isoDate": day.isoformat(),
            "completions": _completions_on(habits, day.isoformat()),
            "streaks": avg_streak,
            "totalHabits": len(habits),
        })
    return series


def category_breakdown(habits: list[Habit]) -> list[dict]:
    totals: dict[str, dict] = {}
    for h in habits:
        t = totals.setdefault(h.category, {"count": 0, "completions": 0, "streaks": 0})
        t["count"] += 1
        t["completions"] += len(h.completions)
        t["streaks"] += h.streak

    data = [
        {
            "category": category,
            "count": t["count"],
            "completionRate": round_half_up(t["completions"] / t["count"], 1),
            "averageStreak": int(round_half_up(t["streaks"] / t["count"])),
        }
        for category, t in totals.items()
    ]
    # stable sort keeps first-seen order among equal counts
    return sorted(data, key=lambda c: c["count"], reverse=True)


def category_distribution(habits: list[Habit]) -> list[dict]:
    return [
        {"name": c["category"], "value": c["count"], "color": CHART_COLORS[i % len(CHART_COLORS)]}
        for i, c in enumerate(category_breakdown(habits))
    ]


def goal_progress_bars(goals: list[Goal], today: Optional[date] = None) -> list[dict]:
    bars = []
    for g in goals:
        days_left = days_until_deadline(g, today)
        label = g.title if len(g.title) <= GOAL_LABEL_LENGTH else g.title[:GOAL_LABEL_LENGTH] + "..."
        bars.append({
            "goal": label,
            "progress": g.progress,
            "target": 100,
            "category": g.category,
            "daysLeft": max(0, days_left or 0),
            "priority": g.priority,
        })
    return bars


def completion_heatmap(habits: list[Habit], today: Optional[date] = None) -> list[dict]:
    d = today or utc_today()
    cells = []
    for offset in range(HEATMAP_DAYS - 1, -1, -1):
        day = d - timedelta(days=offset)
        done = _completions_on(habits, day.isoformat())
        rate = done / len(habits) * 100 if habits else 0
        cells.append({
            "date": day.day,
            "isoDate": day.isoformat(),
            "day": day.strftime("%a"),
            "completionRate": int(round_half_up(rate)),
            "completions": done,
        })
    return cells


def overview(habits: list[Habit], goals: list[Goal]) -> dict:
    completed_today = sum(1 for h in habits if h.completed)
    habit_progress = [h.streak / h.target * 100 if h.target else 0 for h in habits]
    completed_goals = sum(1 for g in goals if g.status == "completed")
    categories = category_breakdown(habits)

    return {
        "totalHabits": len(habits),
        "completedToday": completed_today,
        "longestStreak": max((h.streak for h in habits), default=0),
        "averageHabitProgress": int(round_half_up(sum(habit_progress) / len(habit_progress))) if habits else 0,
        "totalGoals": len(goals),
        "completedGoals": completed_goals,
        "averageGoalProgress": int(round_half_up(sum(g.progress for g in goals) / len(goals))) if goals else 0,
        "totalCompletions": sum(len(h.completions) for h in habits),
        "todayCompletionRate": int(round_half_up(completed_today / len(habits) * 100)) if habits else 0,
        "goalsOnTrack": sum(1 for g in goals if g.progress >= 50),
        "topCategory": categories[0]["category"] if categories else None,
    }


def top_streaks(habits: list[Habit], limit: int = 5) -> list[Habit]:
    return sorted(habits, key=lambda h: h.streak, reverse=True)[:limit]


def goals_needing_attention(goals: list[Goal], limit: int = 5) -> list[Goal]:
    """Goals under half way, least progressed first."""
    return sorted((g for g in goals if g.progress < 50), key=lambda g: g.progress)[:limit]
