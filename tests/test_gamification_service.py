from datetime import date, timedelta

from tafa.models.gamification import UserStats
from tafa.models.goal import Goal
from tafa.models.habit import Habit
from tafa.services.gamification_service import (
    GamificationEngine,
    daily_challenges,
    default_achievements,
    ledger_xp,
    level_up,
)
from tafa.services.habit_service import HabitLedger

TODAY = date(2026, 10, 19)


def _six_day_habit():
    completions = [(TODAY - timedelta(days=n)).isoformat() for n in range(6, 0, -1)]
    return Habit(id="h1", name="Morning run", category="Health & Fitness", streak=6, completions=completions)


def test_level_up_leaves_xp_below_threshold():
    stats = UserStats(xp=250)
    assert level_up(stats) == 2
    assert stats.level == 3
    assert stats.xp == 30
    assert stats.xp_to_next_level == 144
    assert stats.xp < stats.xp_to_next_level


def test_ledger_xp_formula():
    habits = [Habit(id="a", name="A", category="x", streak=4, completed=True),
              Habit(id="b", name="B", category="x", streak=2)]
    goals = [Goal(id="g", title="G", category="x", deadline="2027-01-01", progress=100, status="completed")]
    assert ledger_xp(habits, goals) == 10 + 50 + 4 * 5


def test_seventh_day_unlocks_week_warrior():
    habit = _six_day_habit()
    HabitLedger([habit]).toggle_completion("h1", TODAY)
    assert habit.streak == 7

    gained = []
    engine = GamificationEngine(on_xp_gained=gained.append)
    update = engine.recompute([habit], [], today=TODAY)

    unlocked = {a.id for a in update.unlocked}
    assert "week-streak" in unlocked
    assert "first-habit" in unlocked
    warrior = next(a for a in update.achievements if a.id == "week-streak")
    assert warrior.unlocked_at is not None
    assert warrior.xp_reward == 100

    # 10 for today + 7 * 5 streak; rewards 50 + 100 + 150 (perfect day)
    assert update.xp_gained == 45
    assert update.reward_xp == 300
    assert gained == [45]
    assert update.stats.total_xp == 345
    assert update.stats.level == 3
    assert update.stats.xp == 125
    assert update.stats.streak_record == 7
    assert update.stats.days_active == 7


def test_recompute_is_idempotent_for_rewards():
    habit = _six_day_habit()
    HabitLedger([habit]).toggle_completion("h1", TODAY)
    engine = GamificationEngine(on_xp_gained=None)
    first = engine.recompute([habit], [], today=TODAY)
    second = engine.recompute([habit], [], stats=first.stats, achievements=first.achievements,
                              challenges=first.challenges, today=TODAY)
    assert second.xp_gained == 0
    assert second.reward_xp == 0
    assert second.unlocked == []
    assert second.stats.total_xp == first.stats.total_xp


def test_total_xp_never_decreases_after_undo():
    habit = _six_day_habit()
    ledger = HabitLedger([habit])
    engine = GamificationEngine(on_xp_gained=None)

    ledger.toggle_completion("h1", TODAY)
    done = engine.recompute([habit], [], today=TODAY)
    ledger.toggle_completion("h1", TODAY)
    undone = engine.recompute([habit], [], stats=done.stats, achievements=done.achievements,
                              challenges=done.challenges, today=TODAY)

    assert habit.streak == 6
    assert undone.stats.total_xp == done.stats.total_xp
    assert undone.xp_gained == 0


def test_goal_completion_credits_goal_xp_and_goal_getter():
    goal = Goal(id="g", title="Ship it", category="x", deadline="2027-01-01", progress=100, status="completed")
    update = GamificationEngine(on_xp_gained=None).recompute([], [goal], today=TODAY)
    assert update.xp_gained == 50
    assert [c.id for c in update.completed_challenges] == ["daily-goal-progress"]
    assert update.stats.goals_completed == 1


def test_stale_challenges_are_replaced():
    old = daily_challenges(TODAY - timedelta(days=1), 2)
    for c in old:
        c.completed = True
    update = GamificationEngine(on_xp_gained=None).recompute([], [], challenges=old, today=TODAY)
    assert all(c.date == TODAY.isoformat() for c in update.challenges)
    assert not any(c.completed for c in update.challenges)


def test_merge_catalog_keeps_unlock_state():
    saved = default_achievements()
    saved[0].unlocked = True
    saved[0].unlocked_at = "2026-10-01T00:00:00+00:00"
    saved[0].xp_reward = 1  # catalog value wins
    merged = GamificationEngine.merge_catalog(saved)
    assert merged[0].unlocked is True
    assert merged[0].unlocked_at == "2026-10-01T00:00:00+00:00"
    assert merged[0].xp_reward == 50
    assert len(merged) == 6
