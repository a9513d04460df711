from datetime import date, timedelta

from tafa.models.habit import Habit
from tafa.services.habit_service import HabitLedger, new_id, streak_milestone

TODAY = date(2026, 10, 19)


def _days_before(n):
    return (TODAY - timedelta(days=n)).isoformat()


def test_add_ignores_blank_name_or_category():
    ledger = HabitLedger()
    assert ledger.add("   ", "Learning") is None
    assert ledger.add("Read", "") is None
    assert ledger.habits == []

    habit = ledger.add("  Read 20 pages ", "Learning")
    assert habit.name == "Read 20 pages"
    assert habit.streak == 0
    assert habit.target == 30
    assert habit.completions == []


def test_first_completion_starts_streak():
    ledger = HabitLedger()
    habit = ledger.add("Meditate", "Mindfulness")
    ledger.toggle_completion(habit.id, TODAY)
    assert habit.streak == 1
    assert habit.completed is True
    assert habit.completions == [TODAY.isoformat()]


def test_completion_after_yesterday_extends_streak():
    habit = Habit(id="h1", name="Run", category="Health & Fitness", streak=3,
                  completions=[_days_before(3), _days_before(2), _days_before(1)])
    ledger = HabitLedger([habit])
    ledger.toggle_completion("h1", TODAY)
    assert habit.streak == 4


def test_completion_after_gap_restarts_at_one():
    habit = Habit(id="h1", name="Run", category="Health & Fitness", streak=5,
                  completions=[_days_before(3)])
    ledger = HabitLedger([habit])
    ledger.toggle_completion("h1", TODAY)
    assert habit.streak == 1


def test_toggle_twice_restores_completions():
    habit = Habit(id="h1", name="Run", category="Health & Fitness", streak=2,
                  completions=[_days_before(2), _days_before(1)])
    before = list(habit.completions)
    ledger = HabitLedger([habit])

    ledger.toggle_completion("h1", TODAY)
    ledger.toggle_completion("h1", TODAY)

    assert habit.completions == before
    assert habit.completed is False
    assert habit.streak == 2


def test_uncomplete_never_goes_below_zero():
    habit = Habit(id="h1", name="Run", category="Other", streak=0, completions=[TODAY.isoformat()])
    HabitLedger([habit]).toggle_completion("h1", TODAY)
    assert habit.streak == 0


def test_toggle_unknown_id_returns_none():
    assert HabitLedger().toggle_completion("missing", TODAY) is None


def test_sync_today_rederives_completed_flag():
    habit = Habit(id="h1", name="Run", category="Other", completed=True, completions=[_days_before(1)])
    ledger = HabitLedger([habit])
    ledger.sync_today(TODAY)
    assert habit.completed is False


def test_remove():
    ledger = HabitLedger([Habit(id="h1", name="Run", category="Other")])
    assert ledger.remove("h1") is True
    assert ledger.remove("h1") is False


def test_new_id_is_unique():
    first = new_id(set())
    assert new_id({first}) != first


def test_streak_milestones():
    assert streak_milestone(7) == 7
    assert streak_milestone(8) is None
