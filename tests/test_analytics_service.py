from datetime import date

from tafa.models.goal import Goal
from tafa.models.habit import Habit
from tafa.services import analytics_service
from tafa.services.report_service import build_report, report_filename

TODAY = date(2026, 10, 19)


def _habits():
    return [
        Habit(id="1", name="Run", category="Health & Fitness", streak=3, completed=True, target=30,
              completions=["2026-10-17", "2026-10-18", "2026-10-19"]),
        Habit(id="2", name="Read", category="Learning", streak=0, target=10, completions=["2026-10-18"]),
        Habit(id="3", name="Lift", category="Health & Fitness", streak=2, target=30,
              completions=["2026-10-18", "2026-10-19"]),
    ]


def _goals():
    return [
        Goal(id="g1", title="Run a full marathon in Berlin", category="Health & Fitness",
             deadline="2026-10-29", progress=40),
        Goal(id="g2", title="Save", category="Financial", deadline="2026-01-01", progress=100,
             status="completed"),
    ]


def test_time_series_covers_range_oldest_first():
    series = analytics_service.habit_time_series(_habits(), 7, TODAY)
    assert len(series) == 7
    assert series[-1]["date"] == "Oct 19"
    assert series[-1]["completions"] == 2
    assert series[-2]["completions"] == 3
    assert series[0]["completions"] == 0
    assert all(p["totalHabits"] == 3 and p["streaks"] == 2 for p in series)


def test_category_breakdown_sorted_by_count():
    cats = analytics_service.category_breakdown(_habits())
    assert cats[0] == {"category": "Health & Fitness", "count": 2, "completionRate": 2.5, "averageStreak": 3}
    assert cats[1]["category"] == "Learning"
    dist = analytics_service.category_distribution(_habits())
    assert [d["value"] for d in dist] == [2, 1]


def test_goal_bars_truncate_and_floor_days_left():
    bars = analytics_service.goal_progress_bars(_goals(), TODAY)
    assert bars[0]["goal"] == "Run a full marathon ..."
    assert bars[0]["daysLeft"] == 10
    assert bars[1]["goal"] == "Save"
    assert bars[1]["daysLeft"] == 0


def test_heatmap_has_thirty_cells():
    cells = analytics_service.completion_heatmap(_habits(), TODAY)
    assert len(cells) == 30
    assert cells[-1]["completionRate"] == 67
    assert cells[-2]["completionRate"] == 100
    assert cells[-1]["day"] == "Mon"


def test_overview_numbers():
    data = analytics_service.overview(_habits(), _goals())
    assert data["totalHabits"] == 3
    assert data["completedToday"] == 1
    assert data["longestStreak"] == 3
    # (10 + 0 + 6.67) / 3
    assert data["averageHabitProgress"] == 6
    assert data["averageGoalProgress"] == 70
    assert data["completedGoals"] == 1
    assert data["topCategory"] == "Health & Fitness"


def test_overview_of_empty_state():
    data = analytics_service.overview([], [])
    assert data["averageHabitProgress"] == 0
    assert data["longestStreak"] == 0
    assert data["topCategory"] is None


def test_goals_needing_attention():
    assert [g.id for g in analytics_service.goals_needing_attention(_goals())] == ["g1"]


def test_pdf_report_bytes():
    pdf = build_report(_habits(), _goals(), sections=("overview", "habits", "goals", "charts"))
    assert pdf.startswith(b"%PDF")


def test_pdf_report_with_no_data():
    assert build_report([], [], insights=["Keep going"]).startswith(b"%PDF")


def test_report_filename():
    from datetime import datetime
    assert report_filename(datetime(2026, 10, 19, 8, 0)) == "tafa-report-2026-10-19.pdf"
