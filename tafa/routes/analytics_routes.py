from typing import Optional

from fastapi import APIRouter, Depends, HTTPException
from fastapi.responses import Response

from tafa.dependencies import get_dashboard
from tafa.services import analytics_service, report_service
from tafa.services.dashboard_service import DashboardController

router = APIRouter(prefix="/api/v1/analytics", tags=["Analytics"])


def _check_range(days: int):
    if days not in analytics_service.TIME_RANGES:
        raise HTTPException(status_code=422, detail="days must be one of 7, 30 or 90")


@router.get("/overview")
async def get_overview(dashboard: DashboardController = Depends(get_dashboard)):
    try:
        state = dashboard.state
        data = analytics_service.overview(state.habits, state.goals)
        data["topStreaks"] = [
            {"id": h.id, "name": h.name, "streak": h.streak}
            for h in analytics_service.top_streaks(state.habits)
        ]
        data["needsAttention"] = [
            {"id": g.id, "title": g.title, "progress": g.progress}
            for g in analytics_service.goals_needing_attention(state.goals)
        ]
        return data
    except Exception as e:
        raise HTTPException(status_code=500, detail=str(e))


@router.get("/time-series")
async def get_time_series(days: int = 30, category: Optional[str] = None,
                    dashboard: DashboardController = Depends(get_dashboard)):
    try:
        _check_range(days)
        habits = dashboard.state.habits
        if category and category != "all":
            habits = [h for h in habits if h.category == category]
        return analytics_service.habit_time_series(habits, days, dashboard.day)
    except HTTPException:
        raise
    except Exception as e:
        raise HTTPException(status_code=500, detail=str(e))


@router.get("/categories")
async def get_categories(dashboard: DashboardController = Depends(get_dashboard)):
    try:
        habits = dashboard.state.habits
        return {
            "categories": analytics_service.category_breakdown(habits),
            "distribution": analytics_service.category_distribution(habits),
        }
    except Exception as e:
        raise HTTPException(status_code=500, detail=str(e))


@router.get("/goals")
async def get_goal_progress(dashboard: DashboardController = Depends(get_dashboard)):
    try:
        return analytics_service.goal_progress_bars(dashboard.state.goals, dashboard.day)
    except Exception as e:
        raise HTTPException(status_code=500, detail=str(e))


@router.get("/heatmap")
async def get_heatmap(dashboard: DashboardController = Depends(get_dashboard)):
    try:
        return analytics_service.completion_heatmap(dashboard.state.habits, dashboard.day)
    except Exception as e:
        raise HTTPException(status_code=500, detail=str(e))


@router.get("/report.pdf")
def download_report(days: int = 30, sections: Optional[str] = None,
                    dashboard: DashboardController = Depends(get_dashboard)):
    """PDF download; `sections` is a comma-separated subset of the report sections."""
    try:
        _check_range(days)
        selected = report_service.REPORT_SECTIONS
        if sections:
            selected = tuple(s.strip() for s in sections.split(",") if s.strip())
            unknown = [s for s in selected if s not in report_service.REPORT_SECTIONS]
            if unknown or not selected:
                raise HTTPException(status_code=422, detail=f"Unknown report sections: {', '.join(unknown)}")

        state = dashboard.state
        pdf = report_service.build_report(
            state.habits, state.goals,
            achievements=state.achievements,
            sections=selected,
            time_range=days,
        )
        filename = report_service.report_filename()
        return Response(
            content=pdf,
            media_type="application/pdf",
            headers={"Content-Disposition": f'attachment; filename="{filename}"'},
        )
    except HTTPException:
        raise
    except Exception as e:
        raise HTTPException(status_code=500, detail=str(e))
