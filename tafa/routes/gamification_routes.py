from fastapi import APIRouter, Depends, HTTPException

from tafa.dependencies import get_dashboard
from tafa.services.dashboard_service import DashboardController, MutationResult

router = APIRouter(prefix="/api/v1/gamification", tags=["Gamification"])


@router.get("/stats")
async def get_stats(dashboard: DashboardController = Depends(get_dashboard)):
    try:
        return dashboard.state.stats.to_json()
    except Exception as e:
        raise HTTPException(status_code=500, detail=str(e))


@router.get("/achievements")
async def list_achievements(dashboard: DashboardController = Depends(get_dashboard)):
    try:
        return [a.to_json() for a in dashboard.state.achievements]
    except Exception as e:
        raise HTTPException(status_code=500, detail=str(e))


@router.get("/challenges")
async def list_challenges(dashboard: DashboardController = Depends(get_dashboard)):
    try:
        return [c.to_json() for c in dashboard.state.challenges]
    except Exception as e:
        raise HTTPException(status_code=500, detail=str(e))


@router.post("/rebuild")
async def rebuild(dashboard: DashboardController = Depends(get_dashboard)):
    """Recompute stats from the saved ledgers (XP never goes down)."""
    try:
        result = MutationResult(record=None, update=dashboard.rebuild())
        data = result.to_json()
        data["data"] = dashboard.state.stats.to_json()
        return data
    except Exception as e:
        raise HTTPException(status_code=500, detail=str(e))
