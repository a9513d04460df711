from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel

from tafa.dependencies import get_dashboard
from tafa.models.goal import GOAL_CATEGORIES
from tafa.services.dashboard_service import DashboardController
from tafa.services.goal_service import days_until_deadline, deadline_status

router = APIRouter(prefix="/api/v1/goals", tags=["Goals"])


class GoalCreate(BaseModel):
    title: str = ""
    description: Optional[str] = ""
    category: str = ""
    deadline: str = ""
    priority: Optional[str] = "medium"
    milestones: Optional[List[str]] = None


class GoalUpdate(BaseModel):
    title: Optional[str] = None
    description: Optional[str] = None
    category: Optional[str] = None
    deadline: Optional[str] = None
    priority: Optional[str] = None
    milestones: Optional[List[str]] = None
    status: Optional[str] = None


class ProgressUpdate(BaseModel):
    progress: int


@router.get("")
async def list_goals(dashboard: DashboardController = Depends(get_dashboard)):
    try:
        goals = []
        for g in dashboard.state.goals:
            data = g.to_json()
            data["daysLeft"] = days_until_deadline(g, dashboard.day)
            data["deadlineStatus"] = deadline_status(g, dashboard.day)
            goals.append(data)
        return goals
    except Exception as e:
        raise HTTPException(status_code=500, detail=str(e))


@router.get("/categories")
async def list_goal_categories():
    return GOAL_CATEGORIES


@router.post("")
async def create_goal(body: GoalCreate, dashboard: DashboardController = Depends(get_dashboard)):
    try:
        if body.priority not in ("low", "medium", "high"):
            raise HTTPException(status_code=422, detail="Priority must be low, medium or high")
        result = dashboard.add_goal(
            body.title, body.category, body.deadline,
            priority=body.priority,
            milestones=body.milestones,
            description=body.description or "",
        )
        if result.record is None:
            return {"status": "ignored"}
        return result.to_json()
    except HTTPException:
        raise
    except Exception as e:
        raise HTTPException(status_code=500, detail=str(e))


@router.put("/{goal_id}/progress")
async def update_goal_progress(goal_id: str, body: ProgressUpdate,
                               dashboard: DashboardController = Depends(get_dashboard)):
    try:
        result = dashboard.set_goal_progress(goal_id, body.progress)
        if result is None:
            raise HTTPException(status_code=404, detail="Goal not found")
        return result.to_json()
    except HTTPException:
        raise
    except Exception as e:
        raise HTTPException(status_code=500, detail=str(e))


@router.put("/{goal_id}")
async def update_goal(goal_id: str, body: GoalUpdate, dashboard: DashboardController = Depends(get_dashboard)):
    try:
        if body.priority is not None and body.priority not in ("low", "medium", "high"):
            raise HTTPException(status_code=422, detail="Priority must be low, medium or high")
        result = dashboard.update_goal(goal_id, body.model_dump(exclude_unset=True))
        if result is None:
            raise HTTPException(status_code=404, detail="Goal not found")
        return result.to_json()
    except HTTPException:
        raise
    except Exception as e:
        raise HTTPException(status_code=500, detail=str(e))


@router.delete("/{goal_id}")
async def delete_goal(goal_id: str, dashboard: DashboardController = Depends(get_dashboard)):
    try:
        result = dashboard.remove_goal(goal_id)
        if result is None:
            raise HTTPException(status_code=404, detail="Goal not found")
        return {"status": "success"}
    except HTTPException:
        raise
    except Exception as e:
        raise HTTPException(status_code=500, detail=str(e))
