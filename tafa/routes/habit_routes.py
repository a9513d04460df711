from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel, Field

from tafa.dependencies import get_dashboard
from tafa.models.habit import HABIT_CATEGORIES
from tafa.services.dashboard_service import DashboardController

router = APIRouter(prefix="/api/v1/habits", tags=["Habits"])


class HabitCreate(BaseModel):
    name: str = ""
    category: str = ""
    target: int = Field(30, ge=1)  # days


@router.get("")
async def list_habits(dashboard: DashboardController = Depends(get_dashboard)):
    try:
        return [h.to_json() for h in dashboard.state.habits]
    except Exception as e:
        raise HTTPException(status_code=500, detail=str(e))


@router.get("/categories")
async def list_habit_categories():
    return HABIT_CATEGORIES


@router.post("")
async def create_habit(body: HabitCreate, dashboard: DashboardController = Depends(get_dashboard)):
    try:
        result = dashboard.add_habit(body.name, body.category, body.target)
        if result.record is None:
            return {"status": "ignored"}
        return result.to_json()
    except Exception as e:
        raise HTTPException(status_code=500, detail=str(e))


@router.post("/{habit_id}/toggle")
async def toggle_habit(habit_id: str, dashboard: DashboardController = Depends(get_dashboard)):
    """Mark today done, or undo today's completion."""
    try:
        result = dashboard.toggle_habit(habit_id)
        if result is None:
            raise HTTPException(status_code=404, detail="Habit not found")
        return result.to_json()
    except HTTPException:
        raise
    except Exception as e:
        raise HTTPException(status_code=500, detail=str(e))


@router.delete("/{habit_id}")
async def delete_habit(habit_id: str, dashboard: DashboardController = Depends(get_dashboard)):
    try:
        result = dashboard.remove_habit(habit_id)
        if result is None:
            raise HTTPException(status_code=404, detail="Habit not found")
        return {"status": "success"}
    except HTTPException:
        raise
    except Exception as e:
        raise HTTPException(status_code=500, detail=str(e))
