import logging
import time
from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException
from pydantic import Field

from tafa.dependencies import get_dashboard, get_insight_gateway
from tafa.models.base import CamelModel
from tafa.models.insight import ChatTurn
from tafa.services.dashboard_service import DashboardController
from tafa.services.insight_service import InsightGateway

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/v1/ai", tags=["AI"])


# ── Pydantic schemas ──────────────────────────────────────────────
class SnapshotRequest(CamelModel):
    # omitted snapshots are read from storage
    habits: Optional[List[dict]] = None
    goals: Optional[List[dict]] = None


class QueryRequest(SnapshotRequest):
    query: str = ""
    conversation_id: Optional[str] = None
    conversation_history: List[ChatTurn] = Field(default_factory=list)


class SuggestionRequest(SnapshotRequest):
    category: Optional[str] = None
    difficulty: Optional[str] = None


class VoiceCommandRequest(SnapshotRequest):
    command: str = ""
    current_tab: Optional[str] = "overview"


class SpeechRequest(CamelModel):
    text: Optional[str] = None


def _snapshot(body: SnapshotRequest, dashboard: DashboardController) -> tuple[list, list]:
    habits = body.habits if body.habits is not None else [h.to_json() for h in dashboard.state.habits]
    goals = body.goals if body.goals is not None else [g.to_json() for g in dashboard.state.goals]
    return habits, goals


# ── Routes ────────────────────────────────────────────────────────
@router.post("/insights")
async def generate_insights(
    body: SnapshotRequest,
    gateway: InsightGateway = Depends(get_insight_gateway),
    dashboard: DashboardController = Depends(get_dashboard),
):
    try:
        return await gateway.generate_insights(*_snapshot(body, dashboard))
    except Exception as e:
        logger.error(f"Insights route failed: {e}")
        raise HTTPException(status_code=500, detail="Failed to generate insights")


@router.post("/weekly-report")
async def weekly_report(
    body: SnapshotRequest,
    gateway: InsightGateway = Depends(get_insight_gateway),
    dashboard: DashboardController = Depends(get_dashboard),
):
    try:
        return await gateway.weekly_report(*_snapshot(body, dashboard))
    except Exception as e:
        logger.error(f"Weekly report route failed: {e}")
        raise HTTPException(status_code=500, detail="Failed to generate weekly report")


@router.post("/query")
async def natural_language_query(
    body: QueryRequest,
    gateway: InsightGateway = Depends(get_insight_gateway),
    dashboard: DashboardController = Depends(get_dashboard),
):
    """Conversational question about the user's own data."""
    try:
        history = [turn.model_dump() for turn in body.conversation_history]
        habits, goals = _snapshot(body, dashboard)
        result = await gateway.query(body.query, habits, goals, history)
        result["conversationId"] = body.conversation_id or f"conv_{int(time.time() * 1000)}"
        return result
    except Exception as e:
        logger.error(f"Query route failed: {e}")
        raise HTTPException(status_code=500, detail="Failed to process query")


@router.post("/smart-suggestions")
async def smart_suggestions(
    body: SuggestionRequest,
    gateway: InsightGateway = Depends(get_insight_gateway),
    dashboard: DashboardController = Depends(get_dashboard),
):
    try:
        habits, goals = _snapshot(body, dashboard)
        return await gateway.smart_suggestions(habits, goals, body.category, body.difficulty)
    except Exception as e:
        logger.error(f"Smart suggestions route failed: {e}")
        raise HTTPException(status_code=500, detail="Failed to generate suggestions")


@router.post("/voice-command")
async def voice_command(
    body: VoiceCommandRequest,
    gateway: InsightGateway = Depends(get_insight_gateway),
    dashboard: DashboardController = Depends(get_dashboard),
):
    try:
        habits, goals = _snapshot(body, dashboard)
        return await gateway.voice_command(body.command, habits, goals, body.current_tab or "overview")
    except Exception as e:
        logger.error(f"Voice command route failed: {e}")
        raise HTTPException(status_code=500, detail="Failed to process voice command")


@router.post("/text-to-speech")
async def text_to_speech(body: SpeechRequest):
    if not body.text:
        raise HTTPException(status_code=400, detail="Text is required")
    return InsightGateway.text_to_speech(body.text)
