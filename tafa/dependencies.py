"""
dependencies.py — FastAPI dependencies shared by the routers
"""

from fastapi import Depends
from sqlalchemy.orm import Session

from tafa.database import get_db
from tafa.services.dashboard_service import DashboardController
from tafa.services.insight_service import InsightGateway
from tafa.services.llm_gateway import get_llm_gateway
from tafa.services.storage_service import StorageAdapter


def get_dashboard(db: Session = Depends(get_db)) -> DashboardController:
    """Controller loaded from storage for the current request."""
    controller = DashboardController(StorageAdapter(db))
    controller.load()
    return controller


def get_insight_gateway() -> InsightGateway:
    return InsightGateway(get_llm_gateway())
