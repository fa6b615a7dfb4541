"""
Dashboard endpoint.
"""
import logging
from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session

from app.core.auth import AuthContext, get_auth_context
from app.core.database import get_db
from app.schemas.reports import DashboardResponse
from app.services.dashboard_service import build_dashboard

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get("/", response_model=DashboardResponse)
async def get_dashboard(
    auth: AuthContext = Depends(get_auth_context),
    db: Session = Depends(get_db),
):
    """KPI counts, six-month trends and the five most recent analyses."""
    try:
        return DashboardResponse(**build_dashboard(db, auth.user_id))
    except Exception as e:
        logger.error(f"Error building dashboard: {e}", exc_info=True)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to load dashboard data. Please try again later."
        )
