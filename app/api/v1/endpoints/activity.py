"""
Audit trail endpoint: the caller's own account and analysis history.
"""
import logging
from typing import Optional
from datetime import datetime
from fastapi import APIRouter, Depends, HTTPException, status, Query
from sqlalchemy.orm import Session

from app.core.auth import AuthContext, get_auth_context
from app.core.database import get_db
from app.models.activity_log import ActivityLog
from app.schemas.activity import ActivityLogResponse, ActivityLogListResponse
from app.services.activity_service import ActivityAction, ResourceType, describe_activity

logger = logging.getLogger(__name__)

router = APIRouter()


def _to_response(log: ActivityLog) -> ActivityLogResponse:
    response = ActivityLogResponse.model_validate(log)
    response.summary = describe_activity(log)
    return response


@router.get("/", response_model=ActivityLogListResponse)
async def list_activity(
    limit: int = Query(50, ge=1, le=500),
    offset: int = Query(0, ge=0),
    since: Optional[datetime] = Query(None, description="Only entries at or after this time"),
    action: Optional[ActivityAction] = Query(None),
    resource_type: Optional[ResourceType] = Query(None, description="e.g. hiradc, eta, k3"),
    resource_id: Optional[int] = Query(None, description="History of one record; combine with resource_type"),
    auth: AuthContext = Depends(get_auth_context),
    db: Session = Depends(get_db),
):
    """List the caller's own activity, newest first."""
    query = db.query(ActivityLog).filter(ActivityLog.user_id == auth.user_id)
    if since:
        query = query.filter(ActivityLog.timestamp >= since)
    if action:
        query = query.filter(ActivityLog.action == action.value)
    if resource_type:
        query = query.filter(ActivityLog.resource_type == resource_type.value)
    if resource_id is not None:
        query = query.filter(ActivityLog.resource_id == resource_id)

    try:
        total = query.count()
        logs = (
            query.order_by(ActivityLog.timestamp.desc(), ActivityLog.id.desc())
            .offset(offset)
            .limit(limit)
            .all()
        )
    except Exception as e:
        logger.error(f"Error listing activity for user {auth.user_id}: {e}", exc_info=True)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to retrieve activity"
        )

    return ActivityLogListResponse(
        items=[_to_response(log) for log in logs],
        total=total,
        limit=limit,
        offset=offset,
    )
