"""Schemas for the audit trail."""
from datetime import datetime
from typing import Any, Dict, List, Optional
from pydantic import BaseModel

from app.services.activity_service import ActivityAction, ResourceType


class ActivityLogResponse(BaseModel):
    id: int
    timestamp: datetime
    user_id: Optional[int] = None
    action: ActivityAction
    resource_type: Optional[ResourceType] = None
    resource_id: Optional[int] = None
    summary: str = ""
    details: Optional[Dict[str, Any]] = None
    ip_address: Optional[str] = None
    user_agent: Optional[str] = None

    model_config = {"from_attributes": True}


class ActivityLogListResponse(BaseModel):
    """One page of the caller's audit trail, newest first."""
    items: List[ActivityLogResponse]
    total: int
    limit: int
    offset: int
