"""
Audit trail of user actions on accounts and analyses.
"""
import enum
import logging
from typing import Any, Dict, Optional, Union

from fastapi import Request
from sqlalchemy.orm import Session

from app.models.activity_log import ActivityLog

logger = logging.getLogger(__name__)


class ActivityAction(str, enum.Enum):
    REGISTER = "register"
    LOGIN = "login"
    LOGOUT = "logout"
    PASSWORD_RESET_REQUEST = "password_reset_request"
    PASSWORD_RESET_CONFIRM = "password_reset_confirm"
    ANALYSIS_CREATE = "analysis_create"
    ANALYSIS_UPDATE = "analysis_update"
    ANALYSIS_DELETE = "analysis_delete"
    REPORT_EXPORT = "report_export"
    CONTACT_MESSAGE = "contact_message"
    CONTACT_STATUS_UPDATE = "contact_status_update"


class ResourceType(str, enum.Enum):
    USER = "user"
    HIRADC = "hiradc"
    FTA = "fta"
    ETA = "eta"
    CCA = "cca"
    K3 = "k3"
    CONTACT_MESSAGE = "contact_message"


ACTION_VERBS = {
    ActivityAction.REGISTER: "Registered",
    ActivityAction.LOGIN: "Logged in",
    ActivityAction.LOGOUT: "Logged out",
    ActivityAction.PASSWORD_RESET_REQUEST: "Requested a password reset",
    ActivityAction.PASSWORD_RESET_CONFIRM: "Reset password",
    ActivityAction.ANALYSIS_CREATE: "Created",
    ActivityAction.ANALYSIS_UPDATE: "Updated",
    ActivityAction.ANALYSIS_DELETE: "Deleted",
    ActivityAction.REPORT_EXPORT: "Exported PDF of",
    ActivityAction.CONTACT_MESSAGE: "Sent",
    ActivityAction.CONTACT_STATUS_UPDATE: "Changed status of",
}

RESOURCE_LABELS = {
    ResourceType.HIRADC: "HIRADC analysis",
    ResourceType.FTA: "FTA analysis",
    ResourceType.ETA: "ETA analysis",
    ResourceType.CCA: "CCA analysis",
    ResourceType.K3: "K3 calculation",
    ResourceType.CONTACT_MESSAGE: "contact message",
}


def client_address(request: Request) -> Optional[str]:
    """Client IP, preferring the first X-Forwarded-For hop set by a proxy."""
    forwarded_for = request.headers.get("X-Forwarded-For")
    if forwarded_for:
        return forwarded_for.split(",")[0].strip()
    return request.client.host if request.client else None


def log_activity(
    db: Session,
    user_id: Optional[int],
    action: Union[ActivityAction, str],
    resource_type: Optional[Union[ResourceType, str]] = None,
    resource_id: Optional[int] = None,
    details: Optional[Dict[str, Any]] = None,
    request: Optional[Request] = None,
) -> ActivityLog:
    """
    Record one action in the audit trail and commit it.

    Args:
        db: Database session
        user_id: Acting user, None for anonymous actions
        action: What happened
        resource_type: Kind of record affected, if any
        resource_id: ID of the affected record
        details: Extra JSON attached to the entry
        request: Source of the client IP and user agent

    Returns:
        Created ActivityLog record
    """
    ip_address = None
    user_agent = None
    if request:
        ip_address = client_address(request)
        user_agent = (request.headers.get("User-Agent") or "")[:255] or None

    activity = ActivityLog(
        user_id=user_id,
        action=ActivityAction(action).value,
        resource_type=ResourceType(resource_type).value if resource_type else None,
        resource_id=resource_id,
        details=details,
        ip_address=ip_address,
        user_agent=user_agent,
    )
    db.add(activity)
    db.commit()
    db.refresh(activity)

    logger.debug(f"Logged activity: {activity.action} by user {user_id}")
    return activity


def describe_activity(activity: ActivityLog) -> str:
    """One-line summary such as "Created HIRADC analysis #3"."""
    action = ActivityAction(activity.action)
    verb = ACTION_VERBS[action]
    if not activity.resource_type or activity.resource_type == ResourceType.USER.value:
        return verb
    label = RESOURCE_LABELS[ResourceType(activity.resource_type)]
    if activity.resource_id is None:
        return f"{verb} {label}"
    return f"{verb} {label} #{activity.resource_id}"
