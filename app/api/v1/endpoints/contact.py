"""
Contact message endpoints.
"""
import logging
from fastapi import APIRouter, Depends, HTTPException, Request, status
from sqlalchemy.orm import Session

from app.core.auth import AuthContext, get_auth_context
from app.core.database import get_db
from app.models.contact_message import ContactMessage, MessageStatus
from app.schemas.contact import (
    ContactMessageCreate,
    ContactMessageListResponse,
    ContactMessageResponse,
    ContactStatusUpdate,
)
from app.services.activity_service import ActivityAction, ResourceType, log_activity
from app.services.report_service import get_owned_record, list_owned

logger = logging.getLogger(__name__)

router = APIRouter()


@router.post("/", response_model=ContactMessageResponse, status_code=status.HTTP_201_CREATED)
async def send_message(
    payload: ContactMessageCreate,
    request: Request,
    auth: AuthContext = Depends(get_auth_context),
    db: Session = Depends(get_db),
):
    try:
        message = ContactMessage(
            user_id=auth.user_id,
            name=payload.name,
            email=payload.email,
            message=payload.message,
            status=MessageStatus.UNREAD,
        )
        db.add(message)
        db.commit()
        db.refresh(message)
        log_activity(
            db, auth.user_id, ActivityAction.CONTACT_MESSAGE, ResourceType.CONTACT_MESSAGE, message.id,
            request=request,
        )
        return ContactMessageResponse.model_validate(message)
    except Exception as e:
        logger.error(f"Error saving contact message: {e}", exc_info=True)
        db.rollback()
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to send message"
        )


@router.get("/", response_model=ContactMessageListResponse)
async def list_messages(
    auth: AuthContext = Depends(get_auth_context),
    db: Session = Depends(get_db),
):
    try:
        messages = list_owned(db, ContactMessage, auth.user_id)
        return ContactMessageListResponse(
            items=[ContactMessageResponse.model_validate(m) for m in messages],
            total=len(messages),
        )
    except Exception as e:
        logger.error(f"Error listing contact messages: {e}", exc_info=True)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to retrieve messages"
        )


@router.patch("/{message_id}", response_model=ContactMessageResponse)
async def update_message_status(
    message_id: int,
    payload: ContactStatusUpdate,
    request: Request,
    auth: AuthContext = Depends(get_auth_context),
    db: Session = Depends(get_db),
):
    try:
        message = get_owned_record(db, ContactMessage, message_id, auth.user_id)
        if not message:
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail=f"Contact message with id {message_id} not found"
            )
        message.status = payload.status
        db.commit()
        db.refresh(message)
        log_activity(
            db, auth.user_id, ActivityAction.CONTACT_STATUS_UPDATE, ResourceType.CONTACT_MESSAGE, message.id,
            details={"status": message.status.value}, request=request,
        )
        return ContactMessageResponse.model_validate(message)
    except HTTPException:
        raise
    except Exception as e:
        logger.error(f"Error updating contact message: {e}", exc_info=True)
        db.rollback()
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to update message"
        )
