"""Schemas for contact messages."""
from datetime import datetime
from typing import List
from pydantic import BaseModel, Field, field_validator

from app.models.contact_message import MessageStatus
from app.schemas.common import validate_email_address


class ContactMessageCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=255)
    email: str = Field(..., max_length=255)
    message: str = Field(..., min_length=1)

    model_config = {"str_strip_whitespace": True}

    @field_validator("email")
    @classmethod
    def check_email(cls, v: str) -> str:
        return validate_email_address(v)


class ContactStatusUpdate(BaseModel):
    status: MessageStatus


class ContactMessageResponse(BaseModel):
    id: int
    user_id: int
    name: str
    email: str
    message: str
    status: MessageStatus
    created_at: datetime

    model_config = {"from_attributes": True}


class ContactMessageListResponse(BaseModel):
    items: List[ContactMessageResponse]
    total: int
