"""Schemas for registration, login and password reset."""
from datetime import datetime
from typing import Optional
from pydantic import BaseModel, Field, field_validator

from app.schemas.common import validate_email_address


class RegisterRequest(BaseModel):
    """Request schema for creating an account."""
    name: str = Field(..., min_length=1, max_length=255)
    email: str = Field(..., max_length=255)
    password: str = Field(..., min_length=1)
    password_confirm: str = Field(..., min_length=1)
    email_visibility: bool = True

    @field_validator("email")
    @classmethod
    def check_email(cls, v: str) -> str:
        return validate_email_address(v)

    @field_validator("name")
    @classmethod
    def check_name(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("Name is required")
        return v.strip()


class LoginRequest(BaseModel):
    email: str = Field(..., min_length=1)
    password: str = Field(..., min_length=1)


class UserResponse(BaseModel):
    id: int
    name: str
    email: str
    email_visibility: bool
    created_at: datetime

    model_config = {"from_attributes": True}


class AuthResponse(BaseModel):
    """Session token returned on login and registration."""
    token: str
    token_type: str = "bearer"
    user: UserResponse


class PasswordResetRequest(BaseModel):
    email: str

    @field_validator("email")
    @classmethod
    def check_email(cls, v: str) -> str:
        return validate_email_address(v)


class PasswordResetConfirm(BaseModel):
    token: str = Field(..., min_length=1)
    password: str
    password_confirm: str


class MeResponse(UserResponse):
    session_id: Optional[int] = None
