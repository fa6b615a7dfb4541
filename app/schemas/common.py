"""Shared schema types and validators."""
import enum
import re

from pydantic import BaseModel

EMAIL_PATTERN = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")


class AnalysisType(str, enum.Enum):
    """Record variants shown in the unified report list."""
    HIRADC = "HIRADC"
    FTA = "FTA"
    ETA = "ETA"
    CCA = "CCA"
    K3 = "K3"


def validate_email_address(value: str) -> str:
    """Trim, lower-case and check the address shape."""
    value = value.strip().lower()
    if not EMAIL_PATTERN.match(value):
        raise ValueError("Please enter a valid email address")
    return value


class MessageResponse(BaseModel):
    message: str
