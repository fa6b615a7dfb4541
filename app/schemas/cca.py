"""Schemas for Cause Consequence Analysis."""
from datetime import datetime
from typing import List, Literal, Optional
from pydantic import BaseModel, Field

from app.models.fta_analysis import GateType


class CcaEvent(BaseModel):
    id: Optional[str] = None
    text: str = Field(..., min_length=1)
    gate_type: GateType = GateType.AND

    model_config = {"str_strip_whitespace": True}


class CcaCreateRequest(BaseModel):
    analysis_type: Literal["CCA"] = "CCA"
    title: str = Field(..., min_length=1, max_length=255)
    critical_event: str = Field(..., min_length=1)
    cause_tree: List[CcaEvent] = Field(default_factory=list)
    consequence_tree: List[CcaEvent] = Field(default_factory=list)

    model_config = {"str_strip_whitespace": True}


class CcaResponse(BaseModel):
    analysis_type: Literal["CCA"] = "CCA"
    id: int
    user_id: int
    title: str
    critical_event: str
    cause_tree: List[CcaEvent]
    consequence_tree: List[CcaEvent]
    created_at: datetime
    updated_at: datetime

    model_config = {"from_attributes": True}


class CcaListResponse(BaseModel):
    items: List[CcaResponse]
    total: int
