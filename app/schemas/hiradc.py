"""Schemas for HIRADC analyses."""
from datetime import datetime
from typing import List, Literal, Optional
from pydantic import BaseModel, Field

from app.models.hiradc_analysis import RiskCategory


class HiradcFields(BaseModel):
    """Form fields shared by create, update and insight requests."""
    activity_name: str = Field(..., min_length=1, max_length=255, description="Activity name")
    location: str = Field(..., min_length=1, max_length=255)
    hazard: str = Field(..., min_length=1, description="Potential hazard")
    severity: int = Field(3, ge=1, le=5)
    likelihood: int = Field(3, ge=1, le=5)

    model_config = {"str_strip_whitespace": True}


class HiradcCreateRequest(HiradcFields):
    """Create or replace a HIRADC analysis. Score and category are derived server-side."""
    analysis_type: Literal["HIRADC"] = "HIRADC"
    ai_insight: Optional[str] = None


class HiradcResponse(BaseModel):
    analysis_type: Literal["HIRADC"] = "HIRADC"
    id: int
    user_id: int
    activity_name: str
    location: str
    hazard: str
    severity: int
    likelihood: int
    risk_score: int
    risk_category: RiskCategory
    recommended_controls: Optional[List[str]] = None
    ai_insight: Optional[str] = None
    created_at: datetime
    updated_at: datetime

    model_config = {"from_attributes": True}


class HiradcListResponse(BaseModel):
    items: List[HiradcResponse]
    total: int


class RiskPreviewRequest(BaseModel):
    severity: int = Field(..., ge=1, le=5)
    likelihood: int = Field(..., ge=1, le=5)


class RiskPreviewResponse(BaseModel):
    severity: int
    likelihood: int
    risk_score: int
    risk_category: RiskCategory
    requires_immediate_action: bool
    recommended_controls: List[str]


class InsightResponse(BaseModel):
    ai_insight: str
    source: Literal["model", "template"]
