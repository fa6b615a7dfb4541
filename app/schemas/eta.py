"""Schemas for Event Tree Analysis."""
from datetime import datetime
from typing import Dict, List, Literal, Optional
from pydantic import BaseModel, Field

from app.models.eta_analysis import OutcomeSeverity
from app.services.event_tree import MAX_BARRIERS


class Barrier(BaseModel):
    """Protective measure modelled as a success/fail gate."""
    id: Optional[str] = None
    name: str = Field(..., min_length=1, max_length=255)
    success_rate: float = Field(0.9, ge=0.0, le=1.0)

    model_config = {"str_strip_whitespace": True, "allow_inf_nan": False}


class EtaOutcome(BaseModel):
    path: List[bool]
    frequency: float
    severity: OutcomeSeverity


class EtaCreateRequest(BaseModel):
    """Outcomes are always recomputed from the barriers."""
    analysis_type: Literal["ETA"] = "ETA"
    title: str = Field(..., min_length=1, max_length=255)
    initiating_event: str = Field(..., min_length=1)
    barriers: List[Barrier] = Field(default_factory=list, max_length=MAX_BARRIERS)

    model_config = {"str_strip_whitespace": True}


class EtaResponse(BaseModel):
    analysis_type: Literal["ETA"] = "ETA"
    id: int
    user_id: int
    title: str
    initiating_event: str
    barriers: List[Barrier]
    outcomes: List[EtaOutcome]
    created_at: datetime
    updated_at: datetime

    model_config = {"from_attributes": True}


class EtaListResponse(BaseModel):
    items: List[EtaResponse]
    total: int


class EtaPreviewRequest(BaseModel):
    barriers: List[Barrier] = Field(default_factory=list, max_length=MAX_BARRIERS)


class EtaPreviewResponse(BaseModel):
    outcomes: List[EtaOutcome]
    total_frequency: float
    counts: Dict[str, int]
