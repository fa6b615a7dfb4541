"""Schemas for the safety metrics calculator."""
from datetime import datetime
from typing import Dict, List, Literal
from pydantic import BaseModel, Field


class K3CalculationRequest(BaseModel):
    analysis_type: Literal["K3"] = "K3"
    total_lti: float = Field(0, ge=0, description="Lost time injuries")
    total_incidents: float = Field(0, ge=0)
    total_work_hours: float = Field(0, ge=0)
    total_days_lost: float = Field(0, ge=0)
    employees_with_ppe: float = Field(0, ge=0)
    total_employees: float = Field(0, ge=0)

    model_config = {"allow_inf_nan": False}


class K3Metrics(BaseModel):
    ltir: float
    trir: float
    severity_rate: float
    frequency_rate: float
    safe_man_hours: float
    compliance_ppe: float
    statuses: Dict[str, str] = Field(default_factory=dict)


class K3CalculationResponse(K3Metrics):
    analysis_type: Literal["K3"] = "K3"
    id: int
    user_id: int
    total_lti: float
    total_incidents: float
    total_work_hours: float
    total_days_lost: float
    employees_with_ppe: float
    total_employees: float
    created_at: datetime

    model_config = {"from_attributes": True}


class K3CalculationListResponse(BaseModel):
    items: List[K3CalculationResponse]
    total: int
