"""Schemas for Fault Tree Analysis."""
from datetime import datetime
from typing import List, Literal
from pydantic import BaseModel, Field, model_validator

from app.models.fta_analysis import GateType


class FtaTopEvent(BaseModel):
    id: Literal["top"] = "top"
    text: str = ""
    x: float = 400
    y: float = 50

    model_config = {"allow_inf_nan": False}


class FtaGate(BaseModel):
    id: str = Field(..., min_length=1)
    type: GateType = GateType.AND
    x: float
    y: float
    parent_id: str = "top"

    model_config = {"allow_inf_nan": False}


class FtaIntermediateEvent(BaseModel):
    id: str = Field(..., min_length=1)
    text: str = Field(..., min_length=1)
    x: float
    y: float
    gate_id: str

    model_config = {"allow_inf_nan": False}


class FtaBasicEvent(BaseModel):
    id: str = Field(..., min_length=1)
    text: str = Field(..., min_length=1)
    x: float
    y: float
    parent_gate_id: str = "top"

    model_config = {"allow_inf_nan": False}


class FtaStructure(BaseModel):
    """Tree of gates and events; coordinates are persisted as given."""
    top_event: FtaTopEvent = Field(default_factory=FtaTopEvent)
    gates: List[FtaGate] = Field(default_factory=list)
    intermediate_events: List[FtaIntermediateEvent] = Field(default_factory=list)
    basic_events: List[FtaBasicEvent] = Field(default_factory=list)

    @model_validator(mode="after")
    def check_references(self):
        """Every parent reference must point at the top event or an existing gate."""
        gate_ids = {gate.id for gate in self.gates}
        if len(gate_ids) != len(self.gates):
            raise ValueError("Gate ids must be unique")
        parents = gate_ids | {"top"}
        for gate in self.gates:
            if gate.parent_id not in parents:
                raise ValueError(f"Gate '{gate.id}' references unknown parent '{gate.parent_id}'")
        for event in self.intermediate_events:
            if event.gate_id not in gate_ids:
                raise ValueError(f"Event '{event.id}' references unknown gate '{event.gate_id}'")
        for event in self.basic_events:
            if event.parent_gate_id not in parents:
                raise ValueError(f"Event '{event.id}' references unknown gate '{event.parent_gate_id}'")
        return self


class FtaCreateRequest(BaseModel):
    analysis_type: Literal["FTA"] = "FTA"
    title: str = Field(..., min_length=1, max_length=255)
    top_event: str = Field(..., min_length=1)
    structure: FtaStructure = Field(default_factory=FtaStructure)

    model_config = {"str_strip_whitespace": True}


class FtaResponse(BaseModel):
    analysis_type: Literal["FTA"] = "FTA"
    id: int
    user_id: int
    title: str
    top_event: str
    structure: FtaStructure
    created_at: datetime
    updated_at: datetime

    model_config = {"from_attributes": True}


class FtaListResponse(BaseModel):
    items: List[FtaResponse]
    total: int
