"""
Safety metrics (K3) calculator endpoints.
"""
import logging
from fastapi import APIRouter, Depends, HTTPException, Request, status
from sqlalchemy.orm import Session

from app.core.auth import AuthContext, get_auth_context
from app.core.database import get_db
from app.models.k3_calculation import K3Calculation
from app.schemas.k3 import (
    K3CalculationListResponse,
    K3CalculationRequest,
    K3CalculationResponse,
    K3Metrics,
)
from app.services.activity_service import ActivityAction, ResourceType, log_activity
from app.services.report_service import get_owned_record, list_owned
from app.services.safety_metrics import SafetyInputs, SafetyMetrics, calculate_safety_metrics, rate_status

logger = logging.getLogger(__name__)

router = APIRouter()

INPUT_FIELDS = (
    "total_lti",
    "total_incidents",
    "total_work_hours",
    "total_days_lost",
    "employees_with_ppe",
    "total_employees",
)


def _inputs(payload: K3CalculationRequest) -> SafetyInputs:
    return SafetyInputs(**{field: getattr(payload, field) for field in INPUT_FIELDS})


def _statuses(metrics: SafetyMetrics) -> dict:
    return {name: rate_status(name, value) for name, value in metrics.to_dict().items()}


def _to_response(calculation: K3Calculation) -> K3CalculationResponse:
    response = K3CalculationResponse.model_validate(calculation)
    response.statuses = {
        name: rate_status(name, getattr(calculation, name))
        for name in ("ltir", "trir", "severity_rate", "frequency_rate", "safe_man_hours", "compliance_ppe")
    }
    return response


@router.post("/preview", response_model=K3Metrics)
async def preview_metrics(
    payload: K3CalculationRequest,
    auth: AuthContext = Depends(get_auth_context),
):
    """Compute the six metrics without saving."""
    metrics = calculate_safety_metrics(_inputs(payload))
    return K3Metrics(**metrics.to_dict(), statuses=_statuses(metrics))


@router.get("/", response_model=K3CalculationListResponse)
async def list_calculations(
    auth: AuthContext = Depends(get_auth_context),
    db: Session = Depends(get_db),
):
    try:
        calculations = list_owned(db, K3Calculation, auth.user_id)
        return K3CalculationListResponse(
            items=[_to_response(c) for c in calculations],
            total=len(calculations),
        )
    except Exception as e:
        logger.error(f"Error listing K3 calculations: {e}", exc_info=True)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to retrieve K3 calculations"
        )


@router.post("/", response_model=K3CalculationResponse, status_code=status.HTTP_201_CREATED)
async def create_calculation(
    payload: K3CalculationRequest,
    request: Request,
    auth: AuthContext = Depends(get_auth_context),
    db: Session = Depends(get_db),
):
    """Compute the metrics and save inputs and results together."""
    try:
        inputs = _inputs(payload)
        metrics = calculate_safety_metrics(inputs)
        calculation = K3Calculation(
            user_id=auth.user_id,
            **{field: getattr(inputs, field) for field in INPUT_FIELDS},
            **metrics.to_dict(),
        )
        db.add(calculation)
        db.commit()
        db.refresh(calculation)

        log_activity(
            db, auth.user_id, ActivityAction.ANALYSIS_CREATE, ResourceType.K3, calculation.id,
            details={"ltir": calculation.ltir, "trir": calculation.trir},
            request=request,
        )
        return _to_response(calculation)
    except Exception as e:
        logger.error(f"Error saving K3 calculation: {e}", exc_info=True)
        db.rollback()
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to save K3 calculation"
        )


@router.get("/{calculation_id}", response_model=K3CalculationResponse)
async def get_calculation(
    calculation_id: int,
    auth: AuthContext = Depends(get_auth_context),
    db: Session = Depends(get_db),
):
    calculation = get_owned_record(db, K3Calculation, calculation_id, auth.user_id)
    if not calculation:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"K3 calculation with id {calculation_id} not found"
        )
    return _to_response(calculation)


@router.delete("/{calculation_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_calculation(
    calculation_id: int,
    request: Request,
    auth: AuthContext = Depends(get_auth_context),
    db: Session = Depends(get_db),
):
    try:
        calculation = get_owned_record(db, K3Calculation, calculation_id, auth.user_id)
        if not calculation:
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail=f"K3 calculation with id {calculation_id} not found"
            )
        db.delete(calculation)
        db.commit()
        log_activity(
            db, auth.user_id, ActivityAction.ANALYSIS_DELETE, ResourceType.K3, calculation_id, request=request
        )
    except HTTPException:
        raise
    except Exception as e:
        logger.error(f"Error deleting K3 calculation: {e}", exc_info=True)
        db.rollback()
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to delete K3 calculation"
        )
