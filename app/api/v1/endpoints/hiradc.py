"""
HIRADC analysis endpoints.
"""
import logging
from fastapi import APIRouter, Depends, HTTPException, Request, status
from sqlalchemy.orm import Session

from app.core.auth import AuthContext, get_auth_context
from app.core.database import get_db
from app.models.hiradc_analysis import HiradcAnalysis
from app.schemas.hiradc import (
    HiradcCreateRequest,
    HiradcFields,
    HiradcListResponse,
    HiradcResponse,
    InsightResponse,
    RiskPreviewRequest,
    RiskPreviewResponse,
)
from app.services.activity_service import ActivityAction, ResourceType, log_activity
from app.services.ai_service import AIService, get_ai_service
from app.services.report_service import get_owned_record, list_owned
from app.services.risk_scoring import RECOMMENDED_CONTROLS, assess_risk

logger = logging.getLogger(__name__)

router = APIRouter()


def _get_analysis_or_404(db: Session, analysis_id: int, auth: AuthContext) -> HiradcAnalysis:
    analysis = get_owned_record(db, HiradcAnalysis, analysis_id, auth.user_id)
    if not analysis:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"HIRADC analysis with id {analysis_id} not found"
        )
    return analysis


def _apply(analysis: HiradcAnalysis, payload: HiradcCreateRequest) -> None:
    """Copy form fields and recompute the derived score, category and controls."""
    assessment = assess_risk(payload.severity, payload.likelihood)
    analysis.activity_name = payload.activity_name
    analysis.location = payload.location
    analysis.hazard = payload.hazard
    analysis.severity = payload.severity
    analysis.likelihood = payload.likelihood
    analysis.risk_score = assessment.score
    analysis.risk_category = assessment.category
    analysis.recommended_controls = list(RECOMMENDED_CONTROLS)
    analysis.ai_insight = payload.ai_insight or ""


@router.post("/preview", response_model=RiskPreviewResponse)
async def preview_risk(
    payload: RiskPreviewRequest,
    auth: AuthContext = Depends(get_auth_context),
):
    """Score and category for a severity/likelihood pair, without saving."""
    assessment = assess_risk(payload.severity, payload.likelihood)
    return RiskPreviewResponse(
        severity=assessment.severity,
        likelihood=assessment.likelihood,
        risk_score=assessment.score,
        risk_category=assessment.category,
        requires_immediate_action=assessment.requires_immediate_action,
        recommended_controls=list(RECOMMENDED_CONTROLS),
    )


@router.post("/insight", response_model=InsightResponse)
async def generate_insight(
    payload: HiradcFields,
    auth: AuthContext = Depends(get_auth_context),
    ai_service: AIService = Depends(get_ai_service),
):
    """
    Generate the risk narrative for the form values.

    Falls back to the built-in template when no language model is configured.
    """
    try:
        source = "model" if ai_service.is_available() else "template"
        insight = ai_service.generate_hiradc_insight(
            payload.activity_name,
            payload.location,
            payload.hazard,
            payload.severity,
            payload.likelihood,
        )
        return InsightResponse(ai_insight=insight, source=source)
    except ValueError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))
    except Exception as e:
        logger.error(f"Error generating HIRADC insight: {e}", exc_info=True)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to generate AI insight"
        )


@router.get("/", response_model=HiradcListResponse)
async def list_analyses(
    auth: AuthContext = Depends(get_auth_context),
    db: Session = Depends(get_db),
):
    try:
        analyses = list_owned(db, HiradcAnalysis, auth.user_id)
        return HiradcListResponse(
            items=[HiradcResponse.model_validate(a) for a in analyses],
            total=len(analyses),
        )
    except Exception as e:
        logger.error(f"Error listing HIRADC analyses: {e}", exc_info=True)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to retrieve HIRADC analyses"
        )


@router.post("/", response_model=HiradcResponse, status_code=status.HTTP_201_CREATED)
async def create_analysis(
    payload: HiradcCreateRequest,
    request: Request,
    auth: AuthContext = Depends(get_auth_context),
    db: Session = Depends(get_db),
):
    try:
        analysis = HiradcAnalysis(user_id=auth.user_id)
        _apply(analysis, payload)
        db.add(analysis)
        db.commit()
        db.refresh(analysis)

        log_activity(
            db, auth.user_id, ActivityAction.ANALYSIS_CREATE, ResourceType.HIRADC, analysis.id,
            details={"risk_score": analysis.risk_score, "risk_category": analysis.risk_category.value},
            request=request,
        )
        logger.info(f"Created HIRADC analysis id={analysis.id} score={analysis.risk_score}")
        return HiradcResponse.model_validate(analysis)
    except Exception as e:
        logger.error(f"Error creating HIRADC analysis: {e}", exc_info=True)
        db.rollback()
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to save HIRADC analysis"
        )


@router.get("/{analysis_id}", response_model=HiradcResponse)
async def get_analysis(
    analysis_id: int,
    auth: AuthContext = Depends(get_auth_context),
    db: Session = Depends(get_db),
):
    return HiradcResponse.model_validate(_get_analysis_or_404(db, analysis_id, auth))


@router.put("/{analysis_id}", response_model=HiradcResponse)
async def update_analysis(
    analysis_id: int,
    payload: HiradcCreateRequest,
    request: Request,
    auth: AuthContext = Depends(get_auth_context),
    db: Session = Depends(get_db),
):
    """Replace the form fields of an analysis; derived fields are recomputed."""
    try:
        analysis = _get_analysis_or_404(db, analysis_id, auth)
        _apply(analysis, payload)
        db.commit()
        db.refresh(analysis)
        log_activity(
            db, auth.user_id, ActivityAction.ANALYSIS_UPDATE, ResourceType.HIRADC, analysis.id, request=request
        )
        return HiradcResponse.model_validate(analysis)
    except HTTPException:
        raise
    except Exception as e:
        logger.error(f"Error updating HIRADC analysis: {e}", exc_info=True)
        db.rollback()
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to update HIRADC analysis"
        )


@router.delete("/{analysis_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_analysis(
    analysis_id: int,
    request: Request,
    auth: AuthContext = Depends(get_auth_context),
    db: Session = Depends(get_db),
):
    try:
        analysis = _get_analysis_or_404(db, analysis_id, auth)
        db.delete(analysis)
        db.commit()
        log_activity(
            db, auth.user_id, ActivityAction.ANALYSIS_DELETE, ResourceType.HIRADC, analysis_id, request=request
        )
    except HTTPException:
        raise
    except Exception as e:
        logger.error(f"Error deleting HIRADC analysis: {e}", exc_info=True)
        db.rollback()
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to delete HIRADC analysis"
        )
