"""
Event Tree Analysis endpoints.

Outcomes are derived from the barriers on every save; client-supplied
outcomes are never stored.
"""
import logging
from fastapi import APIRouter, Depends, HTTPException, Request, status
from sqlalchemy.orm import Session

from app.core.auth import AuthContext, get_auth_context
from app.core.database import get_db
from app.models.eta_analysis import EtaAnalysis
from app.schemas.eta import (
    EtaCreateRequest,
    EtaListResponse,
    EtaOutcome,
    EtaPreviewRequest,
    EtaPreviewResponse,
    EtaResponse,
)
from app.services.activity_service import ActivityAction, ResourceType, log_activity
from app.services.event_tree import enumerate_outcomes, evaluate, normalize_barriers, outcome_summary
from app.services.report_service import get_owned_record, list_owned

logger = logging.getLogger(__name__)

router = APIRouter()


def _get_analysis_or_404(db: Session, analysis_id: int, auth: AuthContext) -> EtaAnalysis:
    analysis = get_owned_record(db, EtaAnalysis, analysis_id, auth.user_id)
    if not analysis:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"ETA analysis with id {analysis_id} not found"
        )
    return analysis


def _apply(analysis: EtaAnalysis, payload: EtaCreateRequest) -> None:
    barriers = normalize_barriers([b.model_dump() for b in payload.barriers])
    analysis.title = payload.title
    analysis.initiating_event = payload.initiating_event
    analysis.barriers = barriers
    analysis.outcomes = evaluate(barriers)


@router.post("/preview", response_model=EtaPreviewResponse)
async def preview_outcomes(
    payload: EtaPreviewRequest,
    auth: AuthContext = Depends(get_auth_context),
):
    """Enumerate outcomes for the given barriers without saving."""
    try:
        outcomes = enumerate_outcomes([b.success_rate for b in payload.barriers])
    except ValueError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))
    summary = outcome_summary(outcomes)
    return EtaPreviewResponse(
        outcomes=[EtaOutcome(**o.to_dict()) for o in outcomes],
        total_frequency=summary["total_frequency"],
        counts=summary["counts"],
    )


@router.get("/", response_model=EtaListResponse)
async def list_analyses(
    auth: AuthContext = Depends(get_auth_context),
    db: Session = Depends(get_db),
):
    try:
        analyses = list_owned(db, EtaAnalysis, auth.user_id)
        return EtaListResponse(
            items=[EtaResponse.model_validate(a) for a in analyses],
            total=len(analyses),
        )
    except Exception as e:
        logger.error(f"Error listing ETA analyses: {e}", exc_info=True)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to retrieve ETA analyses"
        )


@router.post("/", response_model=EtaResponse, status_code=status.HTTP_201_CREATED)
async def create_analysis(
    payload: EtaCreateRequest,
    request: Request,
    auth: AuthContext = Depends(get_auth_context),
    db: Session = Depends(get_db),
):
    try:
        analysis = EtaAnalysis(user_id=auth.user_id)
        _apply(analysis, payload)
        db.add(analysis)
        db.commit()
        db.refresh(analysis)

        log_activity(
            db, auth.user_id, ActivityAction.ANALYSIS_CREATE, ResourceType.ETA, analysis.id,
            details={"barriers": len(analysis.barriers), "outcomes": len(analysis.outcomes)},
            request=request,
        )
        logger.info(f"Created ETA analysis id={analysis.id} with {len(analysis.outcomes)} outcomes")
        return EtaResponse.model_validate(analysis)
    except ValueError as e:
        db.rollback()
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))
    except Exception as e:
        logger.error(f"Error creating ETA analysis: {e}", exc_info=True)
        db.rollback()
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to save ETA analysis"
        )


@router.get("/{analysis_id}", response_model=EtaResponse)
async def get_analysis(
    analysis_id: int,
    auth: AuthContext = Depends(get_auth_context),
    db: Session = Depends(get_db),
):
    return EtaResponse.model_validate(_get_analysis_or_404(db, analysis_id, auth))


@router.put("/{analysis_id}", response_model=EtaResponse)
async def update_analysis(
    analysis_id: int,
    payload: EtaCreateRequest,
    request: Request,
    auth: AuthContext = Depends(get_auth_context),
    db: Session = Depends(get_db),
):
    try:
        analysis = _get_analysis_or_404(db, analysis_id, auth)
        _apply(analysis, payload)
        db.commit()
        db.refresh(analysis)
        log_activity(
            db, auth.user_id, ActivityAction.ANALYSIS_UPDATE, ResourceType.ETA, analysis.id, request=request
        )
        return EtaResponse.model_validate(analysis)
    except HTTPException:
        raise
    except ValueError as e:
        db.rollback()
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))
    except Exception as e:
        logger.error(f"Error updating ETA analysis: {e}", exc_info=True)
        db.rollback()
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to update ETA analysis"
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
            db, auth.user_id, ActivityAction.ANALYSIS_DELETE, ResourceType.ETA, analysis_id, request=request
        )
    except HTTPException:
        raise
    except Exception as e:
        logger.error(f"Error deleting ETA analysis: {e}", exc_info=True)
        db.rollback()
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to delete ETA analysis"
        )
