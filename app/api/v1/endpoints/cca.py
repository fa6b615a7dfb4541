"""
Cause Consequence Analysis endpoints.
"""
import logging
from fastapi import APIRouter, Depends, HTTPException, Request, status
from sqlalchemy.orm import Session

from app.core.auth import AuthContext, get_auth_context
from app.core.database import get_db
from app.models.cca_analysis import CcaAnalysis
from app.schemas.cca import CcaCreateRequest, CcaListResponse, CcaResponse
from app.services.activity_service import ActivityAction, ResourceType, log_activity
from app.services.cause_consequence import normalize_tree
from app.services.report_service import get_owned_record, list_owned

logger = logging.getLogger(__name__)

router = APIRouter()


def _get_analysis_or_404(db: Session, analysis_id: int, auth: AuthContext) -> CcaAnalysis:
    analysis = get_owned_record(db, CcaAnalysis, analysis_id, auth.user_id)
    if not analysis:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"CCA analysis with id {analysis_id} not found"
        )
    return analysis


def _apply(analysis: CcaAnalysis, payload: CcaCreateRequest) -> None:
    analysis.title = payload.title
    analysis.critical_event = payload.critical_event
    analysis.cause_tree = normalize_tree([e.model_dump(mode="json") for e in payload.cause_tree])
    analysis.consequence_tree = normalize_tree([e.model_dump(mode="json") for e in payload.consequence_tree])


@router.get("/", response_model=CcaListResponse)
async def list_analyses(
    auth: AuthContext = Depends(get_auth_context),
    db: Session = Depends(get_db),
):
    try:
        analyses = list_owned(db, CcaAnalysis, auth.user_id)
        return CcaListResponse(
            items=[CcaResponse.model_validate(a) for a in analyses],
            total=len(analyses),
        )
    except Exception as e:
        logger.error(f"Error listing CCA analyses: {e}", exc_info=True)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to retrieve CCA analyses"
        )


@router.post("/", response_model=CcaResponse, status_code=status.HTTP_201_CREATED)
async def create_analysis(
    payload: CcaCreateRequest,
    request: Request,
    auth: AuthContext = Depends(get_auth_context),
    db: Session = Depends(get_db),
):
    try:
        analysis = CcaAnalysis(user_id=auth.user_id)
        _apply(analysis, payload)
        db.add(analysis)
        db.commit()
        db.refresh(analysis)

        log_activity(
            db, auth.user_id, ActivityAction.ANALYSIS_CREATE, ResourceType.CCA, analysis.id,
            details={"causes": len(analysis.cause_tree), "consequences": len(analysis.consequence_tree)},
            request=request,
        )
        return CcaResponse.model_validate(analysis)
    except Exception as e:
        logger.error(f"Error creating CCA analysis: {e}", exc_info=True)
        db.rollback()
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to save CCA analysis"
        )


@router.get("/{analysis_id}", response_model=CcaResponse)
async def get_analysis(
    analysis_id: int,
    auth: AuthContext = Depends(get_auth_context),
    db: Session = Depends(get_db),
):
    return CcaResponse.model_validate(_get_analysis_or_404(db, analysis_id, auth))


@router.put("/{analysis_id}", response_model=CcaResponse)
async def update_analysis(
    analysis_id: int,
    payload: CcaCreateRequest,
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
            db, auth.user_id, ActivityAction.ANALYSIS_UPDATE, ResourceType.CCA, analysis.id, request=request
        )
        return CcaResponse.model_validate(analysis)
    except HTTPException:
        raise
    except Exception as e:
        logger.error(f"Error updating CCA analysis: {e}", exc_info=True)
        db.rollback()
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to update CCA analysis"
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
            db, auth.user_id, ActivityAction.ANALYSIS_DELETE, ResourceType.CCA, analysis_id, request=request
        )
    except HTTPException:
        raise
    except Exception as e:
        logger.error(f"Error deleting CCA analysis: {e}", exc_info=True)
        db.rollback()
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to delete CCA analysis"
        )
