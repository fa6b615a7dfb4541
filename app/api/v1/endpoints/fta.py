"""
Fault Tree Analysis endpoints.
"""
import logging
from fastapi import APIRouter, Depends, HTTPException, Request, status
from sqlalchemy.orm import Session

from app.core.auth import AuthContext, get_auth_context
from app.core.database import get_db
from app.models.fta_analysis import FtaAnalysis
from app.schemas.fta import FtaCreateRequest, FtaListResponse, FtaResponse
from app.services.activity_service import ActivityAction, ResourceType, log_activity
from app.services.fault_tree import count_nodes, with_top_event
from app.services.report_service import get_owned_record, list_owned

logger = logging.getLogger(__name__)

router = APIRouter()


def _get_analysis_or_404(db: Session, analysis_id: int, auth: AuthContext) -> FtaAnalysis:
    analysis = get_owned_record(db, FtaAnalysis, analysis_id, auth.user_id)
    if not analysis:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"FTA analysis with id {analysis_id} not found"
        )
    return analysis


def _apply(analysis: FtaAnalysis, payload: FtaCreateRequest) -> None:
    analysis.title = payload.title
    analysis.top_event = payload.top_event
    analysis.structure = with_top_event(payload.structure.model_dump(mode="json"), payload.top_event)


@router.get("/", response_model=FtaListResponse)
async def list_analyses(
    auth: AuthContext = Depends(get_auth_context),
    db: Session = Depends(get_db),
):
    try:
        analyses = list_owned(db, FtaAnalysis, auth.user_id)
        return FtaListResponse(
            items=[FtaResponse.model_validate(a) for a in analyses],
            total=len(analyses),
        )
    except Exception as e:
        logger.error(f"Error listing FTA analyses: {e}", exc_info=True)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to retrieve FTA analyses"
        )


@router.post("/", response_model=FtaResponse, status_code=status.HTTP_201_CREATED)
async def create_analysis(
    payload: FtaCreateRequest,
    request: Request,
    auth: AuthContext = Depends(get_auth_context),
    db: Session = Depends(get_db),
):
    try:
        analysis = FtaAnalysis(user_id=auth.user_id)
        _apply(analysis, payload)
        db.add(analysis)
        db.commit()
        db.refresh(analysis)

        log_activity(
            db, auth.user_id, ActivityAction.ANALYSIS_CREATE, ResourceType.FTA, analysis.id,
            details=count_nodes(analysis.structure),
            request=request,
        )
        return FtaResponse.model_validate(analysis)
    except Exception as e:
        logger.error(f"Error creating FTA analysis: {e}", exc_info=True)
        db.rollback()
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to save FTA analysis"
        )


@router.get("/{analysis_id}", response_model=FtaResponse)
async def get_analysis(
    analysis_id: int,
    auth: AuthContext = Depends(get_auth_context),
    db: Session = Depends(get_db),
):
    return FtaResponse.model_validate(_get_analysis_or_404(db, analysis_id, auth))


@router.put("/{analysis_id}", response_model=FtaResponse)
async def update_analysis(
    analysis_id: int,
    payload: FtaCreateRequest,
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
            db, auth.user_id, ActivityAction.ANALYSIS_UPDATE, ResourceType.FTA, analysis.id, request=request
        )
        return FtaResponse.model_validate(analysis)
    except HTTPException:
        raise
    except Exception as e:
        logger.error(f"Error updating FTA analysis: {e}", exc_info=True)
        db.rollback()
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to update FTA analysis"
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
            db, auth.user_id, ActivityAction.ANALYSIS_DELETE, ResourceType.FTA, analysis_id, request=request
        )
    except HTTPException:
        raise
    except Exception as e:
        logger.error(f"Error deleting FTA analysis: {e}", exc_info=True)
        db.rollback()
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to delete FTA analysis"
        )
