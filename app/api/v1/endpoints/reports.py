"""
Unified report list, delete-by-type and PDF export.
"""
import io
import logging
from typing import Optional
from fastapi import APIRouter, Depends, HTTPException, Query, Request, status
from fastapi.responses import StreamingResponse
from sqlalchemy.orm import Session

from app.core.auth import AuthContext, get_auth_context
from app.core.database import get_db
from app.schemas.common import AnalysisType
from app.schemas.reports import ReportListResponse
from app.services.activity_service import ActivityAction, log_activity
from app.services.report_service import (
    COLLECTIONS,
    PAGE_SIZE,
    RESOURCE_TYPES,
    get_owned_record,
    list_reports,
)
from app.utils.pdf_generator import AnalysisReportBuilder

logger = logging.getLogger(__name__)

router = APIRouter()


def _get_record_or_404(db: Session, report_type: AnalysisType, record_id: int, auth: AuthContext):
    record = get_owned_record(db, COLLECTIONS[report_type], record_id, auth.user_id)
    if not record:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"{report_type.value} report with id {record_id} not found"
        )
    return record


@router.get("/", response_model=ReportListResponse)
async def get_reports(
    type: Optional[AnalysisType] = Query(None, description="Filter by analysis type"),
    search: Optional[str] = Query(None, max_length=255, description="Search by title or type"),
    page: int = Query(1, ge=1, description="Page number (10 reports per page)"),
    auth: AuthContext = Depends(get_auth_context),
    db: Session = Depends(get_db),
):
    """
    List every analysis of the caller across the five tables, newest first.

    If any table cannot be read the whole list fails.
    """
    try:
        return ReportListResponse(**list_reports(db, auth.user_id, type, search, page, PAGE_SIZE))
    except Exception as e:
        logger.error(f"Error listing reports: {e}", exc_info=True)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to load reports"
        )


@router.delete("/{report_type}/{record_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_report(
    report_type: AnalysisType,
    record_id: int,
    request: Request,
    auth: AuthContext = Depends(get_auth_context),
    db: Session = Depends(get_db),
):
    try:
        record = _get_record_or_404(db, report_type, record_id, auth)
        db.delete(record)
        db.commit()
        log_activity(
            db, auth.user_id, ActivityAction.ANALYSIS_DELETE, RESOURCE_TYPES[report_type], record_id,
            request=request,
        )
    except HTTPException:
        raise
    except Exception as e:
        logger.error(f"Error deleting {report_type.value} report {record_id}: {e}", exc_info=True)
        db.rollback()
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to delete report"
        )


@router.get("/{report_type}/{record_id}/pdf")
async def export_report_pdf(
    report_type: AnalysisType,
    record_id: int,
    request: Request,
    auth: AuthContext = Depends(get_auth_context),
    db: Session = Depends(get_db),
):
    """Download one analysis as a PDF report."""
    record = _get_record_or_404(db, report_type, record_id, auth)
    try:
        pdf_bytes = AnalysisReportBuilder(report_type, record).build()
    except Exception as e:
        logger.error(f"Error generating PDF for {report_type.value} {record_id}: {e}", exc_info=True)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to generate PDF report"
        )

    log_activity(
        db, auth.user_id, ActivityAction.REPORT_EXPORT, RESOURCE_TYPES[report_type], record_id,
        details={"format": "pdf", "size": len(pdf_bytes)},
        request=request,
    )
    filename = f"{report_type.value.lower()}_{record_id}.pdf"
    logger.info(f"Generated PDF report for {report_type.value} id={record_id}, size={len(pdf_bytes)} bytes")
    return StreamingResponse(
        io.BytesIO(pdf_bytes),
        media_type="application/pdf",
        headers={
            "Content-Disposition": f'attachment; filename="{filename}"'
        }
    )
