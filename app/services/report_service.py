"""
Unified report list over the five analysis tables.
"""
import logging
import math
from typing import Any, Dict, List, Optional

from sqlalchemy.orm import Session

from app.models.cca_analysis import CcaAnalysis
from app.models.eta_analysis import EtaAnalysis
from app.models.fta_analysis import FtaAnalysis
from app.models.hiradc_analysis import HiradcAnalysis
from app.models.k3_calculation import K3Calculation
from app.schemas.common import AnalysisType
from app.services.activity_service import ResourceType

logger = logging.getLogger(__name__)

PAGE_SIZE = 10

COLLECTIONS = {
    AnalysisType.HIRADC: HiradcAnalysis,
    AnalysisType.FTA: FtaAnalysis,
    AnalysisType.ETA: EtaAnalysis,
    AnalysisType.CCA: CcaAnalysis,
    AnalysisType.K3: K3Calculation,
}

RESOURCE_TYPES = {
    AnalysisType.HIRADC: ResourceType.HIRADC,
    AnalysisType.FTA: ResourceType.FTA,
    AnalysisType.ETA: ResourceType.ETA,
    AnalysisType.CCA: ResourceType.CCA,
    AnalysisType.K3: ResourceType.K3,
}


def list_owned(db: Session, model, user_id: int) -> List[Any]:
    """All rows of a table owned by the user, newest first."""
    return (
        db.query(model)
        .filter(model.user_id == user_id)
        .order_by(model.created_at.desc(), model.id.desc())
        .all()
    )


def get_owned_record(db: Session, model, record_id: int, user_id: int) -> Optional[Any]:
    """Fetch a row by id; rows owned by someone else are treated as missing."""
    return (
        db.query(model)
        .filter(model.id == record_id, model.user_id == user_id)
        .first()
    )


def report_title(report_type: AnalysisType, record) -> str:
    if report_type == AnalysisType.HIRADC:
        return record.activity_name
    if report_type == AnalysisType.K3:
        created = record.created_at.strftime("%Y-%m-%d") if record.created_at else "-"
        return f"K3 Calculation - {created}"
    return record.title


def report_status(report_type: AnalysisType, record) -> str:
    if report_type == AnalysisType.HIRADC:
        category = record.risk_category
        return category.value if hasattr(category, "value") else str(category)
    if report_type == AnalysisType.K3:
        return f"LTIR: {record.ltir}"
    return "Completed"


def report_row(report_type: AnalysisType, record) -> Dict[str, Any]:
    return {
        "id": record.id,
        "type": report_type,
        "title": report_title(report_type, record),
        "status": report_status(report_type, record),
        "created_at": record.created_at,
    }


def collect_reports(db: Session, user_id: int) -> List[Dict[str, Any]]:
    """
    Fetch every collection and merge into one list, newest first.

    Any failing fetch propagates: the merged view is all or nothing.
    """
    rows = []
    for report_type, model in COLLECTIONS.items():
        rows.extend(report_row(report_type, record) for record in list_owned(db, model, user_id))
    rows.sort(key=lambda row: (row["created_at"], row["id"]), reverse=True)
    return rows


def filter_reports(
    rows: List[Dict[str, Any]],
    report_type: Optional[AnalysisType] = None,
    search: Optional[str] = None,
) -> List[Dict[str, Any]]:
    """Type filter plus case-insensitive substring search over title and type."""
    if report_type is not None:
        rows = [row for row in rows if row["type"] == report_type]
    if search:
        needle = search.strip().lower()
        rows = [
            row for row in rows
            if needle in row["title"].lower() or needle in row["type"].value.lower()
        ]
    return rows


def paginate(rows: List[Dict[str, Any]], page: int, page_size: int = PAGE_SIZE) -> Dict[str, Any]:
    total = len(rows)
    start = (page - 1) * page_size
    return {
        "items": rows[start:start + page_size],
        "total": total,
        "page": page,
        "page_size": page_size,
        "total_pages": math.ceil(total / page_size),
    }


def list_reports(
    db: Session,
    user_id: int,
    report_type: Optional[AnalysisType] = None,
    search: Optional[str] = None,
    page: int = 1,
    page_size: int = PAGE_SIZE,
) -> Dict[str, Any]:
    rows = collect_reports(db, user_id)
    filtered = filter_reports(rows, report_type, search)
    logger.debug(f"Report list for user {user_id}: {len(filtered)} of {len(rows)} rows match")
    return paginate(filtered, page, page_size)
