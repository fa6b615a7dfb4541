"""
Dashboard aggregation: KPI counts, six-month trends and recent activity.
"""
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional, Sequence, Tuple

from sqlalchemy.orm import Session

from app.models.hiradc_analysis import HiradcAnalysis
from app.models.k3_calculation import K3Calculation
from app.services.report_service import list_owned
from app.services.risk_scoring import dashboard_risk_level

MONTH_NAMES = ["Jan", "Feb", "Mar", "Apr", "May", "Jun", "Jul", "Aug", "Sep", "Oct", "Nov", "Dec"]
TREND_MONTHS = 6
RECENT_LIMIT = 5


def last_months(now: datetime, count: int = TREND_MONTHS) -> List[Tuple[int, int]]:
    """(year, month) pairs for the last `count` months, oldest first, current month last."""
    months = []
    year, month = now.year, now.month
    for _ in range(count):
        months.append((year, month))
        month -= 1
        if month == 0:
            year, month = year - 1, 12
    return list(reversed(months))


def risk_kpis(analyses: Sequence[HiradcAnalysis]) -> Dict[str, int]:
    kpis = {"total": len(analyses), "high": 0, "medium": 0, "low": 0}
    for analysis in analyses:
        kpis[dashboard_risk_level(analysis.risk_score or 0)] += 1
    return kpis


def monthly_counts(records: Sequence[Any], months: List[Tuple[int, int]]) -> List[Dict[str, Any]]:
    counts = {key: 0 for key in months}
    for record in records:
        key = (record.created_at.year, record.created_at.month)
        if key in counts:
            counts[key] += 1
    return [
        {"name": MONTH_NAMES[month - 1], "year": year, "month": month, "analyses": counts[(year, month)]}
        for year, month in months
    ]


def monthly_average_trir(calculations: Sequence[K3Calculation], months: List[Tuple[int, int]]) -> List[Dict[str, Any]]:
    """Average TRIR per month, 0 for months without calculations."""
    sums = {key: [0.0, 0] for key in months}
    for calc in calculations:
        key = (calc.created_at.year, calc.created_at.month)
        if key in sums and calc.trir is not None:
            sums[key][0] += calc.trir
            sums[key][1] += 1
    trend = []
    for year, month in months:
        total, count = sums[(year, month)]
        trend.append({
            "name": MONTH_NAMES[month - 1],
            "year": year,
            "month": month,
            "trir": round(total / count, 2) if count else 0.0,
        })
    return trend


def build_dashboard(db: Session, user_id: int, now: Optional[datetime] = None) -> Dict[str, Any]:
    now = now or datetime.now(timezone.utc)
    analyses = list_owned(db, HiradcAnalysis, user_id)
    calculations = list_owned(db, K3Calculation, user_id)
    months = last_months(now)

    kpis = risk_kpis(analyses)
    return {
        "kpis": kpis,
        "monthly_trend": monthly_counts(analyses, months),
        "trir_trend": monthly_average_trir(calculations, months),
        "risk_distribution": [
            {"name": "High Risk", "value": kpis["high"]},
            {"name": "Medium Risk", "value": kpis["medium"]},
            {"name": "Low Risk", "value": kpis["low"]},
        ],
        "recent_activities": [
            {
                "id": analysis.id,
                "title": analysis.activity_name or "Untitled Analysis",
                "type": "HIRADC",
                "score": analysis.risk_score or 0,
                "date": analysis.created_at,
            }
            for analysis in analyses[:RECENT_LIMIT]
        ],
    }
