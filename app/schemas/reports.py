"""Schemas for the unified report list and the dashboard."""
from datetime import datetime
from typing import List, Optional
from pydantic import BaseModel

from app.schemas.common import AnalysisType


class ReportItem(BaseModel):
    """One row of the unified report list."""
    id: int
    type: AnalysisType
    title: str
    status: str
    created_at: datetime


class ReportListResponse(BaseModel):
    items: List[ReportItem]
    total: int
    page: int
    page_size: int
    total_pages: int


class KpiSummary(BaseModel):
    total: int
    high: int
    medium: int
    low: int


class MonthlyCount(BaseModel):
    name: str
    year: int
    month: int
    analyses: int


class MonthlyTrir(BaseModel):
    name: str
    year: int
    month: int
    trir: float


class DistributionSlice(BaseModel):
    name: str
    value: int


class RecentActivity(BaseModel):
    id: int
    title: str
    type: str
    score: int
    date: Optional[datetime] = None


class DashboardResponse(BaseModel):
    kpis: KpiSummary
    monthly_trend: List[MonthlyCount]
    trir_trend: List[MonthlyTrir]
    risk_distribution: List[DistributionSlice]
    recent_activities: List[RecentActivity]
