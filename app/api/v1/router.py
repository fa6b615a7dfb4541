"""
API v1 router.
"""
from fastapi import APIRouter

from app.api.v1.endpoints import (
    activity,
    auth,
    calculator,
    cca,
    contact,
    dashboard,
    eta,
    fta,
    health,
    hiradc,
    reports,
)

api_router = APIRouter()

# Health check endpoint (no prefix, so it's /api/v1/health)
api_router.include_router(health.router, tags=["health"])

api_router.include_router(auth.router, prefix="/auth", tags=["auth"])
api_router.include_router(hiradc.router, prefix="/hiradc", tags=["hiradc"])
api_router.include_router(fta.router, prefix="/fta", tags=["fta"])
api_router.include_router(eta.router, prefix="/eta", tags=["eta"])
api_router.include_router(cca.router, prefix="/cca", tags=["cca"])
api_router.include_router(calculator.router, prefix="/calculator", tags=["calculator"])
api_router.include_router(reports.router, prefix="/reports", tags=["reports"])
api_router.include_router(dashboard.router, prefix="/dashboard", tags=["dashboard"])
api_router.include_router(contact.router, prefix="/contact", tags=["contact"])
api_router.include_router(activity.router, prefix="/activity", tags=["activity"])
