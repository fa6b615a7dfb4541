"""
Main FastAPI application entry point.
"""
import logging
import os
import uuid
from contextlib import asynccontextmanager
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy import text

from fastapi import FastAPI, Request, HTTPException, status
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from fastapi.middleware.cors import CORSMiddleware

from app.core.auth import build_session_manager
from app.core.config import settings
from app.core.database import engine, Base, SessionLocal
from app.core.logging_config import setup_logging
from app.api.v1.router import api_router
from app.middleware.request_logging import RequestLoggingMiddleware

# Import all models to ensure they register with Base.metadata
from app.models import (  # noqa: F401
    User,
    AuthSession,
    HiradcAnalysis,
    FtaAnalysis,
    EtaAnalysis,
    CcaAnalysis,
    K3Calculation,
    ContactMessage,
    ActivityLog,
)

setup_logging()
logger = logging.getLogger(__name__)


def run_migrations() -> None:
    """Apply Alembic migrations when running against a managed database."""
    if not os.getenv("DATABASE_URL"):
        logger.info("[MIGRATION] DATABASE_URL not set, skipping migrations (local dev mode)")
        return
    try:
        from alembic.config import Config
        from alembic import command

        logger.info("[MIGRATION] DATABASE_URL detected, running Alembic migrations...")
        command.upgrade(Config("alembic.ini"), "head")
        logger.info("[MIGRATION] Alembic migrations completed successfully (or already up-to-date)")
    except Exception as e:
        trace_id = str(uuid.uuid4())
        logger.warning(
            f"[MIGRATION] [{trace_id}] Alembic migration check failed: {e}. "
            "This is OK if migrations already ran or the database is not ready yet."
        )
        logger.debug(f"[MIGRATION] [{trace_id}] Migration error details:", exc_info=True)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Lifespan context manager for startup and shutdown events."""
    logger.info(f"Starting up {settings.APP_NAME} API...")

    run_migrations()

    # Fallback for local dev without Alembic
    try:
        Base.metadata.create_all(bind=engine)
        logger.info("Database tables created/verified successfully")
    except Exception as e:
        logger.error(f"Failed to create database tables: {e}", exc_info=True)

    session_manager = build_session_manager()
    app.state.session_manager = session_manager

    try:
        db = SessionLocal()
        try:
            db.execute(text("SELECT 1"))
            purged = session_manager.purge_expired(db)
            logger.info(f"Database connectivity verified, purged {purged} expired session(s)")
        finally:
            db.close()
    except Exception as e:
        trace_id = str(uuid.uuid4())
        logger.error(f"[{trace_id}] Database connectivity test failed: {e}", exc_info=True)

    yield

    session_manager.close()
    logger.info(f"Shutting down {settings.APP_NAME} API...")


app = FastAPI(
    title=f"{settings.APP_NAME} API",
    description="Occupational safety and health risk assessment: HIRADC, FTA, ETA, CCA and K3 metrics",
    version="1.0.0",
    docs_url="/docs",
    redoc_url="/redoc",
    lifespan=lifespan,
    redirect_slashes=False,
)

# Request logging middleware (must be added before other middleware)
app.add_middleware(RequestLoggingMiddleware)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(api_router, prefix="/api/v1")


def _trace_id(request: Request) -> str:
    return getattr(request.state, "trace_id", None) or str(uuid.uuid4())


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    """422 with the pydantic error list under `detail`, tagged with the trace id."""
    trace_id = _trace_id(request)
    errors = jsonable_encoder(exc.errors())
    fields = [".".join(str(part) for part in error.get("loc", ())[1:]) for error in errors]
    logger.info(f"[{trace_id}] Validation failed on {request.method} {request.url.path}: {fields}")
    return JSONResponse(
        status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
        content={"detail": errors, "trace_id": trace_id, "error": "ValidationError"},
    )


@app.exception_handler(Exception)
async def global_exception_handler(request: Request, exc: Exception):
    """Global exception handler for unhandled errors with trace_id."""
    trace_id = _trace_id(request)

    logger.error(
        f"[{trace_id}] Unhandled exception: {type(exc).__name__}: {exc}",
        exc_info=True
    )

    if isinstance(exc, SQLAlchemyError):
        error_detail = "Database error: check DATABASE_URL / migrations"
        error_type = "DatabaseError"
    elif isinstance(exc, HTTPException):
        raise exc
    else:
        error_detail = str(exc) if settings.DEBUG else "Internal Server Error"
        error_type = type(exc).__name__

    return JSONResponse(
        status_code=500,
        content={
            "detail": error_detail,
            "trace_id": trace_id,
            "error": error_type,
        },
    )


@app.get("/")
async def root():
    """Root endpoint."""
    return {
        "message": f"{settings.APP_NAME} API",
        "version": "1.0.0",
        "environment": settings.APP_ENV,
        "docs": "/docs",
    }


@app.get("/health")
async def health_check():
    """Liveness probe without database checks. Use /api/v1/health for readiness."""
    return {"status": "ok"}
