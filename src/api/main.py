"""FastAPI application entry point for the workspace service.

Health check with DB connectivity. Core errors mapped to HTTP status codes.
"""

import logging

import structlog
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy import text

from src.api.workspaces import router as workspaces_router
from src.config.settings import get_settings
from src.workspaces.errors import (
    AllocationExhaustedError,
    ConflictError,
    NotFoundError,
    PermissionDeniedError,
    ValidationFailedError,
    WorkspaceError,
)

APP_NAME = "Workspaces"
APP_VERSION = "0.1.0"

settings = get_settings()

_LOG_NAME_TO_LEVEL: dict[str, int] = {
    "DEBUG": logging.DEBUG,
    "INFO": logging.INFO,
    "WARNING": logging.WARNING,
    "ERROR": logging.ERROR,
    "CRITICAL": logging.CRITICAL,
}

# --- Structured logging ---
structlog.configure(
    processors=[
        structlog.contextvars.merge_contextvars,
        structlog.processors.add_log_level,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.dev.ConsoleRenderer() if settings.ENVIRONMENT == "dev"
        else structlog.processors.JSONRenderer(),
    ],
    wrapper_class=structlog.make_filtering_bound_logger(
        _LOG_NAME_TO_LEVEL[settings.LOG_LEVEL.value],
    ),
    context_class=dict,
    logger_factory=structlog.PrintLoggerFactory(),
    cache_logger_on_first_use=True,
)

logger: structlog.stdlib.BoundLogger = structlog.get_logger()

# --- FastAPI app ---
app = FastAPI(
    title="Workspaces API",
    description="Workspace provisioning and membership governance.",
    version=APP_VERSION,
)

# --- CORS middleware ---
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"] if settings.ENVIRONMENT == "dev" else [],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# --- Error mapping ---

ERROR_STATUS: dict[type[WorkspaceError], int] = {
    NotFoundError: 404,
    ValidationFailedError: 400,
    PermissionDeniedError: 403,
    ConflictError: 409,
    AllocationExhaustedError: 409,
}


def status_for(exc: WorkspaceError) -> int:
    for error_type, status in ERROR_STATUS.items():
        if isinstance(exc, error_type):
            return status
    return 500


@app.exception_handler(WorkspaceError)
async def workspace_error_handler(request: Request, exc: WorkspaceError) -> JSONResponse:
    status = status_for(exc)
    logger.info(
        "workspace_error",
        path=request.url.path,
        error=type(exc).__name__,
        status=status,
        detail=exc.message,
    )
    return JSONResponse(status_code=status, content={"detail": exc.message})


# --- Routers ---
app.include_router(workspaces_router)


# --- Infrastructure Endpoints (global) ---


@app.get("/health")
async def health_check() -> dict:
    """Liveness probe with component health checks.

    Returns 200 always (degraded status if components are down).
    """
    checks: dict[str, bool] = {"api": True}

    # Database connectivity check
    try:
        from src.db.session import async_session_factory
        async with async_session_factory() as session:
            await session.execute(text("SELECT 1"))
        checks["database"] = True
    except Exception:
        checks["database"] = False

    all_ok = all(checks.values())

    return {
        "status": "ok" if all_ok else "degraded",
        "version": APP_VERSION,
        "environment": settings.ENVIRONMENT.value,
        "cloud": settings.CLOUD,
        "checks": checks,
    }


@app.get("/api/version")
async def get_version() -> dict[str, str]:
    """Return application name, version, and environment."""
    return {
        "name": APP_NAME,
        "version": APP_VERSION,
        "environment": settings.ENVIRONMENT.value,
    }
