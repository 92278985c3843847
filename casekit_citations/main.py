"""CaseKit Citations - FastAPI Application Entry Point."""

from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

import structlog
from fastapi import FastAPI
from fastapi.responses import JSONResponse

from . import __version__
from .api.v1.endpoints.authorities import router as authorities_router
from .api.v1.endpoints.citations import router as citations_router
from .core.config import settings
from .core.logging import configure_logging

logger = structlog.get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Application lifespan manager."""
    configure_logging()
    logger.info(
        "service_starting",
        host=settings.API_HOST,
        port=settings.API_PORT,
        base_dir=str(settings.CASEKIT_BASE_DIR),
        pacing_ms=settings.REQUEST_PACING_MS,
        log_level=settings.LOG_LEVEL,
    )

    yield

    logger.info("service_stopping")


app = FastAPI(
    title="CaseKit Citations API",
    description="Resolves UK case-law citations to verified BAILII and Find Case Law judgment URLs",
    version=__version__,
    docs_url="/api/docs",
    redoc_url="/api/redoc",
    openapi_url="/api/openapi.json",
    lifespan=lifespan,
)


@app.get("/api/v1/health", tags=["Health"])
async def health_check() -> JSONResponse:
    """Health check endpoint.

    Returns:
        JSONResponse: Service health status
    """
    return JSONResponse(
        content={
            "status": "healthy",
            "service": "casekit-citations",
            "version": __version__,
            "environment": "development" if settings.DEBUG else "production",
        }
    )


@app.get("/", tags=["Root"])
async def root() -> JSONResponse:
    """Root endpoint with service information."""
    return JSONResponse(
        content={
            "service": "CaseKit Citations API",
            "version": __version__,
            "docs": "/api/docs",
            "health": "/api/v1/health",
            "status": "ready",
        }
    )


app.include_router(citations_router, prefix="/api")
app.include_router(authorities_router, prefix="/api")
