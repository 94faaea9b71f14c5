"""
StaffPlan API Main Application

Entry point for the FastAPI application.
"""

from contextlib import asynccontextmanager
from typing import AsyncIterator

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from fastapi.middleware.cors import CORSMiddleware
from prometheus_client import make_asgi_app

from staffplan.platform.config import settings
from staffplan.capacity.errors import StoreError
from staffplan.platform.logging import bind_request_context, configure_logging, get_logger
from staffplan.api.routers import allocations, snapshots
from staffplan.api.dependencies import (
    init_resources,
    close_resources,
    get_postgres_adapter,
)

# Configure logging on import
configure_logging()
logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Application lifespan handler for startup/shutdown."""
    logger.info("Starting StaffPlan API...")
    try:
        init_resources()
        logger.info("Resources initialized successfully.")
    except Exception as e:
        logger.error(f"Failed to initialize resources: {e}")
        raise

    yield

    logger.info("Shutting down StaffPlan API...")
    close_resources()
    logger.info("Resources closed.")


# Create FastAPI application
app = FastAPI(
    title=settings.APP_NAME,
    version=settings.VERSION,
    description="Capacity allocation and utilization tracking",
    docs_url="/docs",
    redoc_url="/redoc",
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS.split(",") if settings.CORS_ORIGINS else ["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.middleware("http")
async def request_log_context(request: Request, call_next):
    bind_request_context(method=request.method, path=request.url.path)
    return await call_next(request)


@app.exception_handler(StoreError)
async def store_error_handler(request: Request, exc: StoreError) -> JSONResponse:
    # Failures outside the routers: opening the store, committing the unit of work
    logger.error("Allocation store unavailable", error=str(exc))
    return JSONResponse(status_code=503, content={"detail": str(exc)})


# =============================================================================
# OBSERVABILITY
# =============================================================================

if settings.METRICS_ENABLED:
    app.mount("/metrics", make_asgi_app())


# =============================================================================
# HEALTH ENDPOINTS
# =============================================================================


@app.get("/health/live", tags=["Health"])
async def liveness() -> dict:
    """Liveness probe - is the service running?"""
    return {"status": "alive"}


@app.get("/health/ready", tags=["Health"])
async def readiness() -> dict:
    """
    Readiness probe - is the service ready to accept traffic?
    Checks the database connection.
    """
    postgres_healthy = get_postgres_adapter().health_check()

    return {
        "status": "ready" if postgres_healthy else "not_ready",
        "version": settings.VERSION,
        "checks": {
            "postgres": "healthy" if postgres_healthy else "unhealthy",
        },
    }


# =============================================================================
# API ROUTERS
# =============================================================================

app.include_router(
    allocations.router,
    prefix="/api/v1/projects/{project_key}/allocations",
    tags=["Allocations"],
)
app.include_router(
    snapshots.router,
    prefix="/api/v1/projects/{project_key}/snapshots",
    tags=["Snapshots"],
)


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "staffplan.api.main:app",
        host=settings.API_HOST,
        port=settings.API_PORT,
        reload=settings.DEBUG,
    )
