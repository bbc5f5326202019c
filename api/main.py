"""
FastAPI application initialization
"""

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from api.routes import health, districts, performance, sync
from api.middleware import RequestContextMiddleware
from core.config import settings
from core.database import Database
from core.exceptions import (
    ConstraintViolationError,
    DistrictServiceError,
    InvalidInputError,
    NotFoundError,
)
from core.logging import setup_logging
from ingestion.runner import SyncRunner
from ingestion.scheduler import SyncScheduler
from schemas.api import ErrorResponse
import logging

setup_logging()

logger = logging.getLogger(__name__)

# Create FastAPI app
app = FastAPI(
    title="District Performance Data Service",
    description="District-level rural employment program statistics with derived metrics",
    version="1.0.0",
    docs_url="/docs",
    redoc_url="/redoc"
)

app.add_middleware(RequestContextMiddleware)

# Include routers
app.include_router(health.router)
app.include_router(districts.router)
app.include_router(performance.router)
app.include_router(sync.router)


def _error_response(request: Request, exc: DistrictServiceError, status_code: int) -> JSONResponse:
    body = ErrorResponse(
        error=type(exc).__name__,
        detail=exc.message,
        context=exc.to_dict()["context"],
        request_id=getattr(request.state, "request_id", None)
    )
    return JSONResponse(status_code=status_code, content=body.model_dump(mode="json"))


@app.exception_handler(NotFoundError)
async def not_found_handler(request: Request, exc: NotFoundError):
    logger.debug(f"Not found: {exc}")
    return _error_response(request, exc, 404)


@app.exception_handler(InvalidInputError)
async def invalid_input_handler(request: Request, exc: InvalidInputError):
    logger.info(f"Rejected input: {exc}")
    return _error_response(request, exc, 400)


@app.exception_handler(ConstraintViolationError)
async def constraint_violation_handler(request: Request, exc: ConstraintViolationError):
    logger.warning(f"Constraint violation: {exc}")
    return _error_response(request, exc, 409)


@app.exception_handler(DistrictServiceError)
async def service_error_handler(request: Request, exc: DistrictServiceError):
    logger.error(f"Unhandled service error: {exc}")
    return _error_response(request, exc, 500)


@app.on_event("startup")
async def startup_event():
    """Open the database, then start the sync scheduler"""
    logger.info("Starting District Performance Data Service")
    logger.info(f"Environment: {settings.ENVIRONMENT}")
    logger.info(f"Database: {settings.DATABASE_URL.split('@')[1] if '@' in settings.DATABASE_URL else settings.DATABASE_URL}")

    database = Database(settings.DATABASE_URL)
    await database.open()

    runner = SyncRunner(database)
    scheduler = SyncScheduler(runner)

    app.state.database = database
    app.state.sync_runner = runner
    app.state.scheduler = scheduler

    scheduler.start()


@app.on_event("shutdown")
async def shutdown_event():
    """Stop the scheduler before closing the database"""
    logger.info("Shutting down District Performance Data Service")
    scheduler = getattr(app.state, "scheduler", None)
    if scheduler is not None:
        scheduler.stop()
    database = getattr(app.state, "database", None)
    if database is not None:
        await database.close()


@app.get("/")
async def root():
    """Root endpoint"""
    return {
        "message": "District Performance Data Service",
        "version": "1.0.0",
        "docs": "/docs",
        "health": "/health",
        "endpoints": {
            "regions": "/api/regions",
            "districts": "/api/districts",
            "search": "/api/districts/search?q=",
            "nearest": "/api/districts/nearest?lat=&lon=",
            "performance": "/api/performance/{code}",
            "summary": "/api/performance/{code}/summary",
            "trends": "/api/performance/{code}/trends",
            "comparison": "/api/regions/{code}/comparison",
            "sync": "/api/sync/status"
        }
    }
