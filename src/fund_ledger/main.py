"""FastAPI application entry point."""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from fund_ledger.api.routers import (
    analysis_router,
    contributions_router,
    data_router,
    holdings_router,
    transactions_router,
)
from fund_ledger.app_context import get_app_context
from fund_ledger.config.logging_config import setup_logging
from fund_ledger.config.settings import get_settings
from fund_ledger.core.exceptions import AppError, NotFoundError

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan handler."""
    # Startup
    setup_logging()
    context = get_app_context()
    context.initialize()
    settings = get_settings()
    if settings.seed_demo_holdings:
        with context.lock:
            context.portfolio.seed_demo_holdings(settings.demo_fund_ids)
    yield
    # Shutdown
    context.close()


settings = get_settings()

app = FastAPI(
    title=settings.app_name,
    description="Fund portfolio ledger with weighted-average cost tracking",
    version=settings.app_version,
    lifespan=lifespan,
)

# Include routers
app.include_router(holdings_router)
app.include_router(transactions_router)
app.include_router(contributions_router)
app.include_router(analysis_router)
app.include_router(data_router)


@app.exception_handler(AppError)
async def app_error_handler(request: Request, exc: AppError) -> JSONResponse:
    """Global handler for application errors."""
    status_code = 404 if isinstance(exc, NotFoundError) else 400
    if status_code == 400:
        logger.info("Rejected %s %s: %s", request.method, request.url.path, exc.message)
    return JSONResponse(
        status_code=status_code,
        content={"error": exc.code, "message": exc.message},
    )


@app.get("/health")
def health_check() -> dict[str, str]:
    """Health check endpoint."""
    return {"status": "healthy"}


@app.get("/")
def root() -> dict[str, str]:
    """Root endpoint with API info."""
    return {
        "app": settings.app_name,
        "version": settings.app_version,
        "docs": "/docs",
    }
