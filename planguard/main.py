"""Main FastAPI application"""
import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.exceptions import RequestValidationError

from planguard import __version__
from planguard.core.config import settings
from planguard.core.logging import configure_logging
from planguard.api.routes import (
    plans_router,
    support_router,
    credits_router,
    invoices_router,
    dashboard_router,
)
from planguard.api.exception_handlers import (
    governance_error_handler,
    invalid_tier_error_handler,
    submission_rejected_error_handler,
    api_client_error_handler,
    validation_exception_handler,
)
from planguard.exceptions import (
    GovernanceError,
    InvalidTierError,
    SubmissionRejectedError,
    ApiClientError,
)


logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan events"""
    configure_logging()
    logger.info(f"PlanGuard starting ({settings.environment}), dashboard API at {settings.api_base_url}")
    yield
    logger.info("PlanGuard shutting down")


app = FastAPI(
    title="PlanGuard - Entitlement & Usage Governance",
    description="Plan entitlements, support gating, developer credits and invoices",
    version=__version__,
    lifespan=lifespan,
)

# CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Register exception handlers
app.add_exception_handler(InvalidTierError, invalid_tier_error_handler)
app.add_exception_handler(SubmissionRejectedError, submission_rejected_error_handler)
app.add_exception_handler(GovernanceError, governance_error_handler)
app.add_exception_handler(ApiClientError, api_client_error_handler)
app.add_exception_handler(RequestValidationError, validation_exception_handler)

# Include routers
app.include_router(plans_router, prefix="/api/v1")
app.include_router(support_router, prefix="/api/v1")
app.include_router(credits_router, prefix="/api/v1")
app.include_router(invoices_router, prefix="/api/v1")
app.include_router(dashboard_router, prefix="/api/v1")


@app.get("/")
async def root():
    """Root endpoint"""
    return {
        "name": "PlanGuard",
        "version": __version__,
        "description": "Entitlement & Usage Governance Engine",
        "status": "operational",
    }


@app.get("/health")
async def health_check():
    """Health check endpoint"""
    return {
        "status": "healthy",
        "environment": settings.environment,
    }
