"""Exception handlers for FastAPI application"""
from fastapi import Request, status
from fastapi.responses import JSONResponse
from fastapi.exceptions import RequestValidationError
from fastapi.encoders import jsonable_encoder

from planguard.exceptions import (
    GovernanceError,
    InvalidTierError,
    SubmissionRejectedError,
    ApiClientError,
)


async def governance_error_handler(request: Request, exc: GovernanceError) -> JSONResponse:
    """Handle entitlement-related errors"""
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={
            "error": exc.to_dict(),
            "path": str(request.url.path),
        },
    )


async def invalid_tier_error_handler(request: Request, exc: InvalidTierError) -> JSONResponse:
    """Handle unrecognized plan tiers"""
    return JSONResponse(
        status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
        content={
            "error": exc.to_dict(),
            "path": str(request.url.path),
        },
    )


async def submission_rejected_error_handler(request: Request, exc: SubmissionRejectedError) -> JSONResponse:
    """Handle refused support/change submissions"""
    return JSONResponse(
        status_code=status.HTTP_429_TOO_MANY_REQUESTS,
        content={
            "error": exc.to_dict(),
            "path": str(request.url.path),
        },
    )


async def api_client_error_handler(request: Request, exc: ApiClientError) -> JSONResponse:
    """Handle failures of the remote dashboard API on write paths"""
    return JSONResponse(
        status_code=status.HTTP_502_BAD_GATEWAY,
        content={
            "error": {
                "code": "UPSTREAM_ERROR",
                "message": str(exc),
                "endpoint": exc.endpoint,
                "upstream_status": exc.status_code,
            },
            "path": str(request.url.path),
        },
    )


async def validation_exception_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """Handle Pydantic validation errors"""
    return JSONResponse(
        status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
        content={
            "error": {
                "code": "VALIDATION_ERROR",
                "message": "Request validation failed",
                "details": jsonable_encoder(exc.errors()),
            },
            "path": str(request.url.path),
        },
    )
