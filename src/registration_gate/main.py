# src/registration_gate/main.py
"""Main entry point for the Registration Gate application."""

from __future__ import annotations

import logging
from collections.abc import Sequence
from typing import Any

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.middleware.gzip import GZipMiddleware
from fastapi.responses import JSONResponse

from registration_gate.api.v1 import otp_router, registration_router
from registration_gate.core.errors import (
    InvalidRequestError,
    RegistrationFlowError,
    ThrottledError,
)
from registration_gate.core.settings import settings
from registration_gate.schemas.common import ErrorResponse

logging.basicConfig(
    level=settings.log_level.upper(),
    format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
)
logger = logging.getLogger(__name__)

# Initialize FastAPI app
app = FastAPI(
    title="Registration Gate API",
    description="Dual-channel OTP verification and registration sessions",
    version=settings.app_version,
)

# Add CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=settings.cors_allow_credentials,
    allow_methods=settings.cors_allow_methods,
    allow_headers=settings.cors_allow_headers,
)

# Add GZip middleware for compression
app.add_middleware(GZipMiddleware)

# Include API routers
app.include_router(otp_router, prefix="/api/v1")
app.include_router(registration_router, prefix="/api/v1")


@app.exception_handler(RegistrationFlowError)
async def registration_flow_error_handler(
    request: Request, exc: RegistrationFlowError
) -> JSONResponse:
    """Render every expected flow failure as ``{success: false, message, code}``."""
    body = ErrorResponse(message=exc.message, code=exc.code)
    headers: dict[str, str] = {}
    if isinstance(exc, ThrottledError):
        body.retry_after = exc.remaining_seconds
        headers["Retry-After"] = str(exc.remaining_seconds)
    if exc.transient:
        logger.warning("%s %s failed transiently: %s", request.method, request.url.path, exc.code)
    return JSONResponse(
        status_code=exc.status_code,
        content=body.model_dump(exclude_none=True),
        headers=headers,
    )


_REQUIRED_ERROR_TYPES = {"missing", "string_too_short"}


def _validation_message(errors: Sequence[Any]) -> str:
    """Condense pydantic errors into one user-facing sentence."""
    if not errors:
        return InvalidRequestError.default_message
    first = errors[0]
    field = str(first["loc"][-1]) if len(first["loc"]) > 1 else "body"
    if field in {"email", "mobile", "body"} and first["type"] in _REQUIRED_ERROR_TYPES:
        return InvalidRequestError.default_message
    message = str(first["msg"]).removeprefix("Value error, ")
    return f"Invalid {field}: {message}"


@app.exception_handler(RequestValidationError)
async def request_validation_error_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    """Render malformed request bodies as 400 with the shared error body."""
    logger.debug("Rejected %s %s: %s", request.method, request.url.path, exc.errors())
    error = InvalidRequestError(_validation_message(exc.errors()))
    return await registration_flow_error_handler(request, error)


@app.on_event("startup")
async def on_startup() -> None:
    logger.info(
        "Starting %s %s (%s, OTP delivery: %s)",
        settings.app_name,
        settings.app_version,
        settings.environment,
        settings.effective_delivery_mode,
    )


@app.get("/health")
async def health_check() -> dict[str, str]:
    """Health check endpoint to verify the service is running."""
    return {"status": "ok"}


@app.get("/")
async def root() -> dict[str, str]:
    """Root endpoint with basic information about the API."""
    return {
        "name": settings.app_name,
        "version": settings.app_version,
        "docs": "/docs",
    }


if __name__ == "__main__":
    import uvicorn
    uvicorn.run("registration_gate.main:app", host="0.0.0.0", port=8000, reload=settings.debug)
