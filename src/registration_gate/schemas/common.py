"""Shared Pydantic schemas for common API elements."""
from __future__ import annotations

from pydantic import BaseModel, Field


class MessageResponse(BaseModel):
    """Generic acknowledgement returned by most endpoints."""

    success: bool = Field(True, description="False only on failure responses")
    message: str = Field(..., description="Human-readable outcome")


class ErrorResponse(BaseModel):
    """Body rendered for every registration-flow failure."""

    success: bool = Field(False)
    message: str = Field(..., description="User-facing explanation")
    code: str = Field(..., description="Stable machine-readable failure kind")
    retry_after: int | None = Field(None, description="Seconds to wait before retrying")
