"""API endpoint modules for version 1."""

from .otp import router as otp_router
from .registration import router as registration_router

__all__ = [
    "otp_router",
    "registration_router",
]
