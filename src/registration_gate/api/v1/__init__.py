"""Version 1 API endpoints."""

from .endpoints import otp_router, registration_router

__all__ = [
    "otp_router",
    "registration_router",
]
