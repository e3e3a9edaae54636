# src/registration_gate/models/__init__.py
"""SQLAlchemy models for the Registration Gate service."""

from .challenge import OtpChallenge, OtpChannel
from .form_schema import FormSchema
from .registration import Registration

__all__ = [
    "OtpChallenge", "OtpChannel",
    "FormSchema",
    "Registration",
]
