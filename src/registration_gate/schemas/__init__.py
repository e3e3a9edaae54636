"""
Pydantic schemas for API request/response models.

These schemas define the structure of API data for serialization and validation.
"""

from .common import ErrorResponse, MessageResponse
from .form import FieldDescriptor, FormSchemaResponse
from .otp import (
    IdentityPairRequest,
    OtpSendResponse,
    UserExitRequest,
    VerifyOtpRequest,
    VerifyOtpResponse,
)
from .registration import (
    DraftResponse,
    DraftSavedResponse,
    RegistrationPayload,
    RegistrationRecord,
    RegistrationSubmittedResponse,
)

__all__ = [
    "ErrorResponse", "MessageResponse",
    "FieldDescriptor", "FormSchemaResponse",
    "IdentityPairRequest", "OtpSendResponse", "UserExitRequest",
    "VerifyOtpRequest", "VerifyOtpResponse",
    "DraftResponse", "DraftSavedResponse", "RegistrationPayload",
    "RegistrationRecord", "RegistrationSubmittedResponse",
]
