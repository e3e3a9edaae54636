"""Failure taxonomy for the OTP verification and registration-session flow.

Every failure a caller can observe is one of the classes below. Services raise
them and the API layer renders them through a single exception handler, so the
HTTP status, machine-readable code and user-facing message live together here.
"""

from __future__ import annotations

from fastapi import status


class RegistrationFlowError(RuntimeError):
    """Base exception for every expected failure of the registration flow."""

    code: str = "registration_error"
    status_code: int = status.HTTP_400_BAD_REQUEST
    default_message: str = "Registration request failed"
    transient: bool = False

    def __init__(self, message: str | None = None) -> None:
        self.message = message or self.default_message
        super().__init__(self.message)


class AlreadyRegisteredError(RegistrationFlowError):
    """A finalized registration already exists for the email or mobile."""

    code = "already_registered"
    status_code = status.HTTP_409_CONFLICT
    default_message = "This Email or Mobile Number is already registered."


class ThrottledError(RegistrationFlowError):
    """A code was requested for the same identifier inside the cooldown window."""

    code = "throttled"
    status_code = status.HTTP_429_TOO_MANY_REQUESTS

    def __init__(self, remaining_seconds: int, channel_label: str = "OTP") -> None:
        self.remaining_seconds = remaining_seconds
        super().__init__(
            f"Please wait {remaining_seconds} seconds before resending {channel_label}."
        )


class DispatchFailureError(RegistrationFlowError):
    """The email or SMS transport did not accept the code."""

    code = "dispatch_failed"
    status_code = status.HTTP_502_BAD_GATEWAY
    default_message = "Could not deliver the verification code. Please try again."
    transient = True


class InvalidRequestError(RegistrationFlowError):
    """The request body is missing fields or carries malformed values."""

    code = "invalid_request"
    default_message = "Email and mobile required"


class ChallengeNotFoundError(RegistrationFlowError):
    """No live challenge for the identity pair (expired, consumed, or never issued)."""

    code = "otp_expired"
    default_message = "OTP expired. Please resend."


class IncompleteRequestError(RegistrationFlowError):
    """Verification attempted before both channels received a code."""

    code = "otp_incomplete"
    default_message = "Please send both OTPs first."


class InvalidMobileOtpError(RegistrationFlowError):
    code = "invalid_mobile_otp"
    default_message = "Invalid Mobile OTP"


class InvalidEmailOtpError(RegistrationFlowError):
    code = "invalid_email_otp"
    default_message = "Invalid Email OTP"


class UnauthorizedError(RegistrationFlowError):
    """The registration session token is missing, invalid or expired.

    Recovery always means restarting the flow from code issuance.
    """

    code = "unauthorized"
    status_code = status.HTTP_401_UNAUTHORIZED
    default_message = "Invalid or expired registration session"


class PersistenceError(RegistrationFlowError):
    """The backing store rejected or failed a read or write."""

    code = "persistence_error"
    status_code = status.HTTP_503_SERVICE_UNAVAILABLE
    default_message = "Storage is temporarily unavailable. Please try again."
    transient = True
