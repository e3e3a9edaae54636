"""Business logic services for the Registration Gate application."""

from .cooldown import CooldownTracker
from .drafts import DraftManager
from .otp_issuer import IdentityPair, OtpIssuer
from .schema_provider import FormSchemaProvider
from .session_tokens import RegistrationIdentity, RegistrationTokenService
from .verifier import DualChannelVerifier

__all__ = [
    "CooldownTracker",
    "DraftManager",
    "DualChannelVerifier",
    "FormSchemaProvider",
    "IdentityPair",
    "OtpIssuer",
    "RegistrationIdentity",
    "RegistrationTokenService",
]
