"""Shared API dependencies for the registration session gate and services."""

from typing import Annotated

from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.orm import Session

from registration_gate.db.session import get_db
from registration_gate.services.cooldown import CooldownTracker, get_cooldown_tracker
from registration_gate.services.drafts import DraftManager
from registration_gate.services.otp_issuer import OtpIssuer
from registration_gate.services.schema_provider import FormSchemaProvider
from registration_gate.services.session_tokens import (
    RegistrationIdentity,
    RegistrationTokenService,
    get_token_service,
)
from registration_gate.services.transports import TransportSet, build_transports
from registration_gate.services.verifier import DualChannelVerifier

# HTTP Bearer scheme; missing credentials are reported by the gate itself.
bearer_scheme = HTTPBearer(auto_error=False)

# Type alias for database session dependency
SessionDep = Annotated[Session, Depends(get_db)]


def get_transports() -> TransportSet:
    return build_transports()


CooldownDep = Annotated[CooldownTracker, Depends(get_cooldown_tracker)]
TokenServiceDep = Annotated[RegistrationTokenService, Depends(get_token_service)]
TransportsDep = Annotated[TransportSet, Depends(get_transports)]


def get_registration_identity(
    credentials: Annotated[HTTPAuthorizationCredentials | None, Depends(bearer_scheme)],
    tokens: TokenServiceDep,
) -> RegistrationIdentity:
    """Recover the verified (email, mobile) from the bearer token.

    Raises:
        UnauthorizedError: If the token is missing, invalid or expired.
    """
    token = credentials.credentials if credentials is not None else None
    return tokens.authorize(token)


def get_otp_issuer(db: SessionDep, cooldowns: CooldownDep, transports: TransportsDep) -> OtpIssuer:
    return OtpIssuer(db, cooldowns, transports)


def get_verifier(db: SessionDep, cooldowns: CooldownDep, tokens: TokenServiceDep) -> DualChannelVerifier:
    return DualChannelVerifier(db, cooldowns, tokens)


def get_draft_manager(db: SessionDep) -> DraftManager:
    return DraftManager(db)


def get_schema_provider(db: SessionDep) -> FormSchemaProvider:
    return FormSchemaProvider(db)


# Type alias for the verified identity dependency
RegistrationIdentityDep = Annotated[RegistrationIdentity, Depends(get_registration_identity)]
OtpIssuerDep = Annotated[OtpIssuer, Depends(get_otp_issuer)]
VerifierDep = Annotated[DualChannelVerifier, Depends(get_verifier)]
DraftManagerDep = Annotated[DraftManager, Depends(get_draft_manager)]
SchemaProviderDep = Annotated[FormSchemaProvider, Depends(get_schema_provider)]
