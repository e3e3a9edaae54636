"""Dual-channel OTP verification."""

from __future__ import annotations

import logging
import secrets

from sqlalchemy.orm import Session

from registration_gate.core.errors import (
    ChallengeNotFoundError,
    IncompleteRequestError,
    InvalidEmailOtpError,
    InvalidMobileOtpError,
)
from registration_gate.repositories.challenge_repo import ChallengeRepository
from registration_gate.repositories.transaction import persistence_guard
from registration_gate.services.cooldown import CooldownTracker
from registration_gate.services.otp_issuer import IdentityPair
from registration_gate.services.session_tokens import IssuedToken, RegistrationTokenService

logger = logging.getLogger(__name__)


def _codes_match(stored: str | None, submitted: str) -> bool:
    if not stored:
        return False
    return secrets.compare_digest(stored.encode(), submitted.encode())


class DualChannelVerifier:
    """Check both codes of a challenge and exchange them for a session token.

    This is the only place registration session tokens are minted. The
    challenge delete is the linearization point: of two concurrent successful
    attempts, only the one whose delete removes the row receives a token.
    """

    def __init__(
        self,
        session: Session,
        cooldowns: CooldownTracker,
        tokens: RegistrationTokenService,
        *,
        challenges: ChallengeRepository | None = None,
    ) -> None:
        self._session = session
        self._cooldowns = cooldowns
        self._tokens = tokens
        self._challenges = challenges or ChallengeRepository(session)

    def verify(self, pair: IdentityPair, email_code: str, mobile_code: str) -> IssuedToken:
        """Validate both codes and return a fresh registration session token.

        The mobile code is checked before the email code.

        Raises:
            ChallengeNotFoundError: No live challenge (expired, consumed, never issued).
            IncompleteRequestError: A code was not yet sent on both channels.
            InvalidMobileOtpError: The mobile code does not match.
            InvalidEmailOtpError: The email code does not match.
            PersistenceError: The store failed.
        """
        with persistence_guard(self._session, "loading OTP challenge"):
            challenge = self._challenges.get_live(pair.email, pair.mobile)
        if challenge is None:
            logger.info("Verification without a live challenge")
            raise ChallengeNotFoundError()

        if not challenge.is_complete:
            raise IncompleteRequestError()

        if not _codes_match(challenge.mobile_code, mobile_code):
            logger.info("Verification rejected: mobile code mismatch")
            raise InvalidMobileOtpError()
        if not _codes_match(challenge.email_code, email_code):
            logger.info("Verification rejected: email code mismatch")
            raise InvalidEmailOtpError()

        with persistence_guard(self._session, "consuming OTP challenge"):
            consumed = self._challenges.consume(challenge.id)
            if not consumed:
                self._session.rollback()
            else:
                self._session.commit()
        if not consumed:
            logger.info("Challenge already consumed by a concurrent verification")
            raise ChallengeNotFoundError()

        self._cooldowns.clear(pair.email, pair.mobile)
        issued = self._tokens.mint(pair.email, pair.mobile)
        logger.info("Dual-channel verification succeeded; session token issued")
        return issued
