"""One-time code issuance for a single contact channel."""

from __future__ import annotations

import logging
import secrets
from dataclasses import dataclass
from datetime import datetime

from sqlalchemy.orm import Session

from registration_gate.core.errors import (
    AlreadyRegisteredError,
    DispatchFailureError,
    PersistenceError,
    ThrottledError,
)
from registration_gate.core.settings import settings
from registration_gate.db.time import as_utc
from registration_gate.models.challenge import OtpChannel
from registration_gate.repositories.challenge_repo import ChallengeRepository
from registration_gate.repositories.registration_repo import RegistrationRepository
from registration_gate.repositories.transaction import persistence_guard
from registration_gate.services.cooldown import CooldownTracker
from registration_gate.services.transports import TransportSet, mask_destination

logger = logging.getLogger(__name__)

_CHANNEL_LABELS = {
    OtpChannel.EMAIL: "email OTP",
    OtpChannel.MOBILE: "SMS",
}


@dataclass(frozen=True)
class IdentityPair:
    """The (email, mobile) tuple proven together."""

    email: str
    mobile: str

    def identifier_for(self, channel: OtpChannel) -> str:
        return self.email if channel is OtpChannel.EMAIL else self.mobile


@dataclass(frozen=True)
class IssueResult:
    channel: OtpChannel
    destination: str
    expires_at: datetime
    delivered: bool


def generate_otp(length: int | None = None) -> str:
    """Return a zero-padded numeric code drawn from the OS CSPRNG."""
    length = settings.otp_length if length is None else length
    return f"{secrets.randbelow(10**length):0{length}d}"


class OtpIssuer:
    """Generate, store and dispatch a code for one channel of an identity pair."""

    def __init__(
        self,
        session: Session,
        cooldowns: CooldownTracker,
        transports: TransportSet,
        *,
        challenges: ChallengeRepository | None = None,
        registrations: RegistrationRepository | None = None,
        code_length: int | None = None,
    ) -> None:
        self._session = session
        self._cooldowns = cooldowns
        self._transports = transports
        self._challenges = challenges or ChallengeRepository(session)
        self._registrations = registrations or RegistrationRepository(session)
        self._code_length = code_length

    async def issue(self, pair: IdentityPair, channel: OtpChannel) -> IssueResult:
        """Issue a fresh code for ``channel``.

        Raises:
            AlreadyRegisteredError: A finalized record uses the email or mobile.
            ThrottledError: The channel identifier is inside its cooldown.
            DispatchFailureError: The transport refused the code.
            PersistenceError: The challenge could not be written.
        """
        with persistence_guard(self._session, "checking for an existing registration"):
            registered = self._registrations.exists_finalized(pair.email, pair.mobile)
        if registered:
            logger.info("Refusing %s OTP: identity already registered", channel.value)
            raise AlreadyRegisteredError()

        destination = pair.identifier_for(channel)
        allowed, remaining = self._cooldowns.check_and_record(destination)
        if not allowed:
            logger.info(
                "Throttled %s OTP for %s (%ss left)",
                channel.value,
                mask_destination(destination),
                remaining,
            )
            raise ThrottledError(remaining, _CHANNEL_LABELS[channel])

        code = generate_otp(self._code_length)
        try:
            with persistence_guard(self._session, f"storing {channel.value} OTP"):
                challenge = self._challenges.record_code(pair.email, pair.mobile, channel, code)
                expires_at = as_utc(challenge.expires_at)
                self._session.commit()
        except PersistenceError:
            # A failed write does not consume the cooldown.
            self._cooldowns.clear(destination)
            raise

        transport = self._transports.email if channel is OtpChannel.EMAIL else self._transports.mobile
        try:
            delivered = await transport.send(destination, code)
        except Exception:
            logger.exception("Transport raised while sending %s OTP", channel.value)
            delivered = False

        if not delivered:
            logger.error(
                "Failed to dispatch %s OTP to %s", channel.value, mask_destination(destination)
            )
            if not self._transports.echo:
                raise DispatchFailureError()

        logger.info("Issued %s OTP to %s", channel.value, mask_destination(destination))
        return IssueResult(
            channel=channel,
            destination=destination,
            expires_at=expires_at,
            delivered=delivered,
        )
