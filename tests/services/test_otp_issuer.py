"""Tests for single-channel OTP issuance."""

from __future__ import annotations

import pytest
from sqlalchemy.exc import OperationalError

from registration_gate.core.errors import (
    AlreadyRegisteredError,
    DispatchFailureError,
    PersistenceError,
    ThrottledError,
)
from registration_gate.models import OtpChannel
from registration_gate.repositories.challenge_repo import ChallengeRepository
from registration_gate.repositories.registration_repo import RegistrationRepository
from registration_gate.services.otp_issuer import OtpIssuer, generate_otp
from registration_gate.services.transports import TransportSet


@pytest.fixture()
def issuer(db_session, cooldowns, transports) -> OtpIssuer:
    return OtpIssuer(db_session, cooldowns, transports)


def test_generate_otp_is_numeric_and_padded() -> None:
    for _ in range(50):
        code = generate_otp(6)
        assert len(code) == 6
        assert code.isdigit()


async def test_issue_email_stores_and_sends_code(issuer, transports, identity_pair, db_session) -> None:
    result = await issuer.issue(identity_pair, OtpChannel.EMAIL)

    assert result.delivered is True
    assert result.destination == "a@x.com"
    assert result.expires_at.tzinfo is not None
    destination, code = transports.email.sent[-1]
    assert destination == "a@x.com"

    challenge = ChallengeRepository(db_session).get_live("a@x.com", "+1555")
    assert challenge is not None
    assert challenge.email_code == code
    assert challenge.email_sent and not challenge.mobile_sent


async def test_issue_mobile_uses_mobile_transport(issuer, transports, identity_pair) -> None:
    await issuer.issue(identity_pair, OtpChannel.MOBILE)

    assert transports.mobile.sent[-1][0] == "+1555"
    assert transports.email.sent == []


async def test_resend_inside_cooldown_is_throttled(issuer, identity_pair, clock) -> None:
    await issuer.issue(identity_pair, OtpChannel.EMAIL)
    clock.advance(5)

    with pytest.raises(ThrottledError) as exc_info:
        await issuer.issue(identity_pair, OtpChannel.EMAIL)

    assert exc_info.value.remaining_seconds == 10
    assert "email OTP" in exc_info.value.message


async def test_resend_after_cooldown_replaces_code(issuer, transports, identity_pair, clock, db_session) -> None:
    await issuer.issue(identity_pair, OtpChannel.MOBILE)
    clock.advance(15)
    await issuer.issue(identity_pair, OtpChannel.MOBILE)

    assert len(transports.mobile.sent) == 2
    challenge = ChallengeRepository(db_session).get_live("a@x.com", "+1555")
    assert challenge is not None
    assert challenge.mobile_code == transports.mobile.last_code


async def test_channels_have_separate_cooldowns(issuer, identity_pair) -> None:
    await issuer.issue(identity_pair, OtpChannel.EMAIL)
    result = await issuer.issue(identity_pair, OtpChannel.MOBILE)
    assert result.delivered


async def test_finalized_identity_is_refused(issuer, identity_pair, db_session, transports) -> None:
    RegistrationRepository(db_session).upsert("a@x.com", "+9999", {}, is_draft=False)
    db_session.commit()

    with pytest.raises(AlreadyRegisteredError):
        await issuer.issue(identity_pair, OtpChannel.EMAIL)

    assert transports.email.sent == []


async def test_finalized_identity_refused_inside_cooldown(issuer, cooldowns, identity_pair, db_session) -> None:
    await issuer.issue(identity_pair, OtpChannel.EMAIL)
    RegistrationRepository(db_session).upsert("a@x.com", "+1555", {}, is_draft=False)
    db_session.commit()

    with pytest.raises(AlreadyRegisteredError):
        await issuer.issue(identity_pair, OtpChannel.EMAIL)

    # The email cooldown from the first issue is still running.
    assert cooldowns.check_and_record("a@x.com")[0] is False


async def test_draft_does_not_block_issuance(issuer, identity_pair, db_session) -> None:
    RegistrationRepository(db_session).upsert("a@x.com", "+1555", {}, is_draft=True)
    db_session.commit()

    result = await issuer.issue(identity_pair, OtpChannel.EMAIL)
    assert result.delivered


async def test_refused_delivery_raises_dispatch_failure(issuer, transports, identity_pair, db_session) -> None:
    transports.email.accept = False

    with pytest.raises(DispatchFailureError):
        await issuer.issue(identity_pair, OtpChannel.EMAIL)

    # The code stays stored; a later resend overwrites it.
    assert ChallengeRepository(db_session).get_live("a@x.com", "+1555") is not None


async def test_raising_transport_counts_as_refused(issuer, transports, identity_pair, mocker) -> None:
    mocker.patch.object(transports.mobile, "send", side_effect=ConnectionError("gateway down"))

    with pytest.raises(DispatchFailureError):
        await issuer.issue(identity_pair, OtpChannel.MOBILE)


async def test_echo_mode_tolerates_refused_delivery(db_session, cooldowns, transports, identity_pair) -> None:
    transports.email.accept = False
    echo_set = TransportSet(email=transports.email, mobile=transports.mobile, echo=True)
    issuer = OtpIssuer(db_session, cooldowns, echo_set)

    result = await issuer.issue(identity_pair, OtpChannel.EMAIL)

    assert result.delivered is False


async def test_storage_failure_releases_cooldown(issuer, cooldowns, identity_pair, mocker) -> None:
    mocker.patch.object(
        ChallengeRepository,
        "record_code",
        side_effect=OperationalError("INSERT", {}, Exception("disk I/O error")),
    )

    with pytest.raises(PersistenceError):
        await issuer.issue(identity_pair, OtpChannel.EMAIL)

    assert cooldowns.check_and_record("a@x.com") == (True, 0)
