# src/registration_gate/api/v1/endpoints/otp.py
"""OTP issuance and dual-channel verification endpoints."""

from __future__ import annotations

from fastapi import APIRouter, status

from registration_gate.api.v1.dependencies import CooldownDep, OtpIssuerDep, VerifierDep
from registration_gate.models.challenge import OtpChannel
from registration_gate.schemas.common import ErrorResponse, MessageResponse
from registration_gate.schemas.otp import (
    IdentityPairRequest,
    OtpSendResponse,
    UserExitRequest,
    VerifyOtpRequest,
    VerifyOtpResponse,
)
from registration_gate.services.otp_issuer import IdentityPair

router = APIRouter(tags=["otp"])

_ISSUE_ERRORS: dict[int | str, dict[str, object]] = {
    status.HTTP_409_CONFLICT: {"model": ErrorResponse},
    status.HTTP_429_TOO_MANY_REQUESTS: {"model": ErrorResponse},
    status.HTTP_502_BAD_GATEWAY: {"model": ErrorResponse},
}


@router.post(
    "/otp/send-email",
    summary="Issue an email one-time code",
    response_model=OtpSendResponse,
    responses=_ISSUE_ERRORS,
)
async def send_email_otp(payload: IdentityPairRequest, issuer: OtpIssuerDep) -> OtpSendResponse:
    """Send a code to the email address of the identity pair."""
    result = await issuer.issue(IdentityPair(payload.email, payload.mobile), OtpChannel.EMAIL)
    return OtpSendResponse(message="Email OTP sent successfully.", expires_at=result.expires_at)


@router.post(
    "/otp/send-phone",
    summary="Issue an SMS one-time code",
    response_model=OtpSendResponse,
    responses=_ISSUE_ERRORS,
)
async def send_phone_otp(payload: IdentityPairRequest, issuer: OtpIssuerDep) -> OtpSendResponse:
    """Send a code to the mobile number of the identity pair."""
    result = await issuer.issue(IdentityPair(payload.email, payload.mobile), OtpChannel.MOBILE)
    return OtpSendResponse(message="Phone OTP sent successfully.", expires_at=result.expires_at)


@router.post(
    "/otp/verify",
    summary="Verify both codes and open a registration session",
    response_model=VerifyOtpResponse,
    responses={status.HTTP_400_BAD_REQUEST: {"model": ErrorResponse}},
)
async def verify_otp(payload: VerifyOtpRequest, verifier: VerifierDep) -> VerifyOtpResponse:
    """Exchange the email and mobile codes for a short-lived bearer token."""
    issued = verifier.verify(
        IdentityPair(payload.email, payload.mobile),
        email_code=payload.email_otp,
        mobile_code=payload.mobile_otp,
    )
    return VerifyOtpResponse(message="Verified", token=issued.token, expires_at=issued.expires_at)


@router.post(
    "/user-exit",
    summary="Abandon the flow and drop resend cooldowns",
    response_model=MessageResponse,
)
async def user_exit(payload: UserExitRequest, cooldowns: CooldownDep) -> MessageResponse:
    """Let a user who leaves the form restart immediately."""
    cooldowns.clear(*(value for value in (payload.email, payload.mobile) if value))
    return MessageResponse(message="Session cleared.")
