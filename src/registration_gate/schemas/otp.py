"""OTP issuance and verification Pydantic schemas."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field, field_validator

from registration_gate.schemas.common import MessageResponse


class IdentityPairRequest(BaseModel):
    """The (email, mobile) pair a prospective registrant wants to prove."""

    email: str = Field(..., min_length=3, max_length=320, description="Email address")
    mobile: str = Field(..., min_length=4, max_length=32, description="Mobile number")

    @field_validator("email")
    @classmethod
    def normalise_email(cls, v: str) -> str:
        value = v.strip().lower()
        if "@" not in value or value.startswith("@") or value.endswith("@"):
            raise ValueError("Email must be a valid address")
        return value

    @field_validator("mobile")
    @classmethod
    def normalise_mobile(cls, v: str) -> str:
        value = v.strip()
        digits = value[1:] if value.startswith("+") else value
        if not digits.isdigit():
            raise ValueError("Mobile must contain digits only, optionally prefixed with +")
        return value


class OtpSendResponse(MessageResponse):
    """Acknowledgement that a code was issued for one channel."""

    expires_at: datetime = Field(..., description="When the pending challenge expires")


class VerifyOtpRequest(IdentityPairRequest):
    """Both codes submitted together for a single verification attempt."""

    email_otp: str = Field(..., alias="emailOtp", min_length=1, max_length=16)
    mobile_otp: str = Field(..., alias="mobileOtp", min_length=1, max_length=16)

    model_config = ConfigDict(populate_by_name=True)

    @field_validator("email_otp", "mobile_otp")
    @classmethod
    def strip_code(cls, v: str) -> str:
        return v.strip()


class VerifyOtpResponse(MessageResponse):
    """Registration session issued after both channels were proven."""

    token: str = Field(..., description="Bearer token for draft and submit calls")
    token_type: str = Field("bearer", description="Token type (always 'bearer')")
    expires_at: datetime = Field(..., description="Absolute expiry of the session token")


class UserExitRequest(BaseModel):
    """Identifiers whose resend cooldown should be dropped."""

    email: str | None = Field(None, max_length=320)
    mobile: str | None = Field(None, max_length=32)

    @field_validator("email")
    @classmethod
    def normalise_email(cls, v: str | None) -> str | None:
        return v.strip().lower() if v else v

    @field_validator("mobile")
    @classmethod
    def normalise_mobile(cls, v: str | None) -> str | None:
        return v.strip() if v else v
