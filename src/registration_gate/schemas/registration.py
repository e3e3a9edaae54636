"""Draft and final registration Pydantic schemas."""

from datetime import datetime
from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from registration_gate.schemas.common import MessageResponse


class RegistrationPayload(BaseModel):
    """Form content sent with a draft save or a final submission.

    Any ``email``/``mobile`` a client adds is ignored; the identity comes from
    the registration session token.
    """

    form_data: dict[str, Any] = Field(default_factory=dict, alias="formData")
    full_name: str | None = Field(None, alias="fullName", max_length=200)
    gender: str | None = Field(None, max_length=32)
    date_of_birth: str | None = Field(None, alias="dateOfBirth", max_length=32)

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    def static_fields(self) -> dict[str, Any]:
        return {
            "full_name": self.full_name,
            "gender": self.gender,
            "date_of_birth": self.date_of_birth,
        }


class RegistrationRecord(BaseModel):
    """Serialized registration record."""

    registration_id: str = Field(..., alias="registrationId")
    email: str
    mobile: str
    full_name: str | None = Field(None, alias="fullName")
    gender: str | None = None
    date_of_birth: str | None = Field(None, alias="dateOfBirth")
    form_data: dict[str, Any] = Field(default_factory=dict, alias="formData")
    is_draft: bool = Field(..., alias="isDraft")
    created_at: datetime = Field(..., alias="createdAt")
    updated_at: datetime = Field(..., alias="updatedAt")

    model_config = ConfigDict(from_attributes=True, populate_by_name=True)


class DraftResponse(BaseModel):
    """Current draft for the session identity, or null."""

    success: bool = True
    draft: RegistrationRecord | None = None


class DraftSavedResponse(MessageResponse):
    registration_id: str = Field(..., alias="registrationId")

    model_config = ConfigDict(populate_by_name=True)


class RegistrationSubmittedResponse(MessageResponse):
    """Final submission acknowledgement."""

    registration_id: str = Field(..., alias="registrationId")
    data: RegistrationRecord

    model_config = ConfigDict(populate_by_name=True)
