# src/registration_gate/api/v1/endpoints/registration.py
"""Session-gated draft, submission and form-schema endpoints.

Every route here depends on the registration session gate; identity comes from
the bearer token and never from the request body.
"""

from __future__ import annotations

from fastapi import APIRouter, Depends, status

from registration_gate.api.v1.dependencies import (
    DraftManagerDep,
    RegistrationIdentityDep,
    SchemaProviderDep,
    get_registration_identity,
)
from registration_gate.schemas.common import ErrorResponse
from registration_gate.schemas.form import FormSchemaResponse
from registration_gate.schemas.registration import (
    DraftResponse,
    DraftSavedResponse,
    RegistrationPayload,
    RegistrationRecord,
    RegistrationSubmittedResponse,
)

router = APIRouter(
    tags=["registration"],
    responses={status.HTTP_401_UNAUTHORIZED: {"model": ErrorResponse}},
)


@router.get(
    "/register/draft",
    summary="Fetch the current draft",
    response_model=DraftResponse,
)
async def get_draft(identity: RegistrationIdentityDep, drafts: DraftManagerDep) -> DraftResponse:
    """Return the caller's draft, or null once the registration is final."""
    record = drafts.get_draft(identity)
    if record is None:
        return DraftResponse(draft=None)
    return DraftResponse(draft=RegistrationRecord.model_validate(record))


@router.post(
    "/register/draft",
    summary="Save a partial registration",
    response_model=DraftSavedResponse,
    responses={
        status.HTTP_409_CONFLICT: {"model": ErrorResponse},
        status.HTTP_503_SERVICE_UNAVAILABLE: {"model": ErrorResponse},
    },
)
async def save_draft(
    payload: RegistrationPayload,
    identity: RegistrationIdentityDep,
    drafts: DraftManagerDep,
) -> DraftSavedResponse:
    record = drafts.save_draft(identity, payload.form_data, payload.static_fields())
    return DraftSavedResponse(
        message="Draft saved successfully.",
        registration_id=record.registration_id,
    )


@router.post(
    "/register",
    summary="Submit the final registration",
    response_model=RegistrationSubmittedResponse,
    responses={status.HTTP_503_SERVICE_UNAVAILABLE: {"model": ErrorResponse}},
)
async def register(
    payload: RegistrationPayload,
    identity: RegistrationIdentityDep,
    drafts: DraftManagerDep,
) -> RegistrationSubmittedResponse:
    """Store the submitted form and close the draft."""
    record = drafts.submit_final(identity, payload.form_data, payload.static_fields())
    return RegistrationSubmittedResponse(
        message="Registration successful!",
        registration_id=record.registration_id,
        data=RegistrationRecord.model_validate(record),
    )


@router.get(
    "/form",
    summary="Fetch the registration form schema",
    response_model=FormSchemaResponse,
    dependencies=[Depends(get_registration_identity)],
)
async def get_form_schema(schema: SchemaProviderDep) -> FormSchemaResponse:
    return FormSchemaResponse(fields=schema.get_schema())
