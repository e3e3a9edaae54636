"""Form schema Pydantic models."""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class FieldDescriptor(BaseModel):
    """One admin-defined field of the registration form."""

    name: str = Field(..., min_length=1, description="Key used in formData")
    label: str = Field("", description="Human-readable caption")
    type: str = Field("text", description="Renderer hint (text, select, date, ...)")
    required: bool = Field(False, description="Whether the UI must collect a value")
    options: list[Any] = Field(default_factory=list, description="Choices for select-like fields")

    model_config = ConfigDict(extra="allow")


class FormSchemaResponse(BaseModel):
    """Schema returned to a holder of a registration session."""

    success: bool = True
    fields: list[FieldDescriptor] = Field(default_factory=list)
