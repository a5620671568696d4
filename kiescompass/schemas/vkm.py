"""Pydantic schemas that power the VKM catalog and favorites API surface."""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field, field_validator

# Largest value a 32-bit INTEGER column or LIMIT clause accepts on every backend.
MAX_DB_INT = 2**31 - 1


class VkmBase(BaseModel):
    """Shared payload for catalog entry mutations."""

    name: str = Field(
        ...,
        min_length=3,
        max_length=200,
        description="VKM module name",
        examples=["Learning and working abroad"],
    )
    short_description: str = Field(
        ...,
        min_length=10,
        max_length=500,
        description="Brief description of the module",
    )
    description: str = Field(..., min_length=10, description="Full description of the module")
    content: str = Field(..., min_length=10, description="Detailed content of the module")
    study_credit: int = Field(
        ..., ge=0, le=MAX_DB_INT, description="Number of study credits (EC)"
    )
    location: str = Field(
        ...,
        min_length=2,
        description="Location where the module is offered",
        examples=["Den Bosch"],
    )
    contact_id: str = Field(..., description="Contact person identifier", examples=["58"])
    level: str = Field(
        ...,
        description="Education level tag (e.g. NLQF5, NLQF6)",
        examples=["NLQF5"],
    )
    learning_outcomes: str = Field(..., description="Expected learning outcomes")

    @field_validator("name", "location", "level", "contact_id")
    @classmethod
    def _strip_whitespace(cls, value: str) -> str:
        return value.strip()


class VkmCreate(VkmBase):
    """Payload for creating a catalog entry. New entries always start active."""

    pass


class VkmUpdate(BaseModel):
    """Partial update payload; omitted fields are left untouched."""

    name: str | None = Field(None, min_length=3, max_length=200)
    short_description: str | None = Field(None, min_length=10, max_length=500)
    description: str | None = Field(None, min_length=10)
    content: str | None = Field(None, min_length=10)
    study_credit: int | None = Field(None, ge=0, le=MAX_DB_INT)
    location: str | None = Field(None, min_length=2)
    contact_id: str | None = None
    level: str | None = None
    learning_outcomes: str | None = None
    is_active: bool | None = Field(None, description="Active status")


class VkmResponse(BaseModel):
    """Read model exposed in API responses."""

    model_config = ConfigDict(from_attributes=True)

    id: str = Field(..., examples=["68ed766ca5d5dc8235d7ce66"])
    name: str
    short_description: str = ""
    description: str
    content: str
    study_credit: int
    location: str
    contact_id: str
    level: str
    learning_outcomes: str = ""
    is_active: bool = True
    created_at: datetime | None = None
    updated_at: datetime | None = None
    is_favorited: bool = Field(
        False, description="Whether the VKM is favorited by the current user"
    )


class ToggleFavoriteResponse(BaseModel):
    """Outcome of ``POST /vkm/{id}/favorite``."""

    is_favorited: bool
    message: str
