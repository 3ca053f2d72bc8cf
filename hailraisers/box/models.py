"""Data models for the box blueprint."""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, ConfigDict, EmailStr, Field, field_validator, model_validator
from pydantic.alias_generators import to_camel

from hailraisers.constants import (
    BOX_NAME_MAX_LENGTH,
    BOX_NAME_MIN_LENGTH,
    BOX_NAME_PATTERN,
)
from hailraisers.core.types import FirestoreDocument, InputRecord


class NewGroup(InputRecord):
    """A box as submitted for creation, before it has an identifier."""

    name: str = Field(
        min_length=BOX_NAME_MIN_LENGTH,
        max_length=BOX_NAME_MAX_LENGTH,
        pattern=BOX_NAME_PATTERN,
    )
    address: str = ""
    city: str = ""
    state: str = ""
    country: str = ""
    country_code: str = ""
    lat: float | None = Field(default=None, ge=-90, le=90)
    lng: float | None = Field(default=None, ge=-180, le=180)
    phone: str = ""
    website: str = ""
    contact_name: str = ""
    contact_email: EmailStr | None = None
    approved: bool = False

    @field_validator("contact_email", mode="before")
    @classmethod
    def blank_email_is_absent(cls, v):
        if isinstance(v, str) and not v.strip():
            return None
        return v

    @model_validator(mode="after")
    def coordinates_are_paired(self) -> NewGroup:
        if (self.lat is None) != (self.lng is None):
            raise ValueError("Latitude and longitude must be provided together.")
        return self


class Group(FirestoreDocument):
    """A box document in Firestore."""

    name: str
    address: str = ""
    city: str = ""
    state: str = ""
    country: str = ""
    country_code: str = ""
    lat: float | None = None
    lng: float | None = None
    phone: str = ""
    website: str = ""
    contact_name: str = ""
    contact_email: str | None = None
    approved: bool = False
    submitted_at: datetime | None = None
    search_keywords: list[str] = Field(default_factory=list)


class CandidateRecord(BaseModel):
    """A place lookup result used to pre-fill a new box. Never persisted."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    id: str
    name: str
    address: str = ""
    city: str = ""
    state: str = ""
    country: str = ""
    country_code: str = ""
    lat: float | None = None
    lng: float | None = None
    rating: float | None = None
    total_ratings: int | None = None
    phone: str = ""
    website: str = ""

    def to_json(self):
        return self.model_dump(by_alias=True, mode="json")
