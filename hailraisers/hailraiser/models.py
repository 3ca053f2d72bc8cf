"""Data models for the hailraiser blueprint."""

from __future__ import annotations

from typing import Literal

from pydantic import EmailStr, Field, field_validator

from hailraisers.core.types import FirestoreDocument, InputRecord

SubmissionChannel = Literal["Tablet", "Webform"]


class NewMember(InputRecord):
    """A hailraiser as captured by the signup form.

    ``box_id`` may still be empty while the member is held back until their
    new box has been created.
    """

    box_id: str | None = None
    box_name: str | None = None
    first_name: str = Field(min_length=1)
    last_name: str = Field(min_length=1)
    country: str = Field(min_length=1)
    email: EmailStr | None = None
    submitted_by: SubmissionChannel
    approved: bool = False

    @field_validator("email", "box_id", "box_name", mode="before")
    @classmethod
    def blank_is_absent(cls, v):
        if isinstance(v, str) and not v.strip():
            return None
        return v


class Member(FirestoreDocument):
    """A hailraiser document in Firestore."""

    box_id: str
    box_name: str | None = None
    first_name: str
    last_name: str
    country: str
    email: str | None = None
    submitted_by: SubmissionChannel
    approved: bool = False
