"""Core data types for the hailraisers application."""

from __future__ import annotations

from datetime import datetime
from typing import Any

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class InputRecord(BaseModel):
    """Base for records crossing the validation boundary.

    Fields are camelCase on the wire and in Firestore; the snake_case
    attribute names are accepted as well. Unknown fields are rejected.
    """

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        extra="forbid",
        str_strip_whitespace=True,
    )

    def to_firestore(self) -> dict[str, Any]:
        """Return the camelCase document body for this record."""
        return self.model_dump(by_alias=True)

    def to_json(self) -> dict[str, Any]:
        """Return a JSON-safe camelCase payload for this record."""
        return self.model_dump(by_alias=True, mode="json")


class FirestoreDocument(BaseModel):
    """Generic Firestore document structure."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        extra="ignore",
    )

    id: str
    created_at: datetime | None = None
    updated_at: datetime | None = None

    @classmethod
    def from_snapshot(cls, snapshot: Any):
        """Build a record from a Firestore document snapshot."""
        data = snapshot.to_dict() or {}
        data["id"] = snapshot.id
        return cls.model_validate(data)

    def to_json(self) -> dict[str, Any]:
        """Return a JSON-safe camelCase payload for this record."""
        return self.model_dump(by_alias=True, mode="json")
