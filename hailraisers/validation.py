"""Validation of raw box and hailraiser submissions.

Both entry points take a loosely-typed mapping (JSON body, form data or a
wizard's field values) and either return the normalized record or raise
:class:`~hailraisers.errors.ValidationError` listing one message per failing
field.
"""

from __future__ import annotations

from typing import Any, Mapping

from pydantic import ValidationError as PydanticValidationError

from hailraisers.box.models import NewGroup
from hailraisers.errors import ValidationError
from hailraisers.hailraiser.models import NewMember


def _rejection(exc: PydanticValidationError, summary: str) -> ValidationError:
    messages = []
    for error in exc.errors():
        field = ".".join(str(part) for part in error["loc"]) or "record"
        messages.append(f"{field}: {error['msg']}")
    return ValidationError(f"{summary} {messages[0]}", messages=messages)


def validate_group(raw: Mapping[str, Any]) -> NewGroup:
    """Validate a box submission."""
    try:
        return NewGroup.model_validate(dict(raw))
    except PydanticValidationError as e:
        raise _rejection(e, "Invalid box details.") from e


def validate_member(raw: Mapping[str, Any]) -> NewMember:
    """Validate a hailraiser submission."""
    try:
        return NewMember.model_validate(dict(raw))
    except PydanticValidationError as e:
        raise _rejection(e, "Invalid member details.") from e
