"""Service layer for hailraiser signups."""

from __future__ import annotations

import datetime
import logging
from typing import TYPE_CHECKING, cast

from hailraisers.constants import BOXES_COLLECTION, HAILRAISERS_COLLECTION
from hailraisers.errors import NotFoundError, ValidationError

from .models import Member, NewMember

if TYPE_CHECKING:
    from google.cloud.firestore_v1.base_document import DocumentSnapshot
    from google.cloud.firestore_v1.client import Client

logger = logging.getLogger(__name__)


class HailraiserService:
    """Service class for hailraiser-related operations."""

    @staticmethod
    def add_hailraiser(db: Client, new_member: NewMember) -> Member:
        """Attach a validated hailraiser to an existing box.

        The stored record is never approved, whatever the submission says.
        """
        if not new_member.box_id:
            raise ValidationError(
                "A box is required.", messages=["boxId: a box is required"]
            )

        box_doc = cast(
            "DocumentSnapshot",
            db.collection(BOXES_COLLECTION).document(new_member.box_id).get(),
        )
        if not box_doc.exists:
            raise NotFoundError("Box not found.")

        box_name = new_member.box_name or (box_doc.to_dict() or {}).get("name")
        member_ref = db.collection(HAILRAISERS_COLLECTION).document()
        now = datetime.datetime.now(datetime.timezone.utc)
        member_data = {
            **new_member.to_firestore(),
            "boxName": box_name,
            "id": member_ref.id,
            "approved": False,
            "createdAt": now,
            "updatedAt": now,
        }
        member_ref.set(member_data)
        logger.info(f"Added hailraiser {member_ref.id} to box {new_member.box_id}")
        return Member.model_validate(member_data)
