"""Service layer for box lookups and creation."""

from __future__ import annotations

import datetime
import logging
from typing import TYPE_CHECKING, cast

from firebase_admin import firestore

from hailraisers.constants import BOXES_COLLECTION, SEARCH_RESULT_LIMIT
from hailraisers.errors import DuplicateResourceError, NotFoundError

from .models import Group, NewGroup
from .utils import canonical_name, normalize_name, search_keywords

if TYPE_CHECKING:
    from google.cloud.firestore_v1.base_document import DocumentSnapshot
    from google.cloud.firestore_v1.client import Client

logger = logging.getLogger(__name__)


class BoxService:
    """Service class for box-related operations."""

    @staticmethod
    def find_by_keyword(
        db: Client, keyword: str, limit: int | None = SEARCH_RESULT_LIMIT
    ) -> list[Group]:
        """Return boxes whose keyword index contains every keyword of the query.

        Firestore filters on one keyword only, so the remaining keywords are
        matched while streaming and the stream stops once ``limit`` boxes
        match. ``limit=None`` scans every candidate.
        """
        keywords = search_keywords(keyword)
        if not keywords:
            return []

        # The longest keyword is the most selective one to query on.
        query = db.collection(BOXES_COLLECTION).where(
            filter=firestore.FieldFilter(
                "searchKeywords", "array_contains", max(keywords, key=len)
            )
        )

        boxes: list[Group] = []
        for doc in query.stream():
            data = doc.to_dict() or {}
            stored = {normalize_name(k) for k in data.get("searchKeywords") or []}
            if all(k in stored for k in keywords):
                boxes.append(Group.from_snapshot(doc))
                if limit is not None and len(boxes) >= limit:
                    break
        return boxes

    @staticmethod
    def name_taken(db: Client, name: str) -> bool:
        """Return whether a stored box already has this normalized name."""
        normalized = canonical_name(name)
        if not normalized:
            return False

        query = (
            db.collection(BOXES_COLLECTION)
            .where(filter=firestore.FieldFilter("normalizedName", "==", normalized))
            .limit(1)
        )
        if any(True for _ in query.stream()):
            return True

        # Boxes stored before normalizedName existed only carry the keyword index.
        return any(
            canonical_name(box.name) == normalized
            for box in BoxService.find_by_keyword(db, normalized, limit=None)
        )

    @staticmethod
    def get_box(db: Client, box_id: str) -> Group:
        """Fetch a single box by its identifier."""
        doc = cast("DocumentSnapshot", db.collection(BOXES_COLLECTION).document(box_id).get())
        if not doc.exists:
            raise NotFoundError("Box not found.")
        return Group.from_snapshot(doc)

    @staticmethod
    def create_box(db: Client, new_box: NewGroup) -> Group:
        """Store a validated box, refusing names that already exist.

        The duplicate check is a query before the write, not a constraint,
        so two concurrent creations can still both succeed.
        """
        if BoxService.name_taken(db, new_box.name):
            raise DuplicateResourceError("A box with this name already exists.")

        box_ref = db.collection(BOXES_COLLECTION).document()
        now = datetime.datetime.now(datetime.timezone.utc)
        box_data = {
            **new_box.to_firestore(),
            "id": box_ref.id,
            "approved": False,
            "createdAt": now,
            "updatedAt": now,
            "submittedAt": now,
            "searchKeywords": search_keywords(new_box.name),
            "normalizedName": canonical_name(new_box.name),
        }
        box_ref.set(box_data)
        logger.info(f"Created box {box_ref.id} ({new_box.name})")
        return Group.model_validate(box_data)
