"""Routes for the hailraiser blueprint."""

from firebase_admin import firestore
from flask import current_app, jsonify, request

from hailraisers import validation
from hailraisers.errors import ValidationError

from . import bp
from .services import HailraiserService
from .utils import classify_channel


@bp.route("", methods=["POST"])
def add_hailraiser():
    """Add a hailraiser to an existing box.

    When the client does not say where the signup came from, the channel is
    classified from the request's User-Agent.
    """
    raw = request.get_json(silent=True)
    if not isinstance(raw, dict):
        raise ValidationError("Request body must be a JSON object.")

    if not raw.get("submittedBy") and not raw.get("submitted_by"):
        raw["submittedBy"] = classify_channel(request.user_agent.string)

    new_member = validation.validate_member(raw)
    db = firestore.client()
    member = HailraiserService.add_hailraiser(db, new_member)
    current_app.logger.info(f"Hailraiser {member.id} joined box {member.box_id}")
    return jsonify({"hailraiser": member.to_json()}), 201
