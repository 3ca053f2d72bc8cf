"""Routes for the box blueprint."""

from firebase_admin import firestore
from flask import current_app, jsonify, request

from hailraisers import validation
from hailraisers.errors import ValidationError

from . import bp
from .forms import BoxSearchForm, PlaceSearchForm
from .services import BoxService


def _form_error(form):
    messages = [
        f"{name}: {message}"
        for name, errors in form.errors.items()
        for message in errors
    ]
    return ValidationError(messages[0].split(": ", 1)[1], messages=messages)


@bp.route("/search", methods=["GET"])
def search_boxes():
    """Search the directory for boxes matching every keyword of ``q``."""
    form = BoxSearchForm(formdata=request.args)
    if not form.validate():
        raise _form_error(form)

    db = firestore.client()
    limit = current_app.config["SEARCH_RESULT_LIMIT"]
    boxes = BoxService.find_by_keyword(db, form.q.data, limit=limit)
    return jsonify({"results": [box.to_json() for box in boxes]})


@bp.route("/places", methods=["GET"])
def search_places():
    """Suggest box details from the places API."""
    form = PlaceSearchForm(formdata=request.args)
    if not form.validate():
        raise _form_error(form)

    places = current_app.extensions["places"]
    candidates = places.search(form.q.data)
    current_app.logger.info(f"Found {len(candidates)} places for '{form.q.data}'")
    return jsonify({"results": [candidate.to_json() for candidate in candidates]})


@bp.route("/<string:box_id>", methods=["GET"])
def view_box(box_id):
    """Return a single box."""
    db = firestore.client()
    box = BoxService.get_box(db, box_id)
    return jsonify({"box": box.to_json()})


@bp.route("", methods=["POST"])
def create_box():
    """Create a new box from a JSON body."""
    raw = request.get_json(silent=True)
    if not isinstance(raw, dict):
        raise ValidationError("Request body must be a JSON object.")

    new_box = validation.validate_group(raw)
    db = firestore.client()
    box = BoxService.create_box(db, new_box)
    current_app.logger.info(f"Box created: {box.id}")
    return jsonify({"box": box.to_json()}), 201
