"""The box blueprint."""

from flask import Blueprint

bp = Blueprint("box", __name__, url_prefix="/api/boxes")

from . import routes  # noqa: E402

__all__ = ["routes"]
