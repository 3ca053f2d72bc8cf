"""The hailraiser blueprint."""

from flask import Blueprint

bp = Blueprint("hailraiser", __name__, url_prefix="/api/hailraisers")

from . import routes  # noqa: E402

__all__ = ["routes"]
