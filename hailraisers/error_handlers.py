from flask import Blueprint, current_app, jsonify
from flask_wtf.csrf import CSRFError
from google.api_core import exceptions as google_exceptions

from .errors import (
    AppError,
    DuplicateResourceError,
    ErrorKind,
    NotFoundError,
    PermissionDeniedError,
    TransientNetworkError,
    ValidationError,
)

error_handlers_bp = Blueprint("error_handlers", __name__)


def _error_response(kind, message, status_code, fields=None):
    body = {"error": kind.value, "message": message, "fields": fields or [message]}
    return jsonify(body), status_code


@error_handlers_bp.app_errorhandler(ValidationError)
def handle_validation_error(error):
    """Handles validation errors by returning the field messages."""
    current_app.logger.warning(f"Validation Error: {error.message}")
    return jsonify(error.to_dict()), error.status_code


@error_handlers_bp.app_errorhandler(DuplicateResourceError)
def handle_duplicate_resource_error(error):
    """Handles duplicate resource errors."""
    current_app.logger.warning(f"Duplicate Resource Error: {error.message}")
    return jsonify(error.to_dict()), error.status_code


@error_handlers_bp.app_errorhandler(NotFoundError)
def handle_not_found_error(error):
    """Handles not found errors."""
    current_app.logger.warning(f"Not Found Error: {error.message}")
    return jsonify(error.to_dict()), error.status_code


@error_handlers_bp.app_errorhandler(TransientNetworkError)
def handle_transient_network_error(error):
    """Handles upstream network failures the client may retry."""
    current_app.logger.warning(f"Transient Network Error: {error.message}")
    return jsonify(error.to_dict()), error.status_code


@error_handlers_bp.app_errorhandler(AppError)
def handle_app_error(error):
    """Handles generic application errors."""
    current_app.logger.error(f"Application Error: {error.message}")
    return jsonify(error.to_dict()), error.status_code


@error_handlers_bp.app_errorhandler(404)
def handle_404(e):
    """Handles generic 404 errors for routes that don't exist."""
    return _error_response(ErrorKind.NOT_FOUND, "Resource not found.", 404)


@error_handlers_bp.app_errorhandler(405)
def handle_405(e):
    """Handles requests with a method the route does not accept."""
    return _error_response(ErrorKind.UNKNOWN, "Method not allowed.", 405)


@error_handlers_bp.app_errorhandler(500)
def handle_500(e):
    """Handles unexpected server errors."""
    current_app.logger.error(f"Internal Server Error: {e}")
    return _error_response(ErrorKind.UNKNOWN, "An unexpected error occurred.", 500)


@error_handlers_bp.app_errorhandler(google_exceptions.PermissionDenied)
def handle_permission_denied(e):
    """Handles Firestore refusing access."""
    current_app.logger.error(f"Permission Denied: {e}")
    error = PermissionDeniedError("You do not have permission to do that.")
    return jsonify(error.to_dict()), error.status_code


@error_handlers_bp.app_errorhandler(google_exceptions.GoogleAPICallError)
def handle_db_error(e):
    """Handles database errors."""
    current_app.logger.error(f"Database Error: {e}")
    # Avoid exposing raw database error details to the user
    return _error_response(
        ErrorKind.UNKNOWN, "A database error occurred. Please try again later.", 500
    )


@error_handlers_bp.app_errorhandler(CSRFError)
def handle_csrf_error(e):
    """
    Handles CSRF errors, which usually indicate a session timeout or invalid form submission.
    """
    current_app.logger.warning(f"CSRF Error: {e.description}")
    return _error_response(
        ErrorKind.VALIDATION_REJECTED,
        "Your session may have expired. Please try your action again.",
        400,
    )
