"""Initialize the Flask app and its extensions."""

import json
import os

import firebase_admin
from firebase_admin import credentials
from flask import Flask
from werkzeug.middleware.proxy_fix import ProxyFix

from . import constants
from .extensions import csrf, places


def _init_firebase(app):
    """Initialize the Firebase Admin SDK from env, file or default credentials."""
    cred = None
    project_id = None

    # First, try to load from environment variable (for production)
    cred_json = os.environ.get("FIREBASE_CREDENTIALS_JSON")
    if cred_json:
        try:
            cred_info = json.loads(cred_json)
            project_id = cred_info.get("project_id")
            cred = credentials.Certificate(cred_info)
        except (json.JSONDecodeError, ValueError) as e:
            app.logger.error(f"Error parsing FIREBASE_CREDENTIALS_JSON: {e}")

    # If env var fails or is not present, try loading from file (for local dev)
    if not cred:
        cred_path = os.path.join(
            os.path.dirname(os.path.dirname(__file__)), "firebase_credentials.json"
        )
        if os.path.exists(cred_path):
            try:
                with open(cred_path, "r") as f:
                    cred_info = json.load(f)
                project_id = cred_info.get("project_id")
                cred = credentials.Certificate(cred_path)
            except (json.JSONDecodeError, ValueError) as e:
                app.logger.error(f"Error loading credentials from file: {e}")

    # If both methods fail, fallback to default credentials
    if not cred:
        try:
            cred = credentials.ApplicationDefault()
            project_id = os.environ.get("FIREBASE_PROJECT_ID")
        except Exception as e:
            app.logger.error(
                f"Could not find any valid credentials (env, file, or default): {e}"
            )

    if cred and not firebase_admin._apps:
        options = {"projectId": project_id} if project_id else None
        try:
            firebase_admin.initialize_app(cred, options)
        except ValueError:
            # This can happen if the app is already initialized, which is fine.
            app.logger.info("Firebase app already initialized.")


def create_app(test_config=None):
    """Create and configure an instance of the Flask application."""
    app = Flask(__name__, instance_relative_config=True)

    # Load configuration
    app.config.from_mapping(
        SECRET_KEY=os.environ.get("SECRET_KEY") or "dev",
        GOOGLE_MAPS_API_KEY=os.environ.get("GOOGLE_MAPS_API_KEY"),
        PLACES_CACHE_TTL=int(
            os.environ.get("PLACES_CACHE_TTL") or constants.PLACES_CACHE_TTL
        ),
        PLACES_CACHE_SIZE=int(
            os.environ.get("PLACES_CACHE_SIZE") or constants.PLACES_CACHE_SIZE
        ),
        PLACES_TIMEOUT=float(
            os.environ.get("PLACES_TIMEOUT") or constants.PLACES_TIMEOUT
        ),
        SEARCH_RESULT_LIMIT=int(
            os.environ.get("SEARCH_RESULT_LIMIT") or constants.SEARCH_RESULT_LIMIT
        ),
        ONBOARDING_DEBOUNCE_SECONDS=float(
            os.environ.get("ONBOARDING_DEBOUNCE_SECONDS") or constants.DEBOUNCE_SECONDS
        ),
        ONBOARDING_EXIT_DELAY_SECONDS=float(
            os.environ.get("ONBOARDING_EXIT_DELAY_SECONDS")
            or constants.EXIT_DELAY_SECONDS
        ),
        ONBOARDING_RETRY_BASE_SECONDS=float(
            os.environ.get("ONBOARDING_RETRY_BASE_SECONDS")
            or constants.RETRY_BASE_SECONDS
        ),
        ONBOARDING_MAX_RETRIES=int(
            os.environ.get("ONBOARDING_MAX_RETRIES") or constants.MAX_SEARCH_RETRIES
        ),
        ONBOARDING_ERROR_RESET_SECONDS=float(
            os.environ.get("ONBOARDING_ERROR_RESET_SECONDS")
            or constants.ERROR_RESET_SECONDS
        ),
    )

    if test_config:
        app.config.update(test_config)

    # Initialize Firebase Admin SDK only if not in testing mode
    if not app.config.get("TESTING"):
        _init_firebase(app)

    # Initialize extensions
    csrf.init_app(app)
    places.init_app(app)

    # Register blueprints
    from . import box as box_bp

    app.register_blueprint(box_bp.bp)
    csrf.exempt(box_bp.bp)

    from . import hailraiser as hailraiser_bp

    app.register_blueprint(hailraiser_bp.bp)
    csrf.exempt(hailraiser_bp.bp)

    from . import error_handlers

    app.register_blueprint(error_handlers.error_handlers_bp)

    app.wsgi_app = ProxyFix(app.wsgi_app, x_for=1, x_proto=1, x_host=1, x_prefix=1)

    return app
