"""Initialize the Flask app and its extensions."""

import logging
import os

import firebase_admin
from firebase_admin import credentials
from flask import Flask
from werkzeug.middleware.proxy_fix import ProxyFix

from .core.constants import SCHEDULE_MAX_UPLOAD_BYTES
from .extensions import csrf


def create_app(test_config=None):
    """Create and configure an instance of the Flask application."""
    app = Flask(__name__, instance_relative_config=True)

    # Load configuration
    app.config.from_mapping(
        SECRET_KEY=os.environ.get("SECRET_KEY") or "dev",
        MAX_CONTENT_LENGTH=int(
            os.environ.get("MAX_CONTENT_LENGTH") or SCHEDULE_MAX_UPLOAD_BYTES
        ),
        LOG_LEVEL=(os.environ.get("LOG_LEVEL") or "INFO").upper(),
    )

    if test_config:
        app.config.update(test_config)

    app.logger.setLevel(getattr(logging, app.config["LOG_LEVEL"], logging.INFO))

    # Initialize Firebase Admin SDK only if not in testing mode
    if not app.config.get("TESTING"):
        cred = None
        project_id = None

        # First, try to load from environment variable (for production)
        cred_json = os.environ.get("FIREBASE_CREDENTIALS_JSON")
        if cred_json:
            import json

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
                import json

                try:
                    with open(cred_path, "r") as f:
                        project_id = json.load(f).get("project_id")
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
            try:
                options = {"projectId": project_id} if project_id else None
                firebase_admin.initialize_app(cred, options)
            except ValueError:
                # This can happen if the app is already initialized, which is fine.
                app.logger.info("Firebase app already initialized.")

    # Initialize extensions
    csrf.init_app(app)

    # Register blueprints
    from . import schedule as schedule_bp

    app.register_blueprint(schedule_bp.bp)

    from . import error_handlers

    app.register_blueprint(error_handlers.error_handlers_bp)

    app.wsgi_app = ProxyFix(app.wsgi_app, x_for=1, x_proto=1, x_host=1, x_prefix=1)

    return app
