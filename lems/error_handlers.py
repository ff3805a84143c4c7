"""JSON error handlers for the application."""

from flask import Blueprint, current_app, jsonify

from .errors import AppError, ScheduleError, StoreFailureError

error_handlers_bp = Blueprint("error_handlers", __name__)


@error_handlers_bp.app_errorhandler(ScheduleError)
def handle_schedule_error(error):
    """Handles schedule import errors without exposing parser internals."""
    current_app.logger.warning(f"Schedule Error [{error.code}]: {error}")
    body = {"ok": False, "error": error.code, "message": error.message}
    if isinstance(error, StoreFailureError):
        body["step"] = error.step
    return jsonify(body), error.status_code


@error_handlers_bp.app_errorhandler(AppError)
def handle_app_error(error):
    """Handles generic application errors."""
    current_app.logger.error(f"Application Error: {error.message}")
    return (
        jsonify({"ok": False, "error": error.code, "message": error.message}),
        error.status_code,
    )


@error_handlers_bp.app_errorhandler(404)
def handle_404(e):
    """Handles generic 404 errors for routes that don't exist."""
    return jsonify({"ok": False, "error": "NOT_FOUND", "message": "Page Not Found"}), 404


@error_handlers_bp.app_errorhandler(413)
def handle_413(e):
    """Handles uploads larger than MAX_CONTENT_LENGTH."""
    return (
        jsonify(
            {"ok": False, "error": "PAYLOAD_TOO_LARGE", "message": "File too large."}
        ),
        413,
    )


@error_handlers_bp.app_errorhandler(500)
def handle_500(e):
    """Handles unexpected server errors."""
    current_app.logger.error(f"Internal Server Error: {e}")
    return (
        jsonify(
            {"ok": False, "error": "INTERNAL_SERVER_ERROR", "message": "Server error."}
        ),
        500,
    )
