"""Application-wide error handlers."""

from flask import (
    Blueprint,
    current_app,
    flash,
    jsonify,
    redirect,
    render_template,
    request,
    url_for,
)
from flask_wtf.csrf import CSRFError

from .core.types import APIResponse
from .errors import AppError, NotFoundError, SyncError, ValidationError

error_handlers_bp = Blueprint("error_handlers", __name__)


def _wants_json():
    return request.path.startswith("/api/")


def _render(error_message, status_code, template="error.html"):
    if _wants_json():
        payload: APIResponse = {"success": False, "message": error_message, "data": None}
        return jsonify(payload), status_code
    return render_template(template, error=error_message), status_code


@error_handlers_bp.app_errorhandler(ValidationError)
def handle_validation_error(error):
    """Handles validation errors, self-match rejections included."""
    current_app.logger.warning(f"Validation Error: {error.message}")
    return _render(error.message, error.status_code)


@error_handlers_bp.app_errorhandler(NotFoundError)
def handle_not_found_error(error):
    """Handles not found errors."""
    current_app.logger.warning(f"Not Found Error: {error.message}")
    return _render(error.message, error.status_code, "404.html")


@error_handlers_bp.app_errorhandler(SyncError)
def handle_sync_error(error):
    """Handles failures to reach the tournament store."""
    current_app.logger.error(f"Sync Error: {error.message}")
    # Avoid exposing raw database error details to the user
    return _render(
        "The tournament is unavailable right now. Please try again later.",
        error.status_code,
    )


@error_handlers_bp.app_errorhandler(AppError)
def handle_app_error(error):
    """Handles generic application errors."""
    current_app.logger.error(f"Application Error: {error.message}")
    return _render(error.message, error.status_code)


@error_handlers_bp.app_errorhandler(404)
def handle_404(e):
    """Handles generic 404 errors for routes that don't exist."""
    return _render("Page Not Found", 404, "404.html")


@error_handlers_bp.app_errorhandler(500)
def handle_500(e):
    """Handles unexpected server errors."""
    current_app.logger.error(f"Internal Server Error: {e}")
    return _render("Internal Server Error", 500, "500.html")


@error_handlers_bp.app_errorhandler(CSRFError)
def handle_csrf_error(e):
    """
    Handles CSRF errors, which usually indicate a session timeout or invalid form submission.
    """
    current_app.logger.warning(f"CSRF Error: {e.description}")
    flash("Your session may have expired. Please try your action again.", "warning")
    # Redirect to the previous page or a default page if the referrer is not available
    return redirect(request.referrer or url_for("main.index"))
