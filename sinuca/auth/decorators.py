"""Decorators for the auth blueprint."""

from functools import wraps

from flask import flash, jsonify, redirect, request, session, url_for

from sinuca.constants import SESSION_IS_ADMIN


def admin_required(f):
    """Only let through browsers that unlocked the admin area.

    API requests get a 401 JSON body instead of a redirect.
    """

    @wraps(f)
    def decorated_function(*args, **kwargs):
        if not session.get(SESSION_IS_ADMIN):
            if request.path.startswith("/api/"):
                return jsonify({"success": False, "message": "Admin login required."}), 401
            flash("Please enter the admin password.", "warning")
            return redirect(url_for("auth.login", next=request.path))
        return f(*args, **kwargs)

    return decorated_function
