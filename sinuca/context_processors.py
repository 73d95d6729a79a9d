"""Context processors for the Flask application."""

from __future__ import annotations

import os
from datetime import datetime
from typing import Any

from flask import current_app, session

from .constants import SESSION_IS_ADMIN

VERSION_THRESHOLD = 10
VERSION_SHORT_LENGTH = 7


def inject_global_context() -> dict[str, Any]:
    """Injects global context variables into templates."""
    version = (
        os.environ.get("APP_VERSION")
        or os.environ.get("GITHUB_SHA")
        or os.environ.get("RENDER_GIT_COMMIT")
        or "dev"
    )

    # If it's a long git hash, shorten it
    if len(version) > VERSION_THRESHOLD and version != "dev":
        version = version[:VERSION_SHORT_LENGTH]

    return {
        "current_year": datetime.now().year,
        "app_version": version,
        "is_admin": bool(session.get(SESSION_IS_ADMIN)),
        "tournament_id": current_app.config.get("TOURNAMENT_ID"),
        "is_testing": current_app.config.get("TESTING", False),
    }
