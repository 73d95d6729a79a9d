"""The live blueprint: JSON state and push updates."""

from flask import Blueprint

bp = Blueprint("live", __name__, url_prefix="/api")

from . import routes  # noqa: E402

__all__ = ["routes"]
