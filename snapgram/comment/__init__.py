"""The comment blueprint."""

from flask import Blueprint

bp = Blueprint("comment", __name__, url_prefix="/comment")

from . import routes  # noqa: E402

__all__ = ["routes"]
