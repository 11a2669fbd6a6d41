"""Friends blueprint package."""

from __future__ import annotations

from flask import Blueprint

bp = Blueprint("friends", __name__, url_prefix="/friends")

from . import routes  # noqa: E402,F401

__all__ = ["bp"]
