"""Portfolios blueprint package."""

from __future__ import annotations

from flask import Blueprint

bp = Blueprint("portfolios", __name__, url_prefix="/portfolios")

from . import routes  # noqa: E402,F401

__all__ = ["bp"]
