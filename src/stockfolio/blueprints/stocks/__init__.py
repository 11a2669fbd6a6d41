"""Stocks blueprint package."""

from __future__ import annotations

from flask import Blueprint

bp = Blueprint("stocks", __name__, url_prefix="/stocks")

from . import routes  # noqa: E402,F401

__all__ = ["bp"]
