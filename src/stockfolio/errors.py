"""Error taxonomy shared by services and HTTP handlers."""

from __future__ import annotations

import logging

from flask import Flask, jsonify
from werkzeug.exceptions import HTTPException

logger = logging.getLogger(__name__)


class StockfolioError(Exception):
    """Base class for failures reported to API callers."""

    status_code = 500
    default_message = "Unexpected error"

    def __init__(self, message: str | None = None) -> None:
        self.message = message or self.default_message
        super().__init__(self.message)

    def to_dict(self) -> dict[str, str]:
        return {"error": self.message}


class ValidationError(StockfolioError):
    status_code = 400
    default_message = "Invalid request"


class InsufficientFunds(StockfolioError):
    """A cash operation would drive a balance negative."""

    status_code = 400
    default_message = "Insufficient funds"


class InsufficientQuantity(StockfolioError):
    """A sale would drive a holding negative."""

    status_code = 400
    default_message = "Insufficient stock quantity"


class InvalidCredentials(StockfolioError):
    status_code = 401
    default_message = "Invalid username or password"


class NotOwner(StockfolioError):
    """The actor does not control the target portfolio."""

    status_code = 403
    default_message = "Portfolio does not belong to this user"


class NotFound(StockfolioError):
    status_code = 404
    default_message = "Not found"


class Conflict(StockfolioError):
    status_code = 409
    default_message = "Conflict"


class Unexpected(StockfolioError):
    status_code = 500


def register_error_handlers(app: Flask) -> None:
    """Render every failure as ``{"error": message}`` with its status code."""

    @app.errorhandler(StockfolioError)
    def _handle_stockfolio_error(exc: StockfolioError):
        if exc.status_code >= 500:
            logger.error("Request failed: %s", exc.message)
        return jsonify(exc.to_dict()), exc.status_code

    @app.errorhandler(HTTPException)
    def _handle_http_error(exc: HTTPException):
        return jsonify({"error": exc.description or exc.name}), exc.code or 500

    @app.errorhandler(Exception)
    def _handle_unexpected(exc: Exception):
        logger.exception("Unhandled error while serving request")
        return jsonify(Unexpected().to_dict()), Unexpected.status_code


__all__ = [
    "Conflict",
    "InsufficientFunds",
    "InsufficientQuantity",
    "InvalidCredentials",
    "NotFound",
    "NotOwner",
    "StockfolioError",
    "Unexpected",
    "ValidationError",
    "register_error_handlers",
]
