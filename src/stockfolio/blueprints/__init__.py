"""HTTP blueprints and the request helpers they share."""

from __future__ import annotations

from typing import Any, Mapping

from flask import request

from ..services.validation import to_int


def json_body() -> dict[str, Any]:
    """Return the JSON object sent with the request, or an empty dict."""

    payload = request.get_json(silent=True)
    return payload if isinstance(payload, dict) else {}


def actor_id(source: Mapping[str, Any]) -> int:
    """The acting account, passed as ``user_id`` in the body or query string."""

    return to_int(source.get("user_id"), field="user_id")


__all__ = ["actor_id", "json_body"]
