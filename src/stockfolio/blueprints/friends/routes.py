"""Friend request routes."""

from __future__ import annotations

from datetime import timedelta

from flask import current_app, jsonify

from ...extensions import session_factory
from ...services import friends
from .. import json_body
from . import bp


def _cooldown() -> timedelta:
    return timedelta(minutes=current_app.config.get("FRIEND_COOLDOWN_MINUTES", 5))


@bp.post("")
def send_request():
    payload = json_body()
    relation, accepted = friends.send_request(
        requester=payload.get("requester"),
        receiver=payload.get("receiver"),
        session_factory=session_factory,
        cooldown=_cooldown(),
    )
    if accepted:
        return jsonify({"message": "Friend request accepted", "friendship": relation})
    return jsonify({"message": "Friend request sent", "friendship": relation}), 201


@bp.put("/accept")
def accept_request():
    payload = json_body()
    relation = friends.accept_request(
        requester=payload.get("requester"),
        receiver=payload.get("receiver"),
        session_factory=session_factory,
    )
    return jsonify({"message": "Friend request accepted", "friendship": relation})


@bp.put("/deny")
def deny_request():
    payload = json_body()
    relation = friends.deny_request(
        requester=payload.get("requester"),
        receiver=payload.get("receiver"),
        session_factory=session_factory,
    )
    return jsonify({"message": "Friend request denied", "friendship": relation})


@bp.delete("")
def remove_friend():
    payload = json_body()
    friends.remove_friend(
        first=payload.get("requester"),
        second=payload.get("receiver"),
        session_factory=session_factory,
    )
    return jsonify({"message": "Friend removed"})


@bp.delete("/withdraw")
def withdraw_request():
    payload = json_body()
    friends.withdraw_request(
        requester=payload.get("requester"),
        receiver=payload.get("receiver"),
        session_factory=session_factory,
    )
    return jsonify({"message": "Friend request withdrawn"})


@bp.get("/<username>")
def list_friends(username: str):
    return jsonify(friends.list_friends(username, session_factory))


@bp.get("/requests/<username>")
def list_incoming(username: str):
    return jsonify(friends.list_incoming(username, session_factory))


@bp.get("/outgoing/<username>")
def list_outgoing(username: str):
    return jsonify(friends.list_outgoing(username, session_factory))


@bp.get("/non-friends/<username>")
def list_non_friends(username: str):
    others = friends.list_non_friends(username, session_factory)
    return jsonify([account.to_public_dict() for account in others])
