"""Account routes."""

from __future__ import annotations

from flask import jsonify

from ...extensions import session_factory
from ...services import accounts
from .. import json_body
from . import bp


@bp.post("")
def register():
    payload = json_body()
    account = accounts.create_account(
        username=payload.get("username"),
        password=payload.get("password"),
        email=payload.get("email"),
        session_factory=session_factory,
    )
    return jsonify(account.to_public_dict()), 201


@bp.post("/login")
def login():
    payload = json_body()
    account = accounts.authenticate(
        username=payload.get("username"),
        password=payload.get("password"),
        session_factory=session_factory,
    )
    return jsonify(account.to_public_dict())


@bp.get("/search/<prefix>")
def search(prefix: str):
    found = accounts.search_accounts(prefix, session_factory)
    return jsonify([account.to_public_dict() for account in found])


@bp.get("/<username>")
def show(username: str):
    return jsonify(accounts.get_account(username, session_factory).to_public_dict())
