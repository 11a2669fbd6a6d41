"""Instrument price routes."""

from __future__ import annotations

from flask import jsonify, request

from ...extensions import session_scope
from ...infra.repositories import SQLModelLedgerStore
from ...services import prices
from ...services.validation import to_int
from .. import json_body
from . import bp


@bp.post("")
def add_observation():
    payload = json_body()
    with session_scope() as session:
        observation = prices.record_observation(
            SQLModelLedgerStore(session),
            symbol=payload.get("symbol"),
            timestamp=payload.get("timestamp"),
            open=payload.get("open"),
            high=payload.get("high"),
            low=payload.get("low"),
            close=payload.get("close"),
            volume=payload.get("volume", 0),
        )
        return jsonify(observation.to_dict()), 201


@bp.get("/<symbol>")
def latest_price(symbol: str):
    with session_scope() as session:
        observation = prices.latest(SQLModelLedgerStore(session), symbol, on=request.args.get("date"))
        return jsonify(observation.to_dict())


@bp.get("/<symbol>/history")
def price_history(symbol: str):
    query = prices.PriceHistoryQuery.from_args(symbol, request.args)
    with session_scope() as session:
        rows = prices.history(SQLModelLedgerStore(session), query)
        return jsonify([row.to_dict() for row in rows])


@bp.get("/<symbol>/moving-average")
def price_moving_average(symbol: str):
    query = prices.PriceHistoryQuery.from_args(symbol, request.args)
    period = to_int(request.args.get("period"), field="period")
    with session_scope() as session:
        points = prices.moving_average(SQLModelLedgerStore(session), query, period)
        return jsonify({"symbol": query.symbol, "period": period, "points": points})
