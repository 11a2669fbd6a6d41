"""Portfolio, cash and trading routes."""

from __future__ import annotations

from flask import jsonify, request

from ...extensions import session_scope
from ...infra.repositories import SQLModelLedgerStore
from ...models.base import money_str
from ...services import LedgerService, PortfolioService
from ...services.validation import optional_int, to_int
from .. import actor_id, json_body
from . import bp


@bp.post("")
def create_portfolio():
    payload = json_body()
    owner_id = to_int(payload.get("owner_id", payload.get("user_id")), field="owner_id")
    with session_scope() as session:
        portfolio = PortfolioService(SQLModelLedgerStore(session)).create(
            owner_id, payload.get("name"), payload.get("cash_dep", 0)
        )
        return jsonify(portfolio.to_dict()), 201


@bp.get("/owner/<int:owner_id>")
def list_portfolios(owner_id: int):
    with session_scope() as session:
        portfolios = PortfolioService(SQLModelLedgerStore(session)).list_for_owner(owner_id)
        return jsonify([p.to_dict() for p in portfolios])


@bp.get("/<int:portfolio_id>")
def show_portfolio(portfolio_id: int):
    actor = actor_id(request.args)
    with session_scope() as session:
        detail = PortfolioService(SQLModelLedgerStore(session)).detail(portfolio_id, actor)
        return jsonify(detail.to_dict())


@bp.delete("/<int:portfolio_id>")
def delete_portfolio(portfolio_id: int):
    actor = actor_id(json_body() or request.args)
    with session_scope() as session:
        PortfolioService(SQLModelLedgerStore(session)).delete(portfolio_id, actor)
    return jsonify({"message": "Portfolio deleted"})


@bp.get("/<int:portfolio_id>/records")
def list_records(portfolio_id: int):
    actor = actor_id(request.args)
    limit = optional_int(request.args.get("limit"), field="limit", minimum=1)
    with session_scope() as session:
        entries = PortfolioService(SQLModelLedgerStore(session)).records(
            portfolio_id, actor, limit=limit
        )
        return jsonify([entry.to_dict() for entry in entries])


@bp.put("/<int:portfolio_id>/deposit")
def deposit(portfolio_id: int):
    payload = json_body()
    with session_scope() as session:
        result = LedgerService(SQLModelLedgerStore(session)).deposit(
            portfolio_id, actor_id(payload), payload.get("amount")
        )
        return jsonify(
            {"message": "Deposit successful", "cash_dep": money_str(result.portfolio.cash_dep)}
        )


@bp.put("/<int:portfolio_id>/withdraw")
def withdraw(portfolio_id: int):
    payload = json_body()
    with session_scope() as session:
        result = LedgerService(SQLModelLedgerStore(session)).withdraw(
            portfolio_id, actor_id(payload), payload.get("amount")
        )
        return jsonify(
            {"message": "Withdrawal successful", "cash_dep": money_str(result.portfolio.cash_dep)}
        )


@bp.put("/transfer")
def transfer():
    payload = json_body()
    from_id = to_int(payload.get("from_id"), field="from_id")
    to_id = to_int(payload.get("to_id"), field="to_id")
    with session_scope() as session:
        result = LedgerService(SQLModelLedgerStore(session)).transfer(
            from_id, to_id, actor_id(payload), payload.get("amount")
        )
        return jsonify(
            {
                "message": "Transfer successful",
                "from_cash_dep": money_str(result.source.cash_dep),
                "to_cash_dep": money_str(result.destination.cash_dep),
            }
        )


@bp.post("/<int:portfolio_id>/stocks/buy")
def buy_stock(portfolio_id: int):
    payload = json_body()
    with session_scope() as session:
        result = LedgerService(SQLModelLedgerStore(session)).buy_stock(
            portfolio_id, actor_id(payload), payload.get("symbol"), payload.get("quantity")
        )
        return jsonify(
            {
                "message": "Stock bought successfully",
                "symbol": result.symbol,
                "holding_quantity": result.holding.quantity if result.holding else 0,
                "unit_price": money_str(result.unit_price),
                "total_cost": money_str(result.total),
                "cash_dep": money_str(result.cash_dep),
            }
        )


@bp.post("/<int:portfolio_id>/stocks/sell")
def sell_stock(portfolio_id: int):
    payload = json_body()
    with session_scope() as session:
        result = LedgerService(SQLModelLedgerStore(session)).sell_stock(
            portfolio_id, actor_id(payload), payload.get("symbol"), payload.get("quantity")
        )
        return jsonify(
            {
                "message": "Stock sold successfully",
                "symbol": result.symbol,
                "holding_quantity": result.holding.quantity if result.holding else 0,
                "unit_price": money_str(result.unit_price),
                "total_revenue": money_str(result.total),
                "cash_dep": money_str(result.cash_dep),
            }
        )
