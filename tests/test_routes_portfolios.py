"""HTTP flows for portfolios, cash movements and trading."""

from __future__ import annotations

import pytest


@pytest.fixture()
def alice(api):
    return api.register("alice")


def test_create_and_list_portfolios(client, api, alice):
    created = api.portfolio(alice["id"], "Growth", "100")
    api.portfolio(alice["id"], "Cash", "0")

    assert created["cash_dep"] == "100.0000"
    response = client.get(f"/portfolios/owner/{alice['id']}")
    assert response.status_code == 200
    assert [p["name"] for p in response.get_json()] == ["Cash", "Growth"]


def test_create_portfolio_errors(client, api, alice):
    api.portfolio(alice["id"], "Main")

    duplicate = client.post("/portfolios", json={"owner_id": alice["id"], "name": "Main"})
    assert duplicate.status_code == 409
    missing_owner = client.post("/portfolios", json={"owner_id": 999, "name": "Main"})
    assert missing_owner.status_code == 404
    negative = client.post("/portfolios", json={"owner_id": alice["id"], "name": "X", "cash_dep": -1})
    assert negative.status_code == 400
    assert "error" in negative.get_json()


def test_deposit_withdraw_and_records(client, api, alice):
    portfolio = api.portfolio(alice["id"], cash="100")
    pid = portfolio["id"]

    deposit = client.put(f"/portfolios/{pid}/deposit", json={"user_id": alice["id"], "amount": "20.5"})
    assert deposit.status_code == 200
    assert deposit.get_json()["cash_dep"] == "120.5000"

    overdraw = client.put(f"/portfolios/{pid}/withdraw", json={"user_id": alice["id"], "amount": 500})
    assert overdraw.status_code == 400
    assert overdraw.get_json() == {"error": "Insufficient funds in portfolio"}

    withdraw = client.put(f"/portfolios/{pid}/withdraw", json={"user_id": alice["id"], "amount": 0.5})
    assert withdraw.get_json()["cash_dep"] == "120.0000"

    records = client.get(f"/portfolios/{pid}/records?user_id={alice['id']}&limit=2").get_json()
    assert [r["kind"] for r in records] == ["WITHDRAW", "DEPOSIT"]
    assert records[1]["amount"] == "20.5000"


def test_cash_routes_check_ownership(client, api, alice):
    mallory = api.register("mallory")
    pid = api.portfolio(alice["id"], cash="10")["id"]

    response = client.put(f"/portfolios/{pid}/withdraw", json={"user_id": mallory["id"], "amount": 5})
    assert response.status_code == 403
    assert client.get(f"/portfolios/{pid}?user_id={mallory['id']}").status_code == 403
    assert client.put(f"/portfolios/{pid}/deposit", json={"amount": 5}).status_code == 400
    assert client.put("/portfolios/9999/deposit", json={"user_id": alice["id"], "amount": 5}).status_code == 404


def test_transfer_between_own_portfolios(client, api, alice):
    source = api.portfolio(alice["id"], "P1", "20")["id"]
    target = api.portfolio(alice["id"], "P2", "0")["id"]

    too_much = client.put(
        "/portfolios/transfer",
        json={"user_id": alice["id"], "from_id": source, "to_id": target, "amount": 30},
    )
    assert too_much.status_code == 400

    ok = client.put(
        "/portfolios/transfer",
        json={"user_id": alice["id"], "from_id": source, "to_id": target, "amount": "12.5"},
    )
    assert ok.status_code == 200
    assert ok.get_json()["from_cash_dep"] == "7.5000"
    assert ok.get_json()["to_cash_dep"] == "12.5000"


def test_buy_sell_and_detail(client, api, alice):
    api.price("ACME", "10.00")
    pid = api.portfolio(alice["id"], cash="100")["id"]

    bought = client.post(
        f"/portfolios/{pid}/stocks/buy", json={"user_id": alice["id"], "symbol": "acme", "quantity": 5}
    )
    assert bought.status_code == 200
    assert bought.get_json()["total_cost"] == "50.0000"
    assert bought.get_json()["cash_dep"] == "50.0000"

    oversell = client.post(
        f"/portfolios/{pid}/stocks/sell", json={"user_id": alice["id"], "symbol": "ACME", "quantity": 10}
    )
    assert oversell.status_code == 400
    assert oversell.get_json() == {"error": "Insufficient stock quantity"}

    detail = client.get(f"/portfolios/{pid}?user_id={alice['id']}").get_json()
    assert detail["holdings"][0]["quantity"] == 5
    assert detail["total_value"] == "100.0000"

    sold = client.post(
        f"/portfolios/{pid}/stocks/sell", json={"user_id": alice["id"], "symbol": "ACME", "quantity": 5}
    )
    assert sold.get_json()["total_revenue"] == "50.0000"
    assert sold.get_json()["holding_quantity"] == 0
    assert client.get(f"/portfolios/{pid}?user_id={alice['id']}").get_json()["holdings"] == []


def test_buy_unknown_stock(client, api, alice):
    pid = api.portfolio(alice["id"], cash="100")["id"]

    response = client.post(
        f"/portfolios/{pid}/stocks/buy", json={"user_id": alice["id"], "symbol": "NOPE", "quantity": 1}
    )

    assert response.status_code == 404
    assert response.get_json() == {"error": "Stock NOPE not found"}


def test_delete_portfolio(client, api, alice):
    pid = api.portfolio(alice["id"], cash="5")["id"]

    assert client.delete(f"/portfolios/{pid}", json={"user_id": alice["id"] + 1}).status_code == 403
    assert client.delete(f"/portfolios/{pid}", json={"user_id": alice["id"]}).status_code == 200
    assert client.get(f"/portfolios/{pid}?user_id={alice['id']}").status_code == 404
