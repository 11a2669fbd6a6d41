"""Pytest configuration and shared fixtures for Stockfolio tests.

Database fixtures use a throwaway SQLite file per test. The ``store`` fixture
is parametrized so ledger tests run against both the in-memory fake and the
SQLModel implementation.
"""

from __future__ import annotations

from datetime import datetime
from decimal import Decimal

import pytest
from sqlmodel import Session, create_engine

from stockfolio import create_app
from stockfolio.infra.database import create_session_factory, init_database
from stockfolio.infra.repositories import SQLModelLedgerStore
from stockfolio.models import Account
from stockfolio.services import PortfolioService
from stockfolio.services.prices import record_observation

from fakes import InMemoryLedgerStore

_ENV_VARS = (
    "STOCKFOLIO_DATABASE_URL",
    "STOCKFOLIO_DEV_MODE",
    "STOCKFOLIO_SECRET_KEY",
    "STOCKFOLIO_LOG_LEVEL",
    "STOCKFOLIO_FRIEND_COOLDOWN_MINUTES",
)


@pytest.fixture(autouse=True)
def _isolated_env(tmp_path, monkeypatch: pytest.MonkeyPatch):
    """Keep config, logs and databases inside the test's tmp dir."""

    for name in _ENV_VARS:
        monkeypatch.delenv(name, raising=False)
    monkeypatch.setenv("STOCKFOLIO_DATA_DIR", str(tmp_path / "data"))


# =============================================================================
# Database Fixtures
# =============================================================================


@pytest.fixture()
def db_engine(tmp_path):
    """Fresh SQLite database with every table created."""

    engine = create_engine(
        f"sqlite:///{tmp_path / 'test.db'}", connect_args={"check_same_thread": False}
    )
    init_database(engine)
    yield engine
    engine.dispose()


@pytest.fixture()
def db_session(db_engine):
    session = Session(db_engine, expire_on_commit=False)
    try:
        yield session
    finally:
        session.close()


@pytest.fixture()
def session_factory(db_engine):
    """Zero-argument callable returning a committing session scope."""

    return create_session_factory(db_engine)


@pytest.fixture()
def memory_store() -> InMemoryLedgerStore:
    return InMemoryLedgerStore()


@pytest.fixture()
def sql_store(db_session) -> SQLModelLedgerStore:
    return SQLModelLedgerStore(db_session)


@pytest.fixture(params=["memory", "sqlite"])
def store(request):
    """Run the test once per ``LedgerStore`` implementation."""

    return request.getfixturevalue("memory_store" if request.param == "memory" else "sql_store")


# =============================================================================
# Test Data Factories
# =============================================================================


@pytest.fixture()
def account_factory(store):
    """Create accounts directly through the store (no password hashing)."""

    def _create_account(username: str = "alice") -> Account:
        with store.atomic():
            return store.accounts.create(Account(username=username, password_hash="not-a-hash"))

    return _create_account


@pytest.fixture()
def portfolio_factory(store):
    def _create_portfolio(owner: Account, name: str = "Main", cash: str | int = 0):
        return PortfolioService(store).create(owner.id, name, Decimal(str(cash)))

    return _create_portfolio


@pytest.fixture()
def price_factory(store):
    """Record one OHLC bar whose close is ``close``."""

    def _record(symbol: str, close: str | int, timestamp: datetime | None = None, volume: int = 100):
        return record_observation(
            store,
            symbol=symbol,
            timestamp=(timestamp or datetime(2024, 1, 2, 16, 0)).isoformat(),
            open=close,
            high=close,
            low=close,
            close=close,
            volume=volume,
        )

    return _record


# =============================================================================
# Flask Fixtures
# =============================================================================


@pytest.fixture()
def app(tmp_path, monkeypatch: pytest.MonkeyPatch):
    db_path = tmp_path / "app.db"
    monkeypatch.setenv("STOCKFOLIO_DATABASE_URL", f"sqlite:///{db_path}")
    return create_app("testing")


@pytest.fixture()
def client(app):
    with app.test_client() as client:
        yield client


@pytest.fixture()
def api(client):
    """Small helpers for seeding data through the HTTP surface."""

    class _Api:
        def register(self, username: str, password: str = "s3cret!") -> dict:
            response = client.post("/users", json={"username": username, "password": password})
            assert response.status_code == 201, response.get_json()
            return response.get_json()

        def portfolio(self, owner_id: int, name: str = "Main", cash: str = "0") -> dict:
            response = client.post(
                "/portfolios", json={"owner_id": owner_id, "name": name, "cash_dep": cash}
            )
            assert response.status_code == 201, response.get_json()
            return response.get_json()

        def price(self, symbol: str, close: str, timestamp: str = "2024-01-02T16:00:00") -> dict:
            response = client.post(
                "/stocks",
                json={
                    "symbol": symbol,
                    "timestamp": timestamp,
                    "open": close,
                    "high": close,
                    "low": close,
                    "close": close,
                    "volume": 1000,
                },
            )
            assert response.status_code == 201, response.get_json()
            return response.get_json()

    return _Api()
