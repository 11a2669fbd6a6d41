"""Database and extension wiring for Stockfolio."""

from __future__ import annotations

from contextlib import contextmanager
from typing import Iterator

from flask import Flask
from sqlalchemy.engine import Engine
from sqlmodel import Session

from .config import BaseConfig
from .infra.database import create_db_engine, init_database

_engine: Engine | None = None


def init_db(app: Flask) -> None:
    """Initialize the SQLModel engine using configuration from the app."""

    config: BaseConfig = app.config["STOCKFOLIO_CONFIG"]
    engine = create_db_engine(config)
    init_database(engine)

    global _engine
    if _engine is not None and _engine is not engine:
        _engine.dispose()
    _engine = engine
    app.extensions["stockfolio_engine"] = engine


def get_engine() -> Engine:
    """Return the initialized SQLModel engine."""

    if _engine is None:
        raise RuntimeError("Database engine not initialized")
    return _engine


@contextmanager
def session_scope() -> Iterator[Session]:
    """Provide a transactional scope around one request's work."""

    session = Session(get_engine(), expire_on_commit=False)
    try:
        yield session
        session.commit()
    except Exception:
        session.rollback()
        raise
    finally:
        session.close()


def session_factory():
    """Zero-argument factory for services that open their own scope."""

    return session_scope()
