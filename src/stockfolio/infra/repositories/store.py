"""SQLModel-backed ledger unit of work."""

from __future__ import annotations

from contextlib import contextmanager
from typing import Iterator

from sqlmodel import Session

from .account import SQLModelAccountRepository
from .holding import SQLModelHoldingRepository
from .portfolio import SQLModelPortfolioRepository
from .price import SQLModelPriceRepository
from .record import SQLModelRecordRepository


class SQLModelLedgerStore:
    """All ledger repositories bound to a single session.

    ``atomic()`` commits the session when the block succeeds and rolls it
    back when it raises, so one block is one database transaction.
    """

    def __init__(self, session: Session):
        self.session = session
        self.accounts = SQLModelAccountRepository(session)
        self.portfolios = SQLModelPortfolioRepository(session)
        self.holdings = SQLModelHoldingRepository(session)
        self.prices = SQLModelPriceRepository(session)
        self.records = SQLModelRecordRepository(session)

    @contextmanager
    def atomic(self) -> Iterator[None]:
        try:
            yield
            self.session.commit()
        except Exception:
            self.session.rollback()
            raise
