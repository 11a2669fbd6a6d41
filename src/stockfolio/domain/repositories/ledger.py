"""Unit-of-work contract consumed by the ledger and portfolio services."""

from __future__ import annotations

from typing import ContextManager, Protocol

from .account import AccountRepository
from .holding import HoldingRepository
from .portfolio import PortfolioRepository
from .price import PriceRepository
from .record import RecordRepository


class LedgerStore(Protocol):
    """Bundle of repositories sharing one transaction.

    Everything done inside ``atomic()`` commits together when the block
    exits normally and is rolled back wholesale when it raises.
    """

    accounts: AccountRepository
    portfolios: PortfolioRepository
    holdings: HoldingRepository
    prices: PriceRepository
    records: RecordRepository

    def atomic(self) -> ContextManager[None]:
        ...
