"""Concrete repository implementations using SQLModel."""

from .account import SQLModelAccountRepository
from .friendship import SQLModelFriendshipRepository
from .holding import SQLModelHoldingRepository
from .portfolio import SQLModelPortfolioRepository
from .price import SQLModelPriceRepository
from .record import SQLModelRecordRepository
from .store import SQLModelLedgerStore

__all__ = [
    "SQLModelAccountRepository",
    "SQLModelFriendshipRepository",
    "SQLModelHoldingRepository",
    "SQLModelLedgerStore",
    "SQLModelPortfolioRepository",
    "SQLModelPriceRepository",
    "SQLModelRecordRepository",
]
