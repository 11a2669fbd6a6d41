"""Repository protocol definitions for domain layer."""

from .account import AccountRepository
from .friendship import FriendshipRepository
from .holding import HoldingRepository
from .ledger import LedgerStore
from .portfolio import PortfolioRepository
from .price import PriceRepository
from .record import RecordRepository

__all__ = [
    "AccountRepository",
    "FriendshipRepository",
    "HoldingRepository",
    "LedgerStore",
    "PortfolioRepository",
    "PriceRepository",
    "RecordRepository",
]
