"""SQLModel table exports."""

from .account import Account
from .friendship import FriendStatus, Friendship
from .portfolio import Holding, Portfolio
from .record import LedgerEntry, RecordKind
from .stock import PriceObservation, Stock

__all__ = [
    "Account",
    "FriendStatus",
    "Friendship",
    "Holding",
    "LedgerEntry",
    "Portfolio",
    "PriceObservation",
    "RecordKind",
    "Stock",
]
