"""Service layer: business rules on top of the repositories."""

from .ledger import CashResult, LedgerService, TradeResult, TransferResult
from .portfolios import HoldingView, PortfolioDetail, PortfolioService
from .prices import PriceHistoryQuery

__all__ = [
    "CashResult",
    "HoldingView",
    "LedgerService",
    "PortfolioDetail",
    "PortfolioService",
    "PriceHistoryQuery",
    "TradeResult",
    "TransferResult",
]
