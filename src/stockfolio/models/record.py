"""Append-only ledger entries ("records") for every cash movement."""

from __future__ import annotations

import enum
from datetime import datetime
from decimal import Decimal
from typing import ClassVar, Optional

from sqlmodel import Field, SQLModel

from .base import MONEY_DIGITS, MONEY_PLACES, money_str, utcnow


class RecordKind(str, enum.Enum):
    DEPOSIT = "DEPOSIT"
    WITHDRAW = "WITHDRAW"
    BUY = "BUY"
    SELL = "SELL"
    TRANSFER_IN = "TRANSFER_IN"
    TRANSFER_OUT = "TRANSFER_OUT"


class LedgerEntry(SQLModel, table=True):
    __tablename__: ClassVar[str] = "record"

    id: Optional[int] = Field(default=None, primary_key=True)
    portfolio_id: int = Field(
        foreign_key="portfolio.id", nullable=False, index=True, ondelete="CASCADE"
    )
    kind: RecordKind = Field(nullable=False, index=True)
    amount: Decimal = Field(nullable=False, max_digits=MONEY_DIGITS, decimal_places=MONEY_PLACES)
    created_at: datetime = Field(default_factory=utcnow, nullable=False, index=True)

    # Trade context for BUY/SELL; the other portfolio for transfers.
    symbol: Optional[str] = Field(default=None, max_length=16)
    quantity: Optional[int] = Field(default=None)
    counterparty_id: Optional[int] = Field(default=None)

    def to_dict(self) -> dict:
        payload = {
            "id": self.id,
            "portfolio_id": self.portfolio_id,
            "kind": self.kind.value if isinstance(self.kind, RecordKind) else self.kind,
            "amount": money_str(self.amount),
            "created_at": self.created_at.isoformat() if self.created_at else None,
        }
        if self.symbol is not None:
            payload["symbol"] = self.symbol
            payload["quantity"] = self.quantity
        if self.counterparty_id is not None:
            payload["counterparty_id"] = self.counterparty_id
        return payload
