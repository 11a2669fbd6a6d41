"""Instrument and price history models."""

from __future__ import annotations

from datetime import datetime
from decimal import Decimal
from typing import ClassVar, Optional

from sqlalchemy import UniqueConstraint
from sqlmodel import Field, SQLModel

from .base import MONEY_DIGITS, MONEY_PLACES, money_str


class Stock(SQLModel, table=True):
    __tablename__: ClassVar[str] = "stock"

    symbol: str = Field(primary_key=True, max_length=16)
    name: Optional[str] = Field(default=None, max_length=255)


class PriceObservation(SQLModel, table=True):
    """One immutable OHLCV bar; the newest bar's close is the current price."""

    __tablename__: ClassVar[str] = "stock_history"
    __table_args__ = (UniqueConstraint("symbol", "timestamp", name="uq_stock_history_symbol_ts"),)

    id: Optional[int] = Field(default=None, primary_key=True)
    symbol: str = Field(foreign_key="stock.symbol", nullable=False, index=True, max_length=16)
    timestamp: datetime = Field(nullable=False, index=True)
    open: Decimal = Field(nullable=False, max_digits=MONEY_DIGITS, decimal_places=MONEY_PLACES)
    high: Decimal = Field(nullable=False, max_digits=MONEY_DIGITS, decimal_places=MONEY_PLACES)
    low: Decimal = Field(nullable=False, max_digits=MONEY_DIGITS, decimal_places=MONEY_PLACES)
    close: Decimal = Field(nullable=False, max_digits=MONEY_DIGITS, decimal_places=MONEY_PLACES)
    volume: int = Field(nullable=False, default=0)

    def to_dict(self) -> dict:
        return {
            "symbol": self.symbol,
            "timestamp": self.timestamp.isoformat(),
            "open": money_str(self.open),
            "high": money_str(self.high),
            "low": money_str(self.low),
            "close": money_str(self.close),
            "volume": self.volume,
        }
