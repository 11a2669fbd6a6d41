"""Portfolio and holding models."""

from __future__ import annotations

from datetime import datetime
from decimal import Decimal
from typing import ClassVar, Optional

from sqlalchemy import UniqueConstraint
from sqlmodel import Field, SQLModel

from .base import MONEY_DIGITS, MONEY_PLACES, ZERO, money_str, utcnow


class Portfolio(SQLModel, table=True):
    """A cash balance plus stock holdings owned by one account."""

    __tablename__: ClassVar[str] = "portfolio"
    __table_args__ = (UniqueConstraint("owner_id", "name", name="uq_portfolio_owner_name"),)

    id: Optional[int] = Field(default=None, primary_key=True)
    name: str = Field(nullable=False, max_length=128)
    cash_dep: Decimal = Field(
        default=ZERO, nullable=False, max_digits=MONEY_DIGITS, decimal_places=MONEY_PLACES
    )
    owner_id: int = Field(foreign_key="account.id", nullable=False, index=True)
    created_at: datetime = Field(default_factory=utcnow, nullable=False)

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "name": self.name,
            "cash_dep": money_str(self.cash_dep),
            "owner_id": self.owner_id,
            "created_at": self.created_at.isoformat() if self.created_at else None,
        }


class Holding(SQLModel, table=True):
    """Shares of one instrument held by a portfolio; never persisted at zero."""

    __tablename__: ClassVar[str] = "holding"
    __table_args__ = (UniqueConstraint("portfolio_id", "symbol", name="uq_holding_portfolio_symbol"),)

    id: Optional[int] = Field(default=None, primary_key=True)
    portfolio_id: int = Field(
        foreign_key="portfolio.id", nullable=False, index=True, ondelete="CASCADE"
    )
    symbol: str = Field(foreign_key="stock.symbol", nullable=False, index=True, max_length=16)
    quantity: int = Field(nullable=False, default=0)

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "portfolio_id": self.portfolio_id,
            "symbol": self.symbol,
            "quantity": self.quantity,
        }
