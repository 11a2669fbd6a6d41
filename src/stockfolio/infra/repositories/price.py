"""SQLModel implementation of the price repository."""

from __future__ import annotations

from datetime import datetime
from typing import TYPE_CHECKING, Optional

from sqlmodel import Session, col, select

from ...models.stock import PriceObservation, Stock

if TYPE_CHECKING:  # pragma: no cover
    from ...services.prices import PriceHistoryQuery


class SQLModelPriceRepository:
    def __init__(self, session: Session):
        self.session = session

    def get_stock(self, symbol: str) -> Optional[Stock]:
        return self.session.get(Stock, symbol)

    def ensure_stock(self, symbol: str) -> Stock:
        stock = self.session.get(Stock, symbol)
        if stock is None:
            stock = Stock(symbol=symbol)
            self.session.add(stock)
            self.session.flush()
        return stock

    def latest(self, symbol: str, *, at: Optional[datetime] = None) -> Optional[PriceObservation]:
        timestamp = col(PriceObservation.timestamp)
        statement = select(PriceObservation).where(PriceObservation.symbol == symbol)
        if at is not None:
            statement = statement.where(timestamp <= at)
        statement = statement.order_by(timestamp.desc()).limit(1)
        return self.session.exec(statement).first()

    def get_at(self, symbol: str, timestamp: datetime) -> Optional[PriceObservation]:
        statement = select(PriceObservation).where(
            PriceObservation.symbol == symbol, PriceObservation.timestamp == timestamp
        )
        return self.session.exec(statement).first()

    def add(self, observation: PriceObservation) -> PriceObservation:
        self.session.add(observation)
        self.session.flush()
        return observation

    def history(self, query: "PriceHistoryQuery") -> list[PriceObservation]:
        return list(self.session.exec(query.statement()).all())
