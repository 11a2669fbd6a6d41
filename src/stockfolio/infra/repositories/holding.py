"""SQLModel implementation of the holding repository."""

from __future__ import annotations

from typing import Optional

from sqlmodel import Session, select

from ...models.portfolio import Holding


class SQLModelHoldingRepository:
    """SQLModel-based holding repository implementation."""

    def __init__(self, session: Session):
        self.session = session

    def get(self, portfolio_id: int, symbol: str, *, for_update: bool = False) -> Optional[Holding]:
        statement = select(Holding).where(
            Holding.portfolio_id == portfolio_id, Holding.symbol == symbol
        )
        if for_update:
            statement = statement.with_for_update().execution_options(populate_existing=True)
        return self.session.exec(statement).first()

    def list_by_portfolio(self, portfolio_id: int) -> list[Holding]:
        statement = (
            select(Holding).where(Holding.portfolio_id == portfolio_id).order_by(Holding.symbol)
        )
        return list(self.session.exec(statement).all())

    def save(self, holding: Holding) -> Holding:
        self.session.add(holding)
        self.session.flush()
        return holding

    def delete(self, holding: Holding) -> None:
        self.session.delete(holding)
        self.session.flush()

    def delete_for_portfolio(self, portfolio_id: int) -> int:
        holdings = self.list_by_portfolio(portfolio_id)
        for holding in holdings:
            self.session.delete(holding)
        self.session.flush()
        return len(holdings)
