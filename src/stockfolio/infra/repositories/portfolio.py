"""SQLModel implementation of the portfolio repository."""

from __future__ import annotations

from typing import Optional

from sqlmodel import Session, select

from ...models.portfolio import Portfolio


class SQLModelPortfolioRepository:
    def __init__(self, session: Session):
        self.session = session

    def get(self, portfolio_id: int, *, for_update: bool = False) -> Optional[Portfolio]:
        statement = select(Portfolio).where(Portfolio.id == portfolio_id)
        if for_update:
            # populate_existing refreshes an already-loaded instance from the locked row
            statement = statement.with_for_update().execution_options(populate_existing=True)
        return self.session.exec(statement).first()

    def get_by_name(self, owner_id: int, name: str) -> Optional[Portfolio]:
        statement = select(Portfolio).where(Portfolio.owner_id == owner_id, Portfolio.name == name)
        return self.session.exec(statement).first()

    def list_by_owner(self, owner_id: int) -> list[Portfolio]:
        statement = (
            select(Portfolio).where(Portfolio.owner_id == owner_id).order_by(Portfolio.name)
        )
        return list(self.session.exec(statement).all())

    def save(self, portfolio: Portfolio) -> Portfolio:
        self.session.add(portfolio)
        self.session.flush()
        return portfolio

    def delete(self, portfolio: Portfolio) -> None:
        self.session.delete(portfolio)
        self.session.flush()
