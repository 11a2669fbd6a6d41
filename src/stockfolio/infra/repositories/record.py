"""SQLModel implementation of the ledger entry repository."""

from __future__ import annotations

from typing import Optional

from sqlmodel import Session, col, select

from ...models.record import LedgerEntry


class SQLModelRecordRepository:
    def __init__(self, session: Session):
        self.session = session

    def append(self, entry: LedgerEntry) -> LedgerEntry:
        self.session.add(entry)
        self.session.flush()
        return entry

    def list_by_portfolio(self, portfolio_id: int, *, limit: Optional[int] = None) -> list[LedgerEntry]:
        statement = (
            select(LedgerEntry)
            .where(LedgerEntry.portfolio_id == portfolio_id)
            .order_by(col(LedgerEntry.created_at).desc(), col(LedgerEntry.id).desc())
        )
        if limit is not None:
            statement = statement.limit(limit)
        return list(self.session.exec(statement).all())

    def delete_for_portfolio(self, portfolio_id: int) -> int:
        entries = self.list_by_portfolio(portfolio_id)
        for entry in entries:
            self.session.delete(entry)
        self.session.flush()
        return len(entries)
