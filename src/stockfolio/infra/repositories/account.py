"""SQLModel implementation of the account repository."""

from __future__ import annotations

from typing import Optional

from sqlmodel import Session, col, select

from ...models.account import Account


class SQLModelAccountRepository:
    """SQLModel-based account repository bound to one session."""

    def __init__(self, session: Session):
        self.session = session

    def get_by_id(self, account_id: int) -> Optional[Account]:
        return self.session.get(Account, account_id)

    def get_by_username(self, username: str) -> Optional[Account]:
        return self.session.exec(select(Account).where(Account.username == username)).first()

    def search(self, prefix: str, *, limit: int = 50) -> list[Account]:
        # Escape LIKE wildcards so user input only ever matches literally
        escaped = prefix.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")
        statement = (
            select(Account)
            .where(col(Account.username).ilike(f"{escaped}%", escape="\\"))
            .order_by(Account.username)
            .limit(limit)
        )
        return list(self.session.exec(statement).all())

    def list_all(self) -> list[Account]:
        return list(self.session.exec(select(Account).order_by(Account.username)).all())

    def create(self, account: Account) -> Account:
        self.session.add(account)
        self.session.flush()
        self.session.refresh(account)
        return account
