"""Account repository protocol."""

from __future__ import annotations

from typing import Optional, Protocol

from ...models.account import Account


class AccountRepository(Protocol):
    """Repository for managing account entities."""

    def get_by_id(self, account_id: int) -> Optional[Account]:
        """Retrieve an account by ID."""
        ...

    def get_by_username(self, username: str) -> Optional[Account]:
        """Retrieve an account by exact username."""
        ...

    def search(self, prefix: str, *, limit: int = 50) -> list[Account]:
        """Case-insensitive username prefix search."""
        ...

    def list_all(self) -> list[Account]:
        ...

    def create(self, account: Account) -> Account:
        """Persist a new account and return it with its id."""
        ...
