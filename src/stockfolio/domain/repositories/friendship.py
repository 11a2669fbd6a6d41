"""Friendship repository protocol."""

from __future__ import annotations

from typing import Iterable, Optional, Protocol

from ...models.account import Account
from ...models.friendship import FriendStatus, Friendship


class FriendshipRepository(Protocol):
    """Persistence operations for the friend graph."""

    def get_between(self, first_id: int, second_id: int) -> Optional[Friendship]:
        """Relation between two accounts regardless of direction."""
        ...

    def get_directed(
        self, requester_id: int, receiver_id: int, *, status: Optional[FriendStatus] = None
    ) -> Optional[Friendship]:
        ...

    def list_for(
        self,
        account_id: int,
        *,
        statuses: Iterable[FriendStatus],
        incoming: bool = True,
        outgoing: bool = True,
    ) -> list[Friendship]:
        ...

    def list_unrelated_accounts(self, account_id: int) -> list[Account]:
        """Accounts with no pending or accepted relation to ``account_id``."""
        ...

    def save(self, friendship: Friendship) -> Friendship:
        ...

    def delete(self, friendship: Friendship) -> None:
        ...
