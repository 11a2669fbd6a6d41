"""SQLModel implementation of the friendship repository."""

from __future__ import annotations

from typing import Iterable, Optional

from sqlalchemy import and_, or_
from sqlmodel import Session, col, select

from ...models.account import Account
from ...models.friendship import FriendStatus, Friendship

ACTIVE_STATUSES = (FriendStatus.PENDING, FriendStatus.ACCEPTED)


class SQLModelFriendshipRepository:
    def __init__(self, session: Session):
        self.session = session

    def get_between(self, first_id: int, second_id: int) -> Optional[Friendship]:
        statement = select(Friendship).where(
            or_(
                and_(Friendship.requester_id == first_id, Friendship.receiver_id == second_id),
                and_(Friendship.requester_id == second_id, Friendship.receiver_id == first_id),
            )
        )
        return self.session.exec(statement).first()

    def get_directed(
        self, requester_id: int, receiver_id: int, *, status: Optional[FriendStatus] = None
    ) -> Optional[Friendship]:
        statement = select(Friendship).where(
            Friendship.requester_id == requester_id, Friendship.receiver_id == receiver_id
        )
        if status is not None:
            statement = statement.where(Friendship.status == status)
        return self.session.exec(statement).first()

    def list_for(
        self,
        account_id: int,
        *,
        statuses: Iterable[FriendStatus],
        incoming: bool = True,
        outgoing: bool = True,
    ) -> list[Friendship]:
        sides = []
        if outgoing:
            sides.append(Friendship.requester_id == account_id)
        if incoming:
            sides.append(Friendship.receiver_id == account_id)
        if not sides:
            return []
        statement = (
            select(Friendship)
            .where(or_(*sides), col(Friendship.status).in_(list(statuses)))
            .order_by(col(Friendship.updated_at).desc())
        )
        return list(self.session.exec(statement).all())

    def list_unrelated_accounts(self, account_id: int) -> list[Account]:
        sent_to = select(Friendship.receiver_id).where(
            Friendship.requester_id == account_id, col(Friendship.status).in_(ACTIVE_STATUSES)
        )
        received_from = select(Friendship.requester_id).where(
            Friendship.receiver_id == account_id, col(Friendship.status).in_(ACTIVE_STATUSES)
        )
        statement = (
            select(Account)
            .where(
                Account.id != account_id,
                col(Account.id).not_in(sent_to),
                col(Account.id).not_in(received_from),
            )
            .order_by(Account.username)
        )
        return list(self.session.exec(statement).all())

    def save(self, friendship: Friendship) -> Friendship:
        self.session.add(friendship)
        self.session.flush()
        return friendship

    def delete(self, friendship: Friendship) -> None:
        self.session.delete(friendship)
        self.session.flush()
