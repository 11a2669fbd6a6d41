"""Friend requests and the friend graph.

A pair of accounts shares at most one ``Friendship`` row whose status moves
PENDING -> ACCEPTED | REJECTED, and ACCEPTED -> DELETED. After a rejection or
removal the pair has to wait out a cooldown before a new request is allowed.
"""

from __future__ import annotations

import logging
from datetime import datetime, timedelta
from typing import Callable, ContextManager, Optional

from sqlmodel import Session

from ..domain.repositories import AccountRepository, FriendshipRepository
from ..errors import Conflict, NotFound, ValidationError
from ..infra.repositories import SQLModelAccountRepository, SQLModelFriendshipRepository
from ..models.account import Account
from ..models.base import utcnow
from ..models.friendship import FriendStatus, Friendship

SessionFactory = Callable[[], ContextManager[Session]]

logger = logging.getLogger(__name__)

DEFAULT_COOLDOWN = timedelta(minutes=5)
CLOSED_STATUSES = (FriendStatus.DELETED, FriendStatus.REJECTED)


def in_cooldown(friendship: Friendship, *, now: datetime, cooldown: timedelta) -> bool:
    """True when a closed relation was closed less than ``cooldown`` ago."""

    return friendship.status in CLOSED_STATUSES and friendship.updated_at > now - cooldown


def _resolve(repo: AccountRepository, username: object, role: str) -> Account:
    if not isinstance(username, str) or not username.strip():
        raise ValidationError(f"{role} username is required")
    account = repo.get_by_username(username.strip())
    if account is None:
        raise NotFound(f"User {username.strip()} not found")
    return account


def _serialize(friendship: Friendship, names: dict[int, str]) -> dict:
    return {
        "id": friendship.id,
        "requester": names.get(friendship.requester_id),
        "receiver": names.get(friendship.receiver_id),
        "status": friendship.status.value,
        "created_at": friendship.created_at.isoformat(),
        "updated_at": friendship.updated_at.isoformat(),
    }


def _names_for(accounts: AccountRepository, rows: list[Friendship]) -> dict[int, str]:
    names: dict[int, str] = {}
    for row in rows:
        for account_id in (row.requester_id, row.receiver_id):
            if account_id not in names:
                account = accounts.get_by_id(account_id)
                names[account_id] = account.username if account else None
    return names


def send_request(
    *,
    requester: object,
    receiver: object,
    session_factory: SessionFactory,
    cooldown: timedelta = DEFAULT_COOLDOWN,
    now: Optional[datetime] = None,
) -> tuple[dict, bool]:
    """Send a friend request, or accept the receiver's pending one.

    Returns the serialized relation and whether it is now an accepted
    friendship.
    """

    moment = now or utcnow()
    with session_factory() as session:
        accounts = SQLModelAccountRepository(session)
        friendships: FriendshipRepository = SQLModelFriendshipRepository(session)
        sender = _resolve(accounts, requester, "Requester")
        target = _resolve(accounts, receiver, "Receiver")
        if sender.id == target.id:
            raise ValidationError("Cannot send a friend request to yourself")

        existing = friendships.get_between(sender.id, target.id)
        if existing is not None:
            if existing.status == FriendStatus.ACCEPTED:
                raise Conflict("Already friends")
            if existing.status == FriendStatus.PENDING:
                if existing.requester_id == target.id:
                    existing.status = FriendStatus.ACCEPTED
                    existing.updated_at = moment
                    friendships.save(existing)
                    logger.info("Friend request %s accepted by reciprocal request", existing.id)
                    return _serialize(existing, {sender.id: sender.username, target.id: target.username}), True
                raise Conflict("Friend request already exists")
            if in_cooldown(existing, now=moment, cooldown=cooldown):
                raise Conflict("Please wait before sending another friend request")
            # Reuse the closed relation for the new request
            existing.requester_id = sender.id
            existing.receiver_id = target.id
            existing.status = FriendStatus.PENDING
            existing.updated_at = moment
            relation = friendships.save(existing)
        else:
            relation = friendships.save(
                Friendship(
                    requester_id=sender.id,
                    receiver_id=target.id,
                    status=FriendStatus.PENDING,
                    created_at=moment,
                    updated_at=moment,
                )
            )
        logger.info("Friend request %s sent from %s to %s", relation.id, sender.username, target.username)
        return _serialize(relation, {sender.id: sender.username, target.id: target.username}), False


def _respond(
    requester: object,
    receiver: object,
    status: FriendStatus,
    session_factory: SessionFactory,
) -> dict:
    with session_factory() as session:
        accounts = SQLModelAccountRepository(session)
        friendships: FriendshipRepository = SQLModelFriendshipRepository(session)
        sender = _resolve(accounts, requester, "Requester")
        target = _resolve(accounts, receiver, "Receiver")
        relation = friendships.get_directed(sender.id, target.id, status=FriendStatus.PENDING)
        if relation is None:
            raise NotFound("Friend request not found")
        relation.status = status
        relation.updated_at = utcnow()
        friendships.save(relation)
        return _serialize(relation, {sender.id: sender.username, target.id: target.username})


def accept_request(*, requester: object, receiver: object, session_factory: SessionFactory) -> dict:
    return _respond(requester, receiver, FriendStatus.ACCEPTED, session_factory)


def deny_request(*, requester: object, receiver: object, session_factory: SessionFactory) -> dict:
    return _respond(requester, receiver, FriendStatus.REJECTED, session_factory)


def remove_friend(*, first: object, second: object, session_factory: SessionFactory) -> None:
    """End an accepted friendship; starts the cooldown for the pair."""

    with session_factory() as session:
        accounts = SQLModelAccountRepository(session)
        friendships: FriendshipRepository = SQLModelFriendshipRepository(session)
        one = _resolve(accounts, first, "Requester")
        other = _resolve(accounts, second, "Receiver")
        relation = friendships.get_between(one.id, other.id)
        if relation is None or relation.status != FriendStatus.ACCEPTED:
            raise NotFound("Friend relationship not found")
        relation.status = FriendStatus.DELETED
        relation.updated_at = utcnow()
        friendships.save(relation)


def withdraw_request(*, requester: object, receiver: object, session_factory: SessionFactory) -> None:
    with session_factory() as session:
        accounts = SQLModelAccountRepository(session)
        friendships: FriendshipRepository = SQLModelFriendshipRepository(session)
        sender = _resolve(accounts, requester, "Requester")
        target = _resolve(accounts, receiver, "Receiver")
        relation = friendships.get_directed(sender.id, target.id, status=FriendStatus.PENDING)
        if relation is None:
            raise NotFound("Friend request not found")
        friendships.delete(relation)


def _listing(username: str, session_factory: SessionFactory, **filters) -> list[dict]:
    with session_factory() as session:
        accounts = SQLModelAccountRepository(session)
        account = _resolve(accounts, username, "User")
        rows = SQLModelFriendshipRepository(session).list_for(account.id, **filters)
        names = _names_for(accounts, rows)
        return [_serialize(row, names) for row in rows]


def list_friends(username: str, session_factory: SessionFactory) -> list[dict]:
    return _listing(username, session_factory, statuses=(FriendStatus.ACCEPTED,))


def list_incoming(username: str, session_factory: SessionFactory) -> list[dict]:
    return _listing(username, session_factory, statuses=(FriendStatus.PENDING,), outgoing=False)


def list_outgoing(username: str, session_factory: SessionFactory) -> list[dict]:
    return _listing(username, session_factory, statuses=(FriendStatus.PENDING,), incoming=False)


def list_non_friends(username: str, session_factory: SessionFactory) -> list[Account]:
    """Accounts the user could still send a request to."""

    with session_factory() as session:
        account = _resolve(SQLModelAccountRepository(session), username, "User")
        others = SQLModelFriendshipRepository(session).list_unrelated_accounts(account.id)
        session.expunge_all()
    return others


__all__ = [
    "DEFAULT_COOLDOWN",
    "accept_request",
    "deny_request",
    "in_cooldown",
    "list_friends",
    "list_incoming",
    "list_non_friends",
    "list_outgoing",
    "remove_friend",
    "send_request",
    "withdraw_request",
]
