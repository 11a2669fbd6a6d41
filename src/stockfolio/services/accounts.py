"""Account registration, lookup and credential checks."""

from __future__ import annotations

import logging
from typing import Callable, ContextManager

from argon2 import PasswordHasher
from argon2.exceptions import InvalidHashError, VerificationError, VerifyMismatchError
from sqlalchemy.exc import IntegrityError
from sqlmodel import Session

from ..errors import Conflict, InvalidCredentials, NotFound, ValidationError
from ..infra.repositories import SQLModelAccountRepository
from ..models.account import Account

SessionFactory = Callable[[], ContextManager[Session]]

logger = logging.getLogger(__name__)

_hasher = PasswordHasher()
MAX_USERNAME_LENGTH = 64


def _clean_username(username: object) -> str:
    if not isinstance(username, str) or not username.strip():
        raise ValidationError("Username is required")
    cleaned = username.strip()
    if len(cleaned) > MAX_USERNAME_LENGTH:
        raise ValidationError(f"Username must be at most {MAX_USERNAME_LENGTH} characters")
    return cleaned


def create_account(
    *,
    username: object,
    password: object,
    email: object = None,
    session_factory: SessionFactory,
) -> Account:
    """Create a new account with a hashed password."""

    cleaned = _clean_username(username)
    if not isinstance(password, str) or not password:
        raise ValidationError("Password is required")
    if email is not None and not isinstance(email, str):
        raise ValidationError("Email must be a string")
    password_hash = _hasher.hash(password)

    try:
        with session_factory() as session:
            repo = SQLModelAccountRepository(session)
            if repo.get_by_username(cleaned) is not None:
                raise Conflict("Username already exists")
            account = repo.create(
                Account(username=cleaned, password_hash=password_hash, email=(email or None))
            )
            session.commit()
            session.expunge(account)
    except IntegrityError as exc:
        # Lost a race against a concurrent registration of the same name
        raise Conflict("Username already exists") from exc
    logger.info("Registered account %s (%s)", account.id, cleaned)
    return account


def get_account(username: str, session_factory: SessionFactory) -> Account:
    """Fetch an account by exact username."""

    with session_factory() as session:
        account = SQLModelAccountRepository(session).get_by_username(username.strip())
        if account is None:
            raise NotFound("User not found")
        session.expunge(account)
        return account


def search_accounts(prefix: str, session_factory: SessionFactory, *, limit: int = 50) -> list[Account]:
    """Case-insensitive username prefix search."""

    prefix = (prefix or "").strip()
    if not prefix:
        return []
    with session_factory() as session:
        accounts = SQLModelAccountRepository(session).search(prefix, limit=limit)
        session.expunge_all()
    return accounts


def authenticate(*, username: object, password: object, session_factory: SessionFactory) -> Account:
    """Validate credentials and return the account when correct."""

    if not isinstance(username, str) or not username.strip() or not isinstance(password, str):
        raise InvalidCredentials()
    with session_factory() as session:
        account = SQLModelAccountRepository(session).get_by_username(username.strip())
        if account is None:
            raise InvalidCredentials()
        try:
            _hasher.verify(account.password_hash, password)
        except (VerifyMismatchError, InvalidHashError, VerificationError) as exc:
            logger.info("Failed login for %s", account.username)
            raise InvalidCredentials() from exc

        if _hasher.check_needs_rehash(account.password_hash):
            account.password_hash = _hasher.hash(password)
            session.add(account)
            session.commit()
        session.expunge(account)
        return account


__all__ = ["authenticate", "create_account", "get_account", "search_accounts"]
