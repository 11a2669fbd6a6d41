"""Account model: the users who own portfolios."""

from __future__ import annotations

from datetime import datetime
from typing import ClassVar, Optional

from sqlmodel import Field, SQLModel

from .base import utcnow


class Account(SQLModel, table=True):
    """Registered user. Passwords are stored as argon2 hashes only."""

    __tablename__: ClassVar[str] = "account"

    id: Optional[int] = Field(default=None, primary_key=True)
    username: str = Field(nullable=False, unique=True, index=True, max_length=64)
    password_hash: str = Field(nullable=False, max_length=255)
    email: Optional[str] = Field(default=None, max_length=255)
    reg_date: datetime = Field(default_factory=utcnow, nullable=False)

    def to_public_dict(self) -> dict:
        return {
            "id": self.id,
            "username": self.username,
            "email": self.email,
            "reg_date": self.reg_date.isoformat() if self.reg_date else None,
        }
