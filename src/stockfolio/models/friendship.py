"""Friend relation between two accounts."""

from __future__ import annotations

import enum
from datetime import datetime
from typing import ClassVar, Optional

from sqlmodel import Field, SQLModel

from .base import utcnow


class FriendStatus(str, enum.Enum):
    PENDING = "PENDING"
    ACCEPTED = "ACCEPTED"
    REJECTED = "REJECTED"
    DELETED = "DELETED"


class Friendship(SQLModel, table=True):
    """At most one row exists per unordered pair of accounts."""

    __tablename__: ClassVar[str] = "friendship"

    id: Optional[int] = Field(default=None, primary_key=True)
    requester_id: int = Field(foreign_key="account.id", nullable=False, index=True)
    receiver_id: int = Field(foreign_key="account.id", nullable=False, index=True)
    status: FriendStatus = Field(default=FriendStatus.PENDING, nullable=False, index=True)
    created_at: datetime = Field(default_factory=utcnow, nullable=False)
    updated_at: datetime = Field(default_factory=utcnow, nullable=False)
