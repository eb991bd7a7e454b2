"""
Account table model.
"""

from datetime import datetime, timezone
from enum import Enum

from sqlmodel import Field, SQLModel

NAME_MIN_LENGTH = 2
NAME_MAX_LENGTH = 50


class Role(str, Enum):
    """Roles recognised by the authorization gate."""

    ADMIN = "admin"
    USER = "user"


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class User(SQLModel, table=True):
    """
    Registered account.

    The role column stores whatever string was supplied at registration;
    only values of Role ever satisfy a role gate.
    """

    __tablename__ = "users"

    id: int | None = Field(default=None, primary_key=True)
    name: str = Field(max_length=NAME_MAX_LENGTH, unique=True, index=True)
    password_hash: str
    role: str = Field(default=Role.USER.value, max_length=50)
    created_at: datetime = Field(default_factory=utcnow)
    updated_at: datetime = Field(default_factory=utcnow)
