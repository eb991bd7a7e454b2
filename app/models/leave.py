"""
Leave request table model and status enum.
"""

from datetime import date, datetime
from enum import Enum
from typing import Optional

from sqlmodel import Field, Relationship, SQLModel

from app.models.user import User, utcnow

REASON_MAX_LENGTH = 500
REVIEW_COMMENTS_MAX_LENGTH = 500


class LeaveStatus(str, Enum):
    PENDING = "Pending"
    APPROVED = "Approved"
    REJECTED = "Rejected"


# Statuses that block another request over the same days
ACTIVE_STATUSES = (LeaveStatus.PENDING, LeaveStatus.APPROVED)

# Statuses an admin review may set
REVIEW_STATUSES = (LeaveStatus.APPROVED, LeaveStatus.REJECTED)


class Leave(SQLModel, table=True):
    """A leave request owned by one account."""

    __tablename__ = "leaves"

    id: int | None = Field(default=None, primary_key=True)
    owner_id: int = Field(foreign_key="users.id", index=True)
    from_date: date = Field(index=True)
    to_date: date
    reason: str = Field(max_length=REASON_MAX_LENGTH)
    status: LeaveStatus = Field(default=LeaveStatus.PENDING, index=True)
    review_comments: str | None = Field(
        default=None, max_length=REVIEW_COMMENTS_MAX_LENGTH
    )
    applied_at: datetime = Field(default_factory=utcnow)
    created_at: datetime = Field(default_factory=utcnow)
    updated_at: datetime = Field(default_factory=utcnow)

    owner: Optional[User] = Relationship()
