"""
Event definitions for Leave Request Service.

Defines the lifecycle events published to Kafka:
- Leave request events (requested, modified, deleted)
- Leave decision events (approved, rejected)
"""

from datetime import date, datetime, timezone
from enum import Enum
from typing import Optional
from uuid import uuid4

from pydantic import BaseModel, Field


class EventType(str, Enum):
    """All event types produced by the Leave Request Service."""

    # Leave Request Events
    LEAVE_REQUESTED = "leave.requested"
    LEAVE_MODIFIED = "leave.modified"
    LEAVE_DELETED = "leave.deleted"

    # Leave Decision Events
    LEAVE_APPROVED = "leave.approved"
    LEAVE_REJECTED = "leave.rejected"


class EventMetadata(BaseModel):
    """Metadata attached to every event for tracing and correlation."""

    source_service: str = "leave-request-service"
    correlation_id: str = Field(default_factory=lambda: str(uuid4()))
    actor_user_id: Optional[int] = None
    actor_role: Optional[str] = None


class EventEnvelope(BaseModel):
    """
    Standard envelope for all events.
    Provides consistent structure for Kafka messages.
    """

    event_id: str = Field(default_factory=lambda: str(uuid4()))
    event_type: EventType
    timestamp: str = Field(
        default_factory=lambda: datetime.now(timezone.utc).isoformat()
    )
    version: str = "1.0"
    data: dict
    metadata: EventMetadata = Field(default_factory=EventMetadata)


# Leave Event Data Models


class LeaveRequestedEvent(BaseModel):
    """Data for leave.requested event."""

    leave_id: int
    owner_id: int
    from_date: date
    to_date: date
    total_days: int
    reason: str


class LeaveModifiedEvent(BaseModel):
    """Data for leave.modified event."""

    leave_id: int
    owner_id: int
    from_date: date
    to_date: date
    total_days: int
    reason: str
    modified_by: int


class LeaveReviewedEvent(BaseModel):
    """Data for leave.approved and leave.rejected events."""

    leave_id: int
    owner_id: int
    from_date: date
    to_date: date
    total_days: int
    status: str
    reviewed_by: int
    review_comments: Optional[str] = None
    review_date: datetime


class LeaveDeletedEvent(BaseModel):
    """Data for leave.deleted event."""

    leave_id: int
    owner_id: int
    from_date: date
    to_date: date
    status: str
    deleted_by: int


# Helper functions for creating events


def create_event(
    event_type: EventType,
    data: BaseModel,
    actor_user_id: Optional[int] = None,
    actor_role: Optional[str] = None,
    correlation_id: Optional[str] = None,
) -> EventEnvelope:
    """
    Helper function to create an event envelope with proper metadata.

    Args:
        event_type: Type of the event
        data: Event data as a Pydantic model
        actor_user_id: ID of the user performing the action
        actor_role: Role of the user performing the action
        correlation_id: Optional correlation ID for tracing

    Returns:
        EventEnvelope ready for publishing
    """
    metadata = EventMetadata(
        actor_user_id=actor_user_id,
        actor_role=actor_role,
        correlation_id=correlation_id or str(uuid4()),
    )

    return EventEnvelope(
        event_type=event_type,
        data=data.model_dump(mode="json"),
        metadata=metadata,
    )


def calculate_leave_days(start_date: date, end_date: date) -> int:
    """
    Calculate the number of leave days between two dates.

    Args:
        start_date: Leave start date
        end_date: Leave end date

    Returns:
        Number of days (inclusive)
    """
    if end_date < start_date:
        return 0
    return (end_date - start_date).days + 1
