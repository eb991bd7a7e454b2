"""
Leave lifecycle event publishing.

Builds event payloads from leave records and hands them to Kafka.
publish_event logs and swallows failures, so an event that cannot be
published never fails the request that produced it.
"""

from datetime import datetime, timezone
from typing import Any

from app.core.events import (
    EventType,
    LeaveDeletedEvent,
    LeaveModifiedEvent,
    LeaveRequestedEvent,
    LeaveReviewedEvent,
    calculate_leave_days,
    create_event,
)
from app.core.kafka import publish_event
from app.core.security import TokenData
from app.models.leave import Leave, LeaveStatus


def _publish(event_type: EventType, data, user: TokenData) -> bool:
    event = create_event(event_type, data, actor_user_id=user.id, actor_role=user.role)
    return publish_event(event)


def publish_leave_requested(leave: Leave, user: TokenData) -> bool:
    data = LeaveRequestedEvent(
        leave_id=leave.id,
        owner_id=leave.owner_id,
        from_date=leave.from_date,
        to_date=leave.to_date,
        total_days=calculate_leave_days(leave.from_date, leave.to_date),
        reason=leave.reason,
    )
    return _publish(EventType.LEAVE_REQUESTED, data, user)


def publish_leave_updated(leave: Leave, user: TokenData) -> bool:
    """Reviews publish approved/rejected; owner edits publish modified."""
    total_days = calculate_leave_days(leave.from_date, leave.to_date)

    if user.is_admin and leave.status in (LeaveStatus.APPROVED, LeaveStatus.REJECTED):
        event_type = (
            EventType.LEAVE_APPROVED
            if leave.status == LeaveStatus.APPROVED
            else EventType.LEAVE_REJECTED
        )
        data = LeaveReviewedEvent(
            leave_id=leave.id,
            owner_id=leave.owner_id,
            from_date=leave.from_date,
            to_date=leave.to_date,
            total_days=total_days,
            status=leave.status.value,
            reviewed_by=user.id,
            review_comments=leave.review_comments,
            review_date=datetime.now(timezone.utc),
        )
        return _publish(event_type, data, user)

    data = LeaveModifiedEvent(
        leave_id=leave.id,
        owner_id=leave.owner_id,
        from_date=leave.from_date,
        to_date=leave.to_date,
        total_days=total_days,
        reason=leave.reason,
        modified_by=user.id,
    )
    return _publish(EventType.LEAVE_MODIFIED, data, user)


def publish_leave_deleted(deleted: dict[str, Any], user: TokenData) -> bool:
    status = deleted["status"]
    data = LeaveDeletedEvent(
        leave_id=deleted["id"],
        owner_id=deleted["owner_id"],
        from_date=deleted["from_date"],
        to_date=deleted["to_date"],
        status=status.value if isinstance(status, LeaveStatus) else str(status),
        deleted_by=user.id,
    )
    return _publish(EventType.LEAVE_DELETED, data, user)
