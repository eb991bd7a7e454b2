"""
Kafka Topic Definitions for Leave Request Service.

Topic naming follows the pattern: <domain>-<event-type>
"""

from app.core.events import EventType


class KafkaTopics:
    """
    Central registry of all Kafka topics used by the Leave Request Service.
    """

    # Leave Request Events - Owner actions
    LEAVE_REQUESTED = "leave-requested"
    LEAVE_MODIFIED = "leave-modified"
    LEAVE_DELETED = "leave-deleted"

    # Leave Decision Events - Admin actions
    LEAVE_APPROVED = "leave-approved"
    LEAVE_REJECTED = "leave-rejected"

    @classmethod
    def for_event(cls, event_type: EventType) -> str:
        """Return the topic an event type is published to."""
        return {
            EventType.LEAVE_REQUESTED: cls.LEAVE_REQUESTED,
            EventType.LEAVE_MODIFIED: cls.LEAVE_MODIFIED,
            EventType.LEAVE_DELETED: cls.LEAVE_DELETED,
            EventType.LEAVE_APPROVED: cls.LEAVE_APPROVED,
            EventType.LEAVE_REJECTED: cls.LEAVE_REJECTED,
        }[event_type]
