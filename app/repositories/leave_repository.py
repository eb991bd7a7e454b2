"""
Persistence for leave requests.

Maps leave operations onto SQLModel queries. Business rules live in the
leave service; this module only reads and writes rows.
"""

from sqlmodel import Session, func, select

from app.models.leave import ACTIVE_STATUSES, Leave, LeaveStatus
from app.models.user import User


class LeaveRepository:
    def __init__(self, session: Session) -> None:
        self.session = session

    def get(self, leave_id: int) -> Leave | None:
        return self.session.get(Leave, leave_id)

    def list_leaves(
        self,
        owner_id: int | None = None,
        owner_name: str | None = None,
        status: LeaveStatus | None = None,
        offset: int = 0,
        limit: int = 100,
    ) -> list[Leave]:
        """List leaves newest first, optionally filtered by owner and status."""
        query = select(Leave)
        if owner_id is not None:
            query = query.where(Leave.owner_id == owner_id)
        if owner_name is not None:
            query = query.join(User, User.id == Leave.owner_id).where(
                User.name == owner_name
            )
        if status is not None:
            query = query.where(Leave.status == status)
        query = query.order_by(Leave.created_at.desc(), Leave.id.desc())
        return list(self.session.exec(query.offset(offset).limit(limit)).all())

    def lock_owner(self, owner_id: int) -> User | None:
        """
        Load the owner row with a write lock held until commit/rollback.

        Creates for one owner serialise on this lock, which makes the
        overlap check and the insert that follows it atomic.
        """
        query = select(User).where(User.id == owner_id).with_for_update()
        return self.session.exec(query).first()

    def active_for_owner(self, owner_id: int) -> list[Leave]:
        """PENDING and APPROVED leaves of one owner."""
        query = select(Leave).where(
            Leave.owner_id == owner_id,
            Leave.status.in_(ACTIVE_STATUSES),
        )
        return list(self.session.exec(query).all())

    def add(self, leave: Leave) -> Leave:
        self.session.add(leave)
        self.session.commit()
        self.session.refresh(leave)
        return leave

    def save(self, leave: Leave) -> Leave:
        return self.add(leave)

    def delete(self, leave: Leave) -> None:
        self.session.delete(leave)
        self.session.commit()

    def count_by_status(self) -> dict[LeaveStatus, int]:
        query = select(Leave.status, func.count(Leave.id)).group_by(Leave.status)
        counts = {status: 0 for status in LeaveStatus}
        for status, count in self.session.exec(query).all():
            counts[LeaveStatus(status)] = count
        return counts

    def rollback(self) -> None:
        self.session.rollback()
