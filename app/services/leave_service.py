"""
Leave Request Service - Leave lifecycle engine.

Owns the leave state machine and its authorization rules:

- Users create leaves for themselves. New leaves start PENDING.
- Owners may edit dates/reason and delete while the leave is PENDING.
- Admins review (PENDING -> APPROVED/REJECTED) and may delete any leave.
- A user's PENDING/APPROVED leaves never overlap (checked on create).

Every operation returns a result object; nothing here raises HTTP errors.
"""

from datetime import date, datetime, timezone
from typing import Callable

from sqlalchemy.exc import SQLAlchemyError
from sqlmodel import Session

from app.core.cache import get_leave_summary, invalidate_leave_summary, set_leave_summary
from app.core.logging import get_logger
from app.core.permissions import can_view_leave, is_admin, is_owner, log_authorization_check
from app.core.security import TokenData
from app.models.leave import REVIEW_STATUSES, Leave, LeaveStatus
from app.repositories.leave_repository import LeaveRepository
from app.schemas.leave import LeaveCreate, LeaveFilter, LeaveUpdate
from app.services import leave_rules
from app.services.results import (
    ErrorCode,
    LeaveDeleteResult,
    LeaveListResult,
    LeaveResult,
    ServiceError,
)

logger = get_logger(__name__)


def _not_found(leave_id: int) -> ServiceError:
    return ServiceError(ErrorCode.NOT_FOUND, f"Leave request {leave_id} not found")


def _internal(action: str, exc: Exception) -> ServiceError:
    return ServiceError(ErrorCode.INTERNAL, f"Failed to {action}", detail=str(exc))


class LeaveService:
    """
    Leave request engine bound to one database session.

    Args:
        session: Request-scoped database session
        today: Returns the current local date; injectable for tests
    """

    def __init__(self, session: Session, today: Callable[[], date] = date.today) -> None:
        self.leaves = LeaveRepository(session)
        self.today = today

    # ------------------------------------------------------------------
    # Create
    # ------------------------------------------------------------------

    def create(self, user: TokenData, data: LeaveCreate) -> LeaveResult:
        """Submit a new PENDING leave owned by the caller."""
        reason = leave_rules.normalize_text(data.reason)
        error = leave_rules.check_required(
            fromDate=data.from_date, toDate=data.to_date, reason=reason
        )
        if error:
            return LeaveResult(error=error)

        error = leave_rules.check_reason(reason) or leave_rules.check_date_range(
            data.from_date, data.to_date, self.today()
        )
        if error:
            logger.warning(f"Rejected leave from user {user.id}: {error.message}")
            return LeaveResult(error=error)

        try:
            owner = self.leaves.lock_owner(user.id)
            if owner is None:
                self.leaves.rollback()
                return LeaveResult(
                    error=ServiceError(ErrorCode.NOT_FOUND, "User not found")
                )

            for existing in self.leaves.active_for_owner(user.id):
                if leave_rules.ranges_overlap(
                    existing.from_date, existing.to_date, data.from_date, data.to_date
                ):
                    self.leaves.rollback()
                    logger.warning(
                        f"Leave for user {user.id} overlaps leave {existing.id}"
                    )
                    return LeaveResult(
                        error=ServiceError(
                            ErrorCode.OVERLAP_CONFLICT,
                            "You already have a leave request for this period",
                        )
                    )

            leave = self.leaves.add(
                Leave(
                    owner_id=user.id,
                    from_date=data.from_date,
                    to_date=data.to_date,
                    reason=reason,
                    status=LeaveStatus.PENDING,
                )
            )
        except SQLAlchemyError as e:
            self.leaves.rollback()
            logger.exception(f"Failed to create leave for user {user.id}")
            return LeaveResult(error=_internal("create leave request", e))

        invalidate_leave_summary()
        logger.info(
            f"Leave created: ID={leave.id}, owner={user.id}, "
            f"{leave.from_date}..{leave.to_date}"
        )
        return LeaveResult(leave=leave)

    # ------------------------------------------------------------------
    # Read
    # ------------------------------------------------------------------

    def list_leaves(self, user: TokenData, filters: LeaveFilter) -> LeaveListResult:
        """
        List leaves visible to the caller.

        Admins see every leave and may narrow by owner id or exact owner
        name. Everyone else sees only their own leaves; owner filters are
        ignored for them.
        """
        status = None
        if filters.status:
            try:
                status = LeaveStatus(filters.status)
            except ValueError:
                return LeaveListResult(
                    error=ServiceError(
                        ErrorCode.INVALID_INPUT,
                        f"Invalid status. Must be one of: "
                        f"{', '.join(s.value for s in LeaveStatus)}",
                    )
                )

        if is_admin(user):
            owner_id = filters.owner_id
            owner_name = leave_rules.normalize_text(filters.owner_name)
        else:
            owner_id = user.id
            owner_name = None

        leaves = self.leaves.list_leaves(
            owner_id=owner_id,
            owner_name=owner_name,
            status=status,
            offset=filters.offset,
            limit=filters.limit,
        )
        logger.info(f"Retrieved {len(leaves)} leave(s) for user {user.id}")
        return LeaveListResult(leaves=leaves)

    def get(self, user: TokenData, leave_id: int) -> LeaveResult:
        leave = self.leaves.get(leave_id)
        if leave is None:
            return LeaveResult(error=_not_found(leave_id))

        allowed = can_view_leave(user, leave)
        if not allowed:
            log_authorization_check(user, "view_leave", f"leave:{leave_id}", False)
            return LeaveResult(
                error=ServiceError(
                    ErrorCode.FORBIDDEN,
                    "Access denied. You can only view your own leave requests.",
                )
            )
        return LeaveResult(leave=leave)

    def summary(self) -> dict[str, int]:
        """Leave counts per status, served from cache when available."""
        cached = get_leave_summary()
        if cached is not None:
            return cached

        counts = self.leaves.count_by_status()
        summary = {
            "total": sum(counts.values()),
            "pending": counts[LeaveStatus.PENDING],
            "approved": counts[LeaveStatus.APPROVED],
            "rejected": counts[LeaveStatus.REJECTED],
        }
        set_leave_summary(summary)
        return summary

    # ------------------------------------------------------------------
    # Update
    # ------------------------------------------------------------------

    def update(self, user: TokenData, leave_id: int, patch: LeaveUpdate) -> LeaveResult:
        """
        Apply a patch to a leave.

        Admins may only review: set status to APPROVED or REJECTED, with
        optional comments, on a PENDING leave. Owners may change dates and
        reason of their own PENDING leave; overlap is not re-checked here.
        """
        leave = self.leaves.get(leave_id)
        if leave is None:
            return LeaveResult(error=_not_found(leave_id))

        if is_admin(user):
            error = self._apply_review(leave, patch)
        else:
            error = self._apply_owner_edit(user, leave, patch)
        if error:
            self.leaves.rollback()
            return LeaveResult(error=error)

        leave.updated_at = datetime.now(timezone.utc)
        try:
            leave = self.leaves.save(leave)
        except SQLAlchemyError as e:
            self.leaves.rollback()
            logger.exception(f"Failed to update leave {leave_id}")
            return LeaveResult(error=_internal("update leave request", e))

        invalidate_leave_summary()
        log_authorization_check(user, "update_leave", f"leave:{leave_id}", True)
        logger.info(f"Leave {leave_id} updated by user {user.id} (status={leave.status.value})")
        return LeaveResult(leave=leave)

    def _apply_review(self, leave: Leave, patch: LeaveUpdate) -> ServiceError | None:
        if leave.status != LeaveStatus.PENDING:
            return ServiceError(
                ErrorCode.INVALID_STATE,
                f"Cannot change a leave that is already {leave.status.value}",
            )

        if any(v is not None for v in (patch.from_date, patch.to_date, patch.reason)):
            return ServiceError(
                ErrorCode.INVALID_INPUT,
                "Admin can only change status and review comments",
            )

        if patch.status not in {s.value for s in REVIEW_STATUSES}:
            return ServiceError(
                ErrorCode.INVALID_INPUT, "Admin can only approve or reject leaves"
            )

        comments = leave_rules.normalize_text(patch.review_comments)
        if comments is not None:
            error = leave_rules.check_review_comments(comments)
            if error:
                return error
            leave.review_comments = comments

        leave.status = LeaveStatus(patch.status)
        return None

    def _apply_owner_edit(
        self, user: TokenData, leave: Leave, patch: LeaveUpdate
    ) -> ServiceError | None:
        if not is_owner(user, leave):
            log_authorization_check(user, "update_leave", f"leave:{leave.id}", False)
            return ServiceError(
                ErrorCode.FORBIDDEN,
                "Access denied. You can only edit your own leave requests.",
            )

        if leave.status != LeaveStatus.PENDING:
            return ServiceError(
                ErrorCode.INVALID_STATE, "You can only edit pending leave requests"
            )

        if patch.status is not None or patch.review_comments is not None:
            return ServiceError(
                ErrorCode.FORBIDDEN,
                "Only an admin can change status or review comments",
            )

        from_date = patch.from_date or leave.from_date
        to_date = patch.to_date or leave.to_date

        if patch.from_date is not None:
            error = leave_rules.check_not_in_past(patch.from_date, self.today())
            if error:
                return error
        error = leave_rules.check_ordering(from_date, to_date)
        if error:
            return error

        if patch.reason is not None:
            reason = leave_rules.normalize_text(patch.reason)
            error = leave_rules.check_reason(reason or "")
            if error:
                return error
            leave.reason = reason

        leave.from_date = from_date
        leave.to_date = to_date
        return None

    # ------------------------------------------------------------------
    # Delete
    # ------------------------------------------------------------------

    def delete(self, user: TokenData, leave_id: int) -> LeaveDeleteResult:
        leave = self.leaves.get(leave_id)
        if leave is None:
            return LeaveDeleteResult(error=_not_found(leave_id))

        if not is_admin(user):
            if not is_owner(user, leave):
                log_authorization_check(user, "delete_leave", f"leave:{leave_id}", False)
                return LeaveDeleteResult(
                    error=ServiceError(
                        ErrorCode.FORBIDDEN,
                        "Access denied. You can only delete your own leave requests.",
                    )
                )
            if leave.status != LeaveStatus.PENDING:
                return LeaveDeleteResult(
                    error=ServiceError(
                        ErrorCode.INVALID_STATE,
                        "You can only delete pending leave requests",
                    )
                )

        deleted = leave.model_dump()
        try:
            self.leaves.delete(leave)
        except SQLAlchemyError as e:
            self.leaves.rollback()
            logger.exception(f"Failed to delete leave {leave_id}")
            return LeaveDeleteResult(error=_internal("delete leave request", e))

        invalidate_leave_summary()
        log_authorization_check(user, "delete_leave", f"leave:{leave_id}", True)
        logger.info(f"Leave {leave_id} deleted by user {user.id}")
        return LeaveDeleteResult(deleted=deleted)
