"""
Tests for the leave lifecycle engine.

Runs the service against a real SQLite database with a fixed "today".
"""

import threading
from datetime import date, timedelta

import pytest
from sqlmodel import Session

from app.core.security import TokenData
from app.models.leave import Leave, LeaveStatus
from app.schemas.leave import LeaveCreate, LeaveFilter, LeaveUpdate
from app.services.leave_service import LeaveService
from app.services.results import ErrorCode
from tests.conftest import identity

pytestmark = pytest.mark.unit

TODAY = date(2030, 6, 15)


def day(n: int) -> date:
    return TODAY + timedelta(days=n)


@pytest.fixture
def service(session):
    return LeaveService(session, today=lambda: TODAY)


@pytest.fixture
def alice(make_user):
    return identity(make_user("alice"))


@pytest.fixture
def bob(make_user):
    return identity(make_user("bob"))


@pytest.fixture
def admin(make_user):
    return identity(make_user("root", role="admin"))


def _create(service, user, start, end, reason="Family trip"):
    return service.create(user, LeaveCreate(from_date=day(start), to_date=day(end), reason=reason))


# Create


def test_create_starts_pending_and_belongs_to_caller(service, alice):
    result = _create(service, alice, 10, 12)

    assert result.error is None
    assert result.leave.status == LeaveStatus.PENDING
    assert result.leave.owner_id == alice.id
    assert result.leave.reason == "Family trip"


def test_create_trims_reason(service, alice):
    result = _create(service, alice, 1, 1, reason="  dentist  ")

    assert result.leave.reason == "dentist"


def test_create_requires_all_fields(service, alice):
    result = service.create(alice, LeaveCreate(from_date=day(1)))

    assert result.error.code == ErrorCode.INVALID_INPUT
    assert "toDate" in result.error.message


def test_create_blank_reason_is_missing(service, alice):
    result = _create(service, alice, 1, 2, reason="   ")

    assert result.error.code == ErrorCode.INVALID_INPUT


def test_create_allows_today_rejects_yesterday(service, alice):
    assert _create(service, alice, 0, 0).error is None
    assert _create(service, alice, -1, 3).error.code == ErrorCode.DATE_RANGE_INVALID


def test_create_rejects_reversed_range(service, alice):
    result = _create(service, alice, 3, 2)

    assert result.error.code == ErrorCode.DATE_RANGE_INVALID


def test_create_reason_length_limit(service, alice):
    assert _create(service, alice, 1, 1, reason="x" * 500).error is None
    assert _create(service, alice, 5, 5, reason="x" * 501).error.code == ErrorCode.INVALID_INPUT


def test_create_rejects_overlap_with_pending(service, alice):
    _create(service, alice, 10, 12)

    result = _create(service, alice, 12, 14)

    assert result.error.code == ErrorCode.OVERLAP_CONFLICT


def test_create_rejects_overlap_with_approved(service, alice, admin):
    leave = _create(service, alice, 10, 12).leave
    service.update(admin, leave.id, LeaveUpdate(status="Approved"))

    result = _create(service, alice, 11, 11)

    assert result.error.code == ErrorCode.OVERLAP_CONFLICT


def test_rejected_leave_does_not_block_new_leave(service, alice, admin):
    leave = _create(service, alice, 10, 12).leave
    service.update(admin, leave.id, LeaveUpdate(status="Rejected"))

    assert _create(service, alice, 10, 12).error is None


def test_overlap_is_per_owner(service, alice, bob):
    _create(service, alice, 10, 12)

    assert _create(service, bob, 10, 12).error is None


def test_adjacent_ranges_do_not_overlap(service, alice):
    _create(service, alice, 10, 12)

    assert _create(service, alice, 13, 14).error is None


def test_create_for_unknown_account(service):
    result = _create(service, TokenData(id=999, role="user"), 1, 2)

    assert result.error.code == ErrorCode.NOT_FOUND


def test_concurrent_overlapping_creates_admit_one(engine, make_user):
    owner = identity(make_user("racer"))
    attempts = 5
    barrier = threading.Barrier(attempts)
    codes = []
    lock = threading.Lock()

    def submit():
        with Session(engine) as session:
            service = LeaveService(session, today=lambda: TODAY)
            barrier.wait()
            result = _create(service, owner, 1, 3)
        with lock:
            codes.append(result.error.code if result.error else None)

    threads = [threading.Thread(target=submit) for _ in range(attempts)]
    for thread in threads:
        thread.start()
    for thread in threads:
        thread.join()

    assert codes.count(None) == 1
    assert codes.count(ErrorCode.OVERLAP_CONFLICT) == attempts - 1


# Read


def test_list_is_scoped_to_owner_for_users(service, alice, bob):
    _create(service, alice, 1, 1)
    _create(service, bob, 2, 2)

    result = service.list_leaves(alice, LeaveFilter(owner_id=bob.id))

    assert [leave.owner_id for leave in result.leaves] == [alice.id]


def test_admin_lists_everything_and_filters(service, alice, bob, admin):
    _create(service, alice, 1, 1)
    _create(service, bob, 2, 2)

    assert len(service.list_leaves(admin, LeaveFilter()).leaves) == 2
    by_id = service.list_leaves(admin, LeaveFilter(owner_id=bob.id)).leaves
    assert [leave.owner_id for leave in by_id] == [bob.id]
    by_name = service.list_leaves(admin, LeaveFilter(owner_name="alice")).leaves
    assert [leave.owner_id for leave in by_name] == [alice.id]


def test_list_newest_first_with_status_filter(service, alice, admin):
    first = _create(service, alice, 1, 1).leave
    second = _create(service, alice, 2, 2).leave
    service.update(admin, first.id, LeaveUpdate(status="Approved"))

    all_ids = [leave.id for leave in service.list_leaves(alice, LeaveFilter()).leaves]
    pending = service.list_leaves(alice, LeaveFilter(status="Pending")).leaves

    assert all_ids == [second.id, first.id]
    assert [leave.id for leave in pending] == [second.id]


def test_list_rejects_unknown_status(service, alice):
    result = service.list_leaves(alice, LeaveFilter(status="Cancelled"))

    assert result.error.code == ErrorCode.INVALID_INPUT


def test_get_enforces_ownership(service, alice, bob, admin):
    leave = _create(service, alice, 1, 1).leave

    assert service.get(alice, leave.id).leave.id == leave.id
    assert service.get(admin, leave.id).leave.id == leave.id
    assert service.get(bob, leave.id).error.code == ErrorCode.FORBIDDEN
    assert service.get(alice, 12345).error.code == ErrorCode.NOT_FOUND


def test_summary_counts_by_status(service, alice, admin):
    first = _create(service, alice, 1, 1).leave
    second = _create(service, alice, 2, 2).leave
    _create(service, alice, 3, 3)
    service.update(admin, first.id, LeaveUpdate(status="Approved"))
    service.update(admin, second.id, LeaveUpdate(status="Rejected"))

    assert service.summary() == {"total": 3, "pending": 1, "approved": 1, "rejected": 1}


# Update


def test_admin_approves_with_comments(service, alice, admin):
    leave = _create(service, alice, 1, 2).leave

    result = service.update(
        admin, leave.id, LeaveUpdate(status="Approved", review_comments=" Enjoy ")
    )

    assert result.leave.status == LeaveStatus.APPROVED
    assert result.leave.review_comments == "Enjoy"


def test_admin_cannot_review_twice(service, alice, admin):
    leave = _create(service, alice, 1, 2).leave
    service.update(admin, leave.id, LeaveUpdate(status="Approved"))

    result = service.update(admin, leave.id, LeaveUpdate(status="Rejected"))

    assert result.error.code == ErrorCode.INVALID_STATE


def test_admin_cannot_amend_comments_after_review(service, alice, admin):
    leave = _create(service, alice, 1, 2).leave
    service.update(admin, leave.id, LeaveUpdate(status="Approved", review_comments="ok"))

    result = service.update(
        admin, leave.id, LeaveUpdate(status="Approved", review_comments="changed")
    )

    assert result.error.code == ErrorCode.INVALID_STATE
    assert service.get(admin, leave.id).leave.review_comments == "ok"


@pytest.mark.parametrize("status", ["Pending", "Cancelled", None])
def test_admin_status_must_be_a_review_outcome(service, alice, admin, status):
    leave = _create(service, alice, 1, 2).leave

    result = service.update(admin, leave.id, LeaveUpdate(status=status))

    assert result.error.code == ErrorCode.INVALID_INPUT
    assert service.get(admin, leave.id).leave.status == LeaveStatus.PENDING


def test_admin_cannot_edit_dates(service, alice, admin):
    leave = _create(service, alice, 1, 2).leave

    result = service.update(admin, leave.id, LeaveUpdate(status="Approved", to_date=day(5)))

    assert result.error.code == ErrorCode.INVALID_INPUT


def test_owner_edits_pending_leave(service, alice):
    leave = _create(service, alice, 1, 2).leave

    result = service.update(alice, leave.id, LeaveUpdate(to_date=day(4), reason="Longer trip"))

    assert result.error is None
    assert result.leave.to_date == day(4)
    assert result.leave.reason == "Longer trip"
    assert result.leave.status == LeaveStatus.PENDING


def test_owner_edit_checks_dates(service, alice):
    leave = _create(service, alice, 3, 5).leave

    assert service.update(alice, leave.id, LeaveUpdate(to_date=day(2))).error.code == (
        ErrorCode.DATE_RANGE_INVALID
    )
    assert service.update(alice, leave.id, LeaveUpdate(from_date=day(-1))).error.code == (
        ErrorCode.DATE_RANGE_INVALID
    )


def test_owner_cannot_set_status(service, alice):
    leave = _create(service, alice, 1, 2).leave

    result = service.update(alice, leave.id, LeaveUpdate(status="Approved"))

    assert result.error.code == ErrorCode.FORBIDDEN
    assert service.get(alice, leave.id).leave.status == LeaveStatus.PENDING


def test_other_user_cannot_edit(service, alice, bob):
    leave = _create(service, alice, 1, 2).leave

    result = service.update(bob, leave.id, LeaveUpdate(reason="mine now"))

    assert result.error.code == ErrorCode.FORBIDDEN


def test_owner_cannot_edit_reviewed_leave(service, alice, admin):
    leave = _create(service, alice, 1, 2).leave
    service.update(admin, leave.id, LeaveUpdate(status="Rejected"))

    result = service.update(alice, leave.id, LeaveUpdate(reason="please"))

    assert result.error.code == ErrorCode.INVALID_STATE


def test_update_missing_leave(service, alice):
    assert service.update(alice, 404, LeaveUpdate(reason="x")).error.code == ErrorCode.NOT_FOUND


# Delete


def test_owner_deletes_pending_leave(service, session, alice):
    leave = _create(service, alice, 1, 2).leave
    leave_id = leave.id

    result = service.delete(alice, leave_id)

    assert result.error is None
    assert result.deleted["id"] == leave_id
    assert session.get(Leave, leave_id) is None


def test_owner_cannot_delete_reviewed_leave(service, alice, admin):
    leave = _create(service, alice, 1, 2).leave
    service.update(admin, leave.id, LeaveUpdate(status="Approved"))

    assert service.delete(alice, leave.id).error.code == ErrorCode.INVALID_STATE


def test_admin_deletes_any_leave(service, alice, admin):
    leave = _create(service, alice, 1, 2).leave
    service.update(admin, leave.id, LeaveUpdate(status="Approved"))

    assert service.delete(admin, leave.id).error is None


def test_other_user_cannot_delete(service, alice, bob):
    leave = _create(service, alice, 1, 2).leave

    assert service.delete(bob, leave.id).error.code == ErrorCode.FORBIDDEN
    assert service.delete(bob, 9999).error.code == ErrorCode.NOT_FOUND
