"""
Leave Request Service - Leave Routes with RBAC Integration.

Maps HTTP requests onto the leave service:
- Users submit leaves and manage their own pending leaves
- Admins review (approve/reject), list and delete any leave
"""

from typing import Annotated

from fastapi import APIRouter, Depends, Query, status

from app.api.dependencies import LeaveServiceDep
from app.api.errors import raise_service_error
from app.core.logging import get_logger
from app.core.permissions import require_admin, require_user
from app.core.security import CurrentUser, TokenData
from app.schemas.auth import MessageResponse
from app.schemas.leave import (
    LeaveCreate,
    LeaveFilter,
    LeaveListResponse,
    LeavePublic,
    LeaveResponse,
    LeaveSummary,
    LeaveUpdate,
)
from app.services.leave_events import (
    publish_leave_deleted,
    publish_leave_requested,
    publish_leave_updated,
)

logger = get_logger(__name__)

# Create router with prefix and tags for better organization
router = APIRouter(
    prefix="/leaves",
    tags=["leaves"],
    responses={404: {"description": "Leave not found"}},
)


@router.post("", response_model=LeaveResponse, status_code=status.HTTP_201_CREATED)
def create_leave(
    data: LeaveCreate,
    leaves: LeaveServiceDep,
    current_user: Annotated[TokenData, Depends(require_user)],
):
    """
    Submit a new leave request.

    **Access**: role `user`

    **Business Rules**:
    - fromDate, toDate and reason are required; reason is 1-500 characters
    - fromDate must be today or later, toDate on or after fromDate
    - Must not overlap another PENDING/APPROVED leave of the same user
    - Created with status Pending
    """
    logger.info(f"Leave submission by user: {current_user.id}")

    result = leaves.create(current_user, data)
    if result.error:
        raise_service_error(result.error)

    publish_leave_requested(result.leave, current_user)
    return {
        "message": "Leave request submitted successfully",
        "leave": LeavePublic.model_validate(result.leave),
    }


@router.get("", response_model=LeaveListResponse)
def list_leaves(
    leaves: LeaveServiceDep,
    current_user: CurrentUser,
    status: str | None = None,
    owner_id: Annotated[int | None, Query(alias="ownerId")] = None,
    owner_name: Annotated[str | None, Query(alias="ownerName")] = None,
    offset: Annotated[int, Query(ge=0)] = 0,
    limit: Annotated[int, Query(ge=1, le=100)] = 100,
):
    """
    List leave requests, newest first.

    **Access**: any authenticated user

    **Behavior**:
    - Admins: all leaves, optionally filtered by ownerId or exact ownerName
    - Everyone else: only their own leaves (owner filters are ignored)

    **Query Parameters**:
    - status: Pending, Approved or Rejected
    - offset / limit: pagination (limit max 100)
    """
    filters = LeaveFilter(
        status=status,
        owner_id=owner_id,
        owner_name=owner_name,
        offset=offset,
        limit=limit,
    )
    result = leaves.list_leaves(current_user, filters)
    if result.error:
        raise_service_error(result.error)

    return {
        "message": "Leaves retrieved successfully",
        "leaves": [LeavePublic.model_validate(leave) for leave in result.leaves],
        "count": len(result.leaves),
    }


@router.get("/summary", response_model=LeaveSummary)
def get_leave_summary(
    leaves: LeaveServiceDep,
    current_user: Annotated[TokenData, Depends(require_admin)],
):
    """
    Leave counts per status.

    **Access**: role `admin`. Served from Redis when cached.
    """
    logger.info(f"Leave summary requested by admin {current_user.id}")
    return leaves.summary()


@router.get("/{leave_id}", response_model=LeaveResponse)
def get_leave(leave_id: int, leaves: LeaveServiceDep, current_user: CurrentUser):
    """
    Get a specific leave request.

    **Access**: admins for any leave, everyone else for their own leaves
    """
    result = leaves.get(current_user, leave_id)
    if result.error:
        raise_service_error(result.error)

    return {
        "message": "Leave retrieved successfully",
        "leave": LeavePublic.model_validate(result.leave),
    }


@router.put("/{leave_id}", response_model=LeaveResponse)
def update_leave(
    leave_id: int,
    patch: LeaveUpdate,
    leaves: LeaveServiceDep,
    current_user: CurrentUser,
):
    """
    Update a leave request.

    **Access**: any authenticated user

    **Business Rules**:
    - Admins: set status to Approved or Rejected (optionally with
      reviewComments) on a Pending leave
    - Owners: change fromDate, toDate or reason of their own Pending leave
    """
    logger.info(f"User {current_user.id} updating leave {leave_id}")

    result = leaves.update(current_user, leave_id, patch)
    if result.error:
        raise_service_error(result.error)

    publish_leave_updated(result.leave, current_user)
    return {
        "message": "Leave updated successfully",
        "leave": LeavePublic.model_validate(result.leave),
    }


@router.delete("/{leave_id}", response_model=MessageResponse)
def delete_leave(leave_id: int, leaves: LeaveServiceDep, current_user: CurrentUser):
    """
    Delete a leave request.

    **Access**: admins for any leave in any status; owners for their own
    Pending leaves
    """
    logger.info(f"User {current_user.id} deleting leave {leave_id}")

    result = leaves.delete(current_user, leave_id)
    if result.error:
        raise_service_error(result.error)

    publish_leave_deleted(result.deleted, current_user)
    return {"message": "Leave request deleted successfully"}
