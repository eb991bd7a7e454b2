"""
Leave Request Service - RBAC Permissions Module.

Defines role-based access control logic for leave operations.

Roles:
- admin: Full access. Reviews (approves/rejects) and deletes any leave.
- user: Submits leaves and manages their own PENDING leaves.

Any other stored role authenticates but never passes a role gate and is
treated as a non-admin by the ownership rules below.
"""

from app.core.logging import get_logger
from app.core.security import TokenData, require_role
from app.models.leave import Leave
from app.models.user import Role

logger = get_logger(__name__)

# Route-level gates
require_admin = require_role(Role.ADMIN)
require_user = require_role(Role.USER)


def is_admin(user: TokenData) -> bool:
    """
    Check if user is an administrator.

    Args:
        user: Authenticated user token data

    Returns:
        True if user has the admin role
    """
    return user.is_admin


def is_owner(user: TokenData, leave: Leave) -> bool:
    """Check if the leave belongs to the user."""
    return leave.owner_id == user.id


def can_view_leave(user: TokenData, leave: Leave) -> bool:
    """
    Check if user can view a specific leave record.

    Rules:
    - Admins can view any leave
    - Everyone else can only view their own leaves
    """
    return is_admin(user) or is_owner(user, leave)


def log_authorization_check(
    user: TokenData, action: str, resource: str, allowed: bool
) -> None:
    """
    Log authorization check results for audit purposes.

    Args:
        user: Authenticated user token data
        action: Action being performed (e.g., "update_leave", "view_leave")
        resource: Resource being accessed (e.g., "leave:123")
        allowed: Whether access was allowed
    """
    status_str = "ALLOWED" if allowed else "DENIED"
    message = (
        f"Authorization {status_str}: user={user.id}, role={user.role}, "
        f"action={action}, resource={resource}"
    )
    if allowed:
        logger.info(message)
    else:
        logger.warning(message)
