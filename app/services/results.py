"""
Result types returned by the service layer.

Services never raise across the HTTP boundary. Each operation returns a
result holding either its value or a ServiceError, and the routers map
the error code to an HTTP status (see app.api.errors).

Contract for every result:
- error is None  => the value field is populated (success)
- error set      => the value field is None / empty (failure)
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, List

from app.models.leave import Leave
from app.models.user import User


class ErrorCode(str, Enum):
    """Stable failure categories shared by all services."""

    INVALID_INPUT = "INVALID_INPUT"
    DATE_RANGE_INVALID = "DATE_RANGE_INVALID"
    OVERLAP_CONFLICT = "OVERLAP_CONFLICT"
    INVALID_STATE = "INVALID_STATE"
    UNAUTHORIZED = "UNAUTHORIZED"
    FORBIDDEN = "FORBIDDEN"
    NOT_FOUND = "NOT_FOUND"
    CONFLICT = "CONFLICT"
    INTERNAL = "INTERNAL"


@dataclass(frozen=True)
class ServiceError:
    """
    A typed failure.

    Fields:
      - code: stable category (ErrorCode)
      - message: human readable description, safe to return to clients
      - detail: underlying error text for INTERNAL failures (diagnostics)
    """

    code: ErrorCode
    message: str
    detail: str | None = None


@dataclass
class LeaveResult:
    """Result of operations returning a single leave."""

    leave: Leave | None = None
    error: ServiceError | None = None


@dataclass
class LeaveListResult:
    """Result of list operations. Always a list, possibly empty."""

    leaves: List[Leave] = field(default_factory=list)
    error: ServiceError | None = None


@dataclass
class LeaveDeleteResult:
    """Carries the column values of the removed leave on success."""

    deleted: dict[str, Any] | None = None
    error: ServiceError | None = None


@dataclass
class AccountResult:
    account: User | None = None
    error: ServiceError | None = None


@dataclass
class LoginResult:
    account: User | None = None
    token: str | None = None
    error: ServiceError | None = None
