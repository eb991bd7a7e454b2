"""
Validation rules for leave requests.

Pure functions over dates and strings. Each returns None when the input
is acceptable, or the ServiceError describing the first violation.
The leave service owns the single validation stage; schemas only parse
types and the repositories never re-derive these rules.
"""

from datetime import date

from app.models.leave import REASON_MAX_LENGTH, REVIEW_COMMENTS_MAX_LENGTH
from app.services.results import ErrorCode, ServiceError


def normalize_text(value: str | None) -> str | None:
    """Strip surrounding whitespace; blank strings become None."""
    if value is None:
        return None
    value = value.strip()
    return value or None


def check_required(**fields) -> ServiceError | None:
    """Fail with INVALID_INPUT naming every missing field."""
    missing = [name for name, value in fields.items() if value is None]
    if missing:
        return ServiceError(
            ErrorCode.INVALID_INPUT,
            f"All fields are required: {', '.join(missing)}",
        )
    return None


def check_reason(reason: str) -> ServiceError | None:
    if not 1 <= len(reason) <= REASON_MAX_LENGTH:
        return ServiceError(
            ErrorCode.INVALID_INPUT,
            f"Reason must be between 1 and {REASON_MAX_LENGTH} characters",
        )
    return None


def check_review_comments(comments: str) -> ServiceError | None:
    if len(comments) > REVIEW_COMMENTS_MAX_LENGTH:
        return ServiceError(
            ErrorCode.INVALID_INPUT,
            f"Review comments must be at most {REVIEW_COMMENTS_MAX_LENGTH} characters",
        )
    return None


def check_not_in_past(from_date: date, today: date) -> ServiceError | None:
    """A leave may start today at the earliest."""
    if from_date < today:
        return ServiceError(
            ErrorCode.DATE_RANGE_INVALID,
            "From date must be today or in the future",
        )
    return None


def check_ordering(from_date: date, to_date: date) -> ServiceError | None:
    """Single-day leaves are allowed, so equal dates pass."""
    if to_date < from_date:
        return ServiceError(
            ErrorCode.DATE_RANGE_INVALID,
            "To date must be on or after from date",
        )
    return None


def check_date_range(from_date: date, to_date: date, today: date) -> ServiceError | None:
    return check_not_in_past(from_date, today) or check_ordering(from_date, to_date)


def ranges_overlap(
    first_from: date, first_to: date, second_from: date, second_to: date
) -> bool:
    """Closed-interval intersection: shared boundary days count as overlap."""
    return first_from <= second_to and first_to >= second_from
