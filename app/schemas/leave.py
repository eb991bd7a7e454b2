"""
Leave Pydantic schemas.
Defines request/response models for Leave API endpoints.
Separates API contracts from database models; JSON keys are camelCase.

Request fields are optional: presence, lengths and date rules are
checked once, by the leave service, so that every rule violation is
reported the same way.
"""

from datetime import date, datetime

from pydantic import BaseModel, ConfigDict, TypeAdapter, ValidationError, field_validator
from pydantic.alias_generators import to_camel

from app.models.leave import LeaveStatus

_datetime_adapter = TypeAdapter(datetime)


class CamelModel(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_camel, populate_by_name=True, from_attributes=True
    )


class LeaveDates(CamelModel):
    """
    Calendar date range of a leave.

    Clients may send full timestamps (e.g. "2030-01-05T10:30:00.000Z");
    the time of day is dropped and the date is kept as written.
    """

    from_date: date | None = None
    to_date: date | None = None

    @field_validator("from_date", "to_date", mode="before")
    @classmethod
    def drop_time_of_day(cls, value):
        if isinstance(value, str) and len(value) > 10:
            try:
                value = _datetime_adapter.validate_python(value)
            except ValidationError:
                return value
        if isinstance(value, datetime):
            return value.date()
        return value


class LeaveCreate(LeaveDates):
    """Schema for submitting a leave request. Owner comes from the token."""

    reason: str | None = None


class LeaveUpdate(LeaveDates):
    """
    Schema for patching a leave request.

    Owners send from_date/to_date/reason; admins send status and
    review_comments.
    """

    reason: str | None = None
    status: str | None = None
    review_comments: str | None = None


class LeaveFilter(CamelModel):
    """Query filters for listing leaves."""

    status: str | None = None
    owner_id: int | None = None
    owner_name: str | None = None
    offset: int = 0
    limit: int = 100


class OwnerPublic(CamelModel):
    id: int
    name: str
    role: str


class LeavePublic(CamelModel):
    """
    Schema for leave responses.
    Includes the owner's public account details.
    """

    id: int
    owner: OwnerPublic | None = None
    from_date: date
    to_date: date
    reason: str
    status: LeaveStatus
    review_comments: str | None = None
    applied_at: datetime
    created_at: datetime
    updated_at: datetime


class LeaveResponse(BaseModel):
    message: str
    leave: LeavePublic


class LeaveListResponse(BaseModel):
    message: str
    leaves: list[LeavePublic]
    count: int


class LeaveSummary(BaseModel):
    """
    Schema for leave summary statistics.
    Used by the admin dashboard endpoint.
    """

    total: int = 0
    pending: int = 0
    approved: int = 0
    rejected: int = 0
