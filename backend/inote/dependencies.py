"""
iNote Backend - Route Dependencies
==================================

What:  FastAPI dependencies that hand route handlers the application-scoped
       services and parse path/query values the handlers share.
How:   Services live on `app.state`, placed there by `create_app()`.
"""

from datetime import date, datetime, time, timezone
from typing import Tuple

from fastapi import Query, Request

from inote.exceptions import ValidationError
from inote.models.user import Role
from inote.services import NoteService, UserService


def get_note_service(request: Request) -> NoteService:
    return request.app.state.note_service


def get_user_service(request: Request) -> UserService:
    return request.app.state.user_service


# ── Parameter Parsing ─────────────────────────────────────────────────────
# Bad values raise ValidationError (400) rather than FastAPI's 422.

def parse_role(value: str) -> Role:
    try:
        return Role.parse(value)
    except ValueError as e:
        raise ValidationError(message=str(e), field="role") from e


# Extended ISO-8601 only: a time part is required, seconds and fraction optional
_DATETIME_FORMATS = (
    "%Y-%m-%dT%H:%M",
    "%Y-%m-%dT%H:%M%z",
    "%Y-%m-%dT%H:%M:%S",
    "%Y-%m-%dT%H:%M:%S%z",
    "%Y-%m-%dT%H:%M:%S.%f",
    "%Y-%m-%dT%H:%M:%S.%f%z",
)


def parse_datetime(value: str, field: str = "date") -> datetime:
    """
    Parse an ISO-8601 date-time such as 2024-01-15T09:30:00 into naive UTC.

    Date-only and compact (20240115T093000) forms are rejected. Offsets are
    converted to UTC; values without an offset are taken as UTC.
    """
    for fmt in _DATETIME_FORMATS:
        try:
            parsed = datetime.strptime(value, fmt)
        except ValueError:
            continue
        if parsed.tzinfo is not None:
            parsed = parsed.astimezone(timezone.utc).replace(tzinfo=None)
        return parsed

    raise ValidationError(
        message=f"'{value}' is not a valid ISO-8601 date-time (expected YYYY-MM-DDTHH:MM:SS)",
        field=field,
    )


def parse_date(value: str, field: str) -> date:
    try:
        return datetime.strptime(value, "%Y-%m-%d").date()
    except ValueError as e:
        raise ValidationError(
            message=f"'{value}' is not a valid date (expected YYYY-MM-DD)",
            field=field,
        ) from e


def created_between_range(
    start_date: str = Query(alias="startDate", description="First day, YYYY-MM-DD"),
    end_date: str = Query(alias="endDate", description="Last day, YYYY-MM-DD"),
) -> Tuple[datetime, datetime]:
    """
    Expand a day range to [start 00:00:00, end 23:59:59].

    Raises:
        ValidationError: unparseable date or start after end
    """
    start = parse_date(start_date, "startDate")
    end = parse_date(end_date, "endDate")
    if start > end:
        raise ValidationError(
            message=f"startDate {start} is after endDate {end}",
            field="startDate",
        )
    return datetime.combine(start, time.min), datetime.combine(end, time(23, 59, 59))
