from __future__ import annotations

import re
from datetime import date, datetime, time, timedelta, tzinfo

from storebooking.application.exceptions import BadRequestError

DATE_PATTERN = re.compile(r"^\d{4}-\d{2}-\d{2}$")


def to_local(value: datetime, tz: tzinfo) -> datetime:
    """Express ``value`` in the business timezone; naive values are taken as already local."""
    if value.tzinfo is None:
        return value.replace(tzinfo=tz)
    return value.astimezone(tz)


def parse_instant(value: str | datetime, tz: tzinfo, field_name: str = "start_time") -> datetime:
    """Parse an ISO-8601 instant (a trailing ``Z`` is accepted) into business-local time."""
    if isinstance(value, datetime):
        return to_local(value, tz)
    if not value or not str(value).strip():
        raise BadRequestError(f"{field_name} is required")

    text = str(value).strip()
    if text.endswith(("Z", "z")):
        text = text[:-1] + "+00:00"
    try:
        parsed = datetime.fromisoformat(text)
    except ValueError:
        raise BadRequestError(f"Invalid {field_name}. Use an ISO-8601 date-time") from None
    return to_local(parsed, tz)


def parse_day(value: str | date, field_name: str = "date") -> date:
    """Parse a YYYY-MM-DD calendar date."""
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if not value:
        raise BadRequestError(f"{field_name} is required")

    text = str(value).strip()
    if not DATE_PATTERN.match(text):
        raise BadRequestError(f"Invalid {field_name} format. Use YYYY-MM-DD")
    try:
        return date.fromisoformat(text)
    except ValueError:
        raise BadRequestError(f"Invalid {field_name}") from None


def day_bounds(day: date, tz: tzinfo) -> tuple[datetime, datetime]:
    """Local midnight of ``day`` and of the following day."""
    start = datetime.combine(day, time.min, tzinfo=tz)
    end = datetime.combine(day + timedelta(days=1), time.min, tzinfo=tz)
    return start, end
