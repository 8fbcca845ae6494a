from __future__ import annotations

from datetime import date, datetime, timezone


def truncate_to_minute(value: datetime) -> datetime:
    return value.replace(second=0, microsecond=0)


def normalize_instant(value: datetime) -> datetime:
    """Whole-minute UTC instant, so values from different zones compare by absolute time."""
    if value.tzinfo is not None:
        value = value.astimezone(timezone.utc)
    return truncate_to_minute(value)


def minute_of_day(value: datetime) -> int:
    return value.hour * 60 + value.minute


def day_of_week(value: date) -> int:
    """0 = Sunday ... 6 = Saturday."""
    return (value.weekday() + 1) % 7
