from __future__ import annotations

from collections.abc import Iterable
from datetime import datetime

from storebooking.domain.entities.working_day import WorkingDay
from storebooking.domain.scheduling.timeutil import day_of_week, minute_of_day, truncate_to_minute

ALLOWED_BOOKING_INTERVALS = (5, 10, 15, 30, 60)
MINUTES_PER_DAY = 24 * 60


def find_working_day(working_days: Iterable[WorkingDay], weekday: int) -> WorkingDay | None:
    for day in working_days:
        if day.day_of_week == weekday:
            return day
    return None


def is_open_at(working_days: Iterable[WorkingDay], instant: datetime) -> bool:
    """True when ``instant`` (store-local wall time) is inside that weekday's [open, close)."""
    day = find_working_day(working_days, day_of_week(instant))
    if day is None or not day.is_open:
        return False
    if day.open_minute is None or day.close_minute is None:
        return False
    minute = minute_of_day(truncate_to_minute(instant))
    return day.open_minute <= minute < day.close_minute


def validate_working_days(working_days: Iterable[WorkingDay]) -> list[str]:
    """Return the violated rules for a store's weekly table; empty when valid."""
    days = list(working_days)
    errors: list[str] = []
    if len(days) != 7:
        errors.append("Working hours must include all 7 days of the week")
    weekdays = {day.day_of_week for day in days}
    if len(weekdays) != len(days):
        errors.append("Each day of the week must be unique")
    if any(day.day_of_week < 0 or day.day_of_week > 6 for day in days):
        errors.append("Day of week must be between 0 and 6")
    for day in days:
        if not day.is_open:
            continue
        if day.open_minute is None or day.close_minute is None:
            errors.append("Open time and close time are required when store is open")
            continue
        if not 0 <= day.open_minute < day.close_minute <= MINUTES_PER_DAY:
            errors.append(f"Open time must be before close time (day {day.day_of_week})")
    return errors
