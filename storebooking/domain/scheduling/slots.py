"""
Candidate slot generation.

Candidates start at the day's opening minute and advance by the store's
booking interval; each candidate is exactly one service long and must end
no later than closing time.
"""

from __future__ import annotations

from collections.abc import Iterable
from datetime import date, datetime, time, timedelta, tzinfo

from storebooking.domain.entities.time_slot import TimeSlot
from storebooking.domain.entities.working_day import WorkingDay
from storebooking.domain.scheduling.timeutil import day_of_week, truncate_to_minute
from storebooking.domain.scheduling.working_hours import find_working_day


def generate_candidates(
    working_days: Iterable[WorkingDay],
    booking_interval_minutes: int,
    service_duration_minutes: int,
    day: date,
    tz: tzinfo | None = None,
) -> tuple[TimeSlot, ...]:
    """
    Ordered candidate slots for ``day``.

    Returns an empty tuple when the store is closed that weekday. A tail of
    the open window shorter than the service duration yields no slot.
    """
    if booking_interval_minutes <= 0:
        raise ValueError("booking_interval_minutes must be positive")
    if service_duration_minutes <= 0:
        raise ValueError("service_duration_minutes must be positive")

    working_day = find_working_day(working_days, day_of_week(day))
    if working_day is None or not working_day.is_open:
        return ()
    if working_day.open_minute is None or working_day.close_minute is None:
        return ()

    midnight = truncate_to_minute(datetime.combine(day, time.min, tzinfo=tz))
    slots: list[TimeSlot] = []
    start = working_day.open_minute
    while start + service_duration_minutes <= working_day.close_minute:
        slot_start = midnight + timedelta(minutes=start)
        slot_end = slot_start + timedelta(minutes=service_duration_minutes)
        slots.append(TimeSlot(date=day, start_time=slot_start, end_time=slot_end))
        start += booking_interval_minutes

    return tuple(slots)
