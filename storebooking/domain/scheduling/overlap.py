"""
Overlap detection between a candidate interval and existing appointments.

Intervals are half-open: [start, end). Touching endpoints never conflict.
Each existing appointment spans the duration of its own service.
"""

from __future__ import annotations

from collections.abc import Callable, Iterable
from datetime import datetime

from storebooking.domain.entities.appointment import Appointment, AppointmentStatus
from storebooking.domain.scheduling.timeutil import normalize_instant

DurationLookup = Callable[[str], "int | None"]


def intervals_overlap(
    start_a: datetime,
    end_a: datetime,
    start_b: datetime,
    end_b: datetime,
) -> bool:
    return start_a < end_b and end_a > start_b


def find_conflicts(
    candidate_start: datetime,
    candidate_end: datetime,
    existing_appointments: Iterable[Appointment],
    duration_lookup: DurationLookup,
    exclude_id: str | None = None,
) -> list[Appointment]:
    """
    Appointments that collide with [candidate_start, candidate_end).

    Cancelled appointments and ``exclude_id`` (the appointment being edited)
    are ignored. An appointment whose service can no longer be resolved does
    not block the slot.
    """
    start = normalize_instant(candidate_start)
    end = normalize_instant(candidate_end)

    conflicts: list[Appointment] = []
    for appointment in existing_appointments:
        if appointment.status == AppointmentStatus.CANCELLED:
            continue
        if exclude_id is not None and appointment.id == exclude_id:
            continue

        duration = duration_lookup(appointment.service_id)
        if duration is None:
            continue

        existing_start = normalize_instant(appointment.start_time)
        existing_end = normalize_instant(appointment.end_time(duration))
        if intervals_overlap(start, end, existing_start, existing_end):
            conflicts.append(appointment)

    return conflicts


def overlaps(
    candidate_start: datetime,
    candidate_end: datetime,
    existing_appointments: Iterable[Appointment],
    duration_lookup: DurationLookup,
    exclude_id: str | None = None,
) -> bool:
    return bool(
        find_conflicts(candidate_start, candidate_end, existing_appointments, duration_lookup, exclude_id)
    )
