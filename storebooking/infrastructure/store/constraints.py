from __future__ import annotations

from collections.abc import Iterable

from storebooking.application.exceptions import SlotAlreadyBookedError
from storebooking.domain.entities.appointment import Appointment
from storebooking.domain.scheduling.timeutil import normalize_instant


def ordered(appointments: Iterable[Appointment]) -> list[Appointment]:
    return sorted(appointments, key=lambda a: normalize_instant(a.start_time))


def ensure_slot_free(existing: Iterable[Appointment], candidate: Appointment) -> None:
    """Unique (store_id, start minute) among Pending/Confirmed rows."""
    if not candidate.is_active:
        return
    key = normalize_instant(candidate.start_time)
    for other in existing:
        if other.id == candidate.id or other.store_id != candidate.store_id or not other.is_active:
            continue
        if normalize_instant(other.start_time) == key:
            raise SlotAlreadyBookedError(f"Slot {key.isoformat()} already booked for store {candidate.store_id}")
