from __future__ import annotations

from dataclasses import dataclass, replace
from datetime import datetime, timedelta
from enum import Enum


class AppointmentStatus(str, Enum):
    PENDING = "pending"
    CONFIRMED = "confirmed"
    COMPLETED = "completed"
    CANCELLED = "cancelled"


# Statuses that hold a slot on the store's calendar.
ACTIVE_STATUSES = frozenset({AppointmentStatus.PENDING, AppointmentStatus.CONFIRMED})


@dataclass(frozen=True)
class Appointment:
    id: str
    store_id: str
    service_id: str
    client_id: str
    start_time: datetime
    status: AppointmentStatus = AppointmentStatus.PENDING
    notes: str | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None

    def end_time(self, duration_minutes: int) -> datetime:
        return self.start_time + timedelta(minutes=duration_minutes)

    @property
    def is_active(self) -> bool:
        return self.status in ACTIVE_STATUSES

    def apply(self, patch: "AppointmentPatch", updated_at: datetime) -> "Appointment":
        changes: dict[str, object] = {"updated_at": updated_at}
        if patch.start_time is not None:
            changes["start_time"] = patch.start_time
        if patch.status is not None:
            changes["status"] = patch.status
        if patch.notes is not None:
            # Empty string clears the note.
            changes["notes"] = patch.notes or None
        return replace(self, **changes)


@dataclass(frozen=True)
class AppointmentPatch:
    start_time: datetime | None = None
    status: AppointmentStatus | None = None
    notes: str | None = None

    @property
    def is_empty(self) -> bool:
        return self.start_time is None and self.status is None and self.notes is None
