from __future__ import annotations

import threading
from datetime import datetime, timezone

from storebooking.application.ports.appointment_store import AppointmentStorePort
from storebooking.domain.entities.appointment import Appointment, AppointmentPatch
from storebooking.infrastructure.store.constraints import ensure_slot_free, ordered


class MemoryAppointmentStore(AppointmentStorePort):
    def __init__(self) -> None:
        self._appointments: dict[str, Appointment] = {}
        self._lock = threading.Lock()

    def find_by_id(self, appointment_id: str) -> Appointment | None:
        return self._appointments.get(appointment_id)

    def find_by_store_and_date_range(self, store_id: str, start: datetime, end: datetime) -> list[Appointment]:
        return ordered(a for a in self._snapshot() if a.store_id == store_id and start <= a.start_time < end)

    def find_by_client(self, client_id: str) -> list[Appointment]:
        return ordered(a for a in self._snapshot() if a.client_id == client_id)

    def find_by_store(self, store_id: str) -> list[Appointment]:
        return ordered(a for a in self._snapshot() if a.store_id == store_id)

    def insert(self, appointment: Appointment) -> Appointment:
        with self._lock:
            ensure_slot_free(self._appointments.values(), appointment)
            self._appointments[appointment.id] = appointment
        return appointment

    def apply_patch(self, appointment_id: str, patch: AppointmentPatch) -> Appointment | None:
        with self._lock:
            current = self._appointments.get(appointment_id)
            if current is None:
                return None
            updated = current.apply(patch, updated_at=datetime.now(timezone.utc))
            ensure_slot_free(self._appointments.values(), updated)
            self._appointments[appointment_id] = updated
        return updated

    def delete(self, appointment_id: str) -> bool:
        with self._lock:
            return self._appointments.pop(appointment_id, None) is not None

    def _snapshot(self) -> list[Appointment]:
        with self._lock:
            return list(self._appointments.values())
