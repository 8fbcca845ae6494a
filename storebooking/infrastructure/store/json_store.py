from __future__ import annotations

import json
import logging
import threading
from datetime import datetime, timezone
from pathlib import Path
from typing import Any

from storebooking.application.ports.appointment_store import AppointmentStorePort
from storebooking.domain.entities.appointment import Appointment, AppointmentPatch, AppointmentStatus
from storebooking.infrastructure.store.constraints import ensure_slot_free, ordered


class JsonAppointmentStore(AppointmentStorePort):
    """
    Appointments kept in a single JSON document.

    Reads and writes go through one lock; writes land in a temp file that is
    renamed over the original, so readers never see a half-written file.
    """

    def __init__(self, data_dir: str = "./data", file_name: str = "appointments.json") -> None:
        self._data_dir = Path(data_dir)
        self._data_dir.mkdir(parents=True, exist_ok=True)
        self._file_path = self._data_dir / file_name
        self._lock = threading.Lock()
        self._logger = logging.getLogger(__name__)

    def find_by_id(self, appointment_id: str) -> Appointment | None:
        with self._lock:
            return self._load().get(appointment_id)

    def find_by_store_and_date_range(self, store_id: str, start: datetime, end: datetime) -> list[Appointment]:
        with self._lock:
            rows = self._load().values()
        return ordered(a for a in rows if a.store_id == store_id and start <= a.start_time < end)

    def find_by_client(self, client_id: str) -> list[Appointment]:
        with self._lock:
            rows = self._load().values()
        return ordered(a for a in rows if a.client_id == client_id)

    def find_by_store(self, store_id: str) -> list[Appointment]:
        with self._lock:
            rows = self._load().values()
        return ordered(a for a in rows if a.store_id == store_id)

    def insert(self, appointment: Appointment) -> Appointment:
        with self._lock:
            rows = self._load()
            ensure_slot_free(rows.values(), appointment)
            rows[appointment.id] = appointment
            self._save(rows)
        return appointment

    def apply_patch(self, appointment_id: str, patch: AppointmentPatch) -> Appointment | None:
        with self._lock:
            rows = self._load()
            current = rows.get(appointment_id)
            if current is None:
                return None
            updated = current.apply(patch, updated_at=datetime.now(timezone.utc))
            ensure_slot_free(rows.values(), updated)
            rows[appointment_id] = updated
            self._save(rows)
        return updated

    def delete(self, appointment_id: str) -> bool:
        with self._lock:
            rows = self._load()
            if rows.pop(appointment_id, None) is None:
                return False
            self._save(rows)
        return True

    def _load(self) -> dict[str, Appointment]:
        """Load all appointments, empty when the file does not exist yet."""
        if not self._file_path.exists():
            return {}

        try:
            with open(self._file_path, "r", encoding="utf-8") as f:
                data = json.load(f)
        except (json.JSONDecodeError, OSError):
            self._logger.error("Appointment file unreadable", extra={"reason": str(self._file_path)})
            raise

        return {
            row["id"]: self._deserialize(row)
            for row in data.get("appointments", [])
        }

    def _save(self, rows: dict[str, Appointment]) -> None:
        """Save all appointments atomically."""
        temp_path = self._file_path.with_suffix(".json.tmp")
        data = {
            "version": 1,
            "appointments": [self._serialize(a) for a in ordered(rows.values())],
        }

        try:
            with open(temp_path, "w", encoding="utf-8") as f:
                json.dump(data, f, indent=2, ensure_ascii=False)
            temp_path.replace(self._file_path)
        except Exception:
            temp_path.unlink(missing_ok=True)
            raise

    def _serialize(self, appointment: Appointment) -> dict[str, Any]:
        return {
            "id": appointment.id,
            "store_id": appointment.store_id,
            "service_id": appointment.service_id,
            "client_id": appointment.client_id,
            "start_time": appointment.start_time.isoformat(),
            "status": appointment.status.value,
            "notes": appointment.notes,
            "created_at": appointment.created_at.isoformat() if appointment.created_at else None,
            "updated_at": appointment.updated_at.isoformat() if appointment.updated_at else None,
        }

    def _deserialize(self, data: dict[str, Any]) -> Appointment:
        return Appointment(
            id=data["id"],
            store_id=data["store_id"],
            service_id=data["service_id"],
            client_id=data["client_id"],
            start_time=datetime.fromisoformat(data["start_time"]),
            status=AppointmentStatus(data.get("status", AppointmentStatus.PENDING.value)),
            notes=data.get("notes"),
            created_at=_parse_optional(data.get("created_at")),
            updated_at=_parse_optional(data.get("updated_at")),
        )


def _parse_optional(value: str | None) -> datetime | None:
    return datetime.fromisoformat(value) if value else None
