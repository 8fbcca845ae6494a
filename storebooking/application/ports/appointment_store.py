from __future__ import annotations

from abc import ABC, abstractmethod
from datetime import datetime

from storebooking.domain.entities.appointment import Appointment, AppointmentPatch


class AppointmentStorePort(ABC):
    @abstractmethod
    def find_by_id(self, appointment_id: str) -> Appointment | None:
        raise NotImplementedError

    @abstractmethod
    def find_by_store_and_date_range(self, store_id: str, start: datetime, end: datetime) -> list[Appointment]:
        """Appointments of ``store_id`` starting in [start, end), ordered by start time."""
        raise NotImplementedError

    @abstractmethod
    def find_by_client(self, client_id: str) -> list[Appointment]:
        raise NotImplementedError

    @abstractmethod
    def find_by_store(self, store_id: str) -> list[Appointment]:
        raise NotImplementedError

    @abstractmethod
    def insert(self, appointment: Appointment) -> Appointment:
        """
        Persist a new appointment.

        Raises SlotAlreadyBookedError when another Pending/Confirmed
        appointment of the same store starts at the same minute.
        """
        raise NotImplementedError

    @abstractmethod
    def apply_patch(self, appointment_id: str, patch: AppointmentPatch) -> Appointment | None:
        """
        Apply ``patch`` and return the stored result, or None when absent.

        Raises SlotAlreadyBookedError under the same rule as ``insert``.
        """
        raise NotImplementedError

    @abstractmethod
    def delete(self, appointment_id: str) -> bool:
        raise NotImplementedError
