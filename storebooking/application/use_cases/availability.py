from __future__ import annotations

import logging
from datetime import date, tzinfo

from storebooking.application.exceptions import BadRequestError, NotFoundError
from storebooking.application.ports.appointment_store import AppointmentStorePort
from storebooking.application.ports.store_directory import StoreDirectoryPort
from storebooking.application.utils.time_parser import day_bounds, parse_day
from storebooking.domain.entities.service import Service
from storebooking.domain.entities.store import Store
from storebooking.domain.entities.time_slot import TimeSlot
from storebooking.domain.scheduling.overlap import overlaps
from storebooking.domain.scheduling.slots import generate_candidates


class AvailabilityUseCase:
    """Bookable slots for a store/service/date. Read-only, takes no locks."""

    def __init__(
        self,
        directory: StoreDirectoryPort,
        appointments: AppointmentStorePort,
        timezone: tzinfo,
        logger: logging.Logger | None = None,
    ) -> None:
        self._directory = directory
        self._appointments = appointments
        self._timezone = timezone
        self._logger = logger or logging.getLogger(__name__)

    def list_available_slots(self, store_id: str, service_id: str, day: date | str) -> list[TimeSlot]:
        target_day = parse_day(day)
        store, service = self._load_store_and_service(store_id, service_id)

        candidates = generate_candidates(
            store.working_days,
            store.booking_interval_minutes,
            service.duration_minutes,
            target_day,
            self._timezone,
        )
        if not candidates:
            self._logger.info(
                "Store closed on requested day",
                extra={"store_id": store_id, "reason": "closed"},
            )
            return []

        start_of_day, end_of_day = day_bounds(target_day, self._timezone)
        existing = self._appointments.find_by_store_and_date_range(store_id, start_of_day, end_of_day)

        available = [
            slot
            for slot in candidates
            if not overlaps(slot.start_time, slot.end_time, existing, self._directory.get_duration_minutes)
        ]
        self._logger.info(
            "Availability computed",
            extra={"store_id": store_id, "service_id": service_id, "slot_count": len(available)},
        )
        return available

    def _load_store_and_service(self, store_id: str, service_id: str) -> tuple[Store, Service]:
        store = self._directory.get_store(store_id)
        if store is None:
            raise NotFoundError("Store not found")
        service = self._directory.get_service(service_id)
        if service is None:
            raise NotFoundError("Service not found")
        if service.store_id != store.id:
            raise BadRequestError("Service does not belong to the specified store")
        return store, service
