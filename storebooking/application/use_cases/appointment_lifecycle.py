from __future__ import annotations

import logging
import uuid
from collections.abc import Callable
from datetime import datetime, timedelta, tzinfo

from storebooking.application.exceptions import (
    BadRequestError,
    ConflictError,
    ForbiddenError,
    NotFoundError,
    SlotAlreadyBookedError,
)
from storebooking.application.ports.appointment_store import AppointmentStorePort
from storebooking.application.ports.store_directory import StoreDirectoryPort
from storebooking.application.use_cases.authorization import (
    can_delete,
    can_modify,
    require_read,
    require_store_operator,
)
from storebooking.application.utils.locks import StoreLockRegistry
from storebooking.application.utils.time_parser import day_bounds, parse_instant, to_local
from storebooking.domain.entities.appointment import Appointment, AppointmentPatch, AppointmentStatus
from storebooking.domain.entities.auth_context import AuthorizationContext
from storebooking.domain.entities.service import Service
from storebooking.domain.entities.store import Store
from storebooking.domain.scheduling.overlap import find_conflicts
from storebooking.domain.scheduling.timeutil import truncate_to_minute
from storebooking.domain.scheduling.transitions import can_transition, is_terminal
from storebooking.domain.scheduling.working_hours import is_open_at

CONFLICT_MESSAGE = "Appointment time conflicts with existing appointments"


class AppointmentLifecycleUseCase:
    """
    Create, update, cancel and delete bookings.

    Every mutation runs inside the per-store critical section, so the
    conflict check and the write that follows it are atomic for that store.
    Appointment stores also reject a second active row at the same start
    minute; that rejection surfaces as ConflictError.
    """

    def __init__(
        self,
        directory: StoreDirectoryPort,
        appointments: AppointmentStorePort,
        timezone: tzinfo,
        locks: StoreLockRegistry | None = None,
        clock: Callable[[], datetime] | None = None,
        notes_max_length: int = 500,
        logger: logging.Logger | None = None,
    ) -> None:
        self._directory = directory
        self._appointments = appointments
        self._timezone = timezone
        self._locks = locks or StoreLockRegistry()
        self._clock = clock or (lambda: datetime.now(timezone))
        self._notes_max_length = notes_max_length
        self._logger = logger or logging.getLogger(__name__)

    # ------------------------------------------------------------------
    # Mutations
    # ------------------------------------------------------------------

    def create(
        self,
        store_id: str,
        service_id: str,
        client_id: str,
        start_time: str | datetime,
        notes: str | None = None,
    ) -> Appointment:
        store, service = self._load_store_and_service(store_id, service_id)
        start = truncate_to_minute(parse_instant(start_time, self._timezone))
        self._validate_notes(notes)

        with self._locks.hold(store.id):
            self._validate_slot(store, service, start)
            now = self._clock()
            appointment = Appointment(
                id=str(uuid.uuid4()),
                store_id=store.id,
                service_id=service.id,
                client_id=client_id,
                start_time=start,
                status=AppointmentStatus.PENDING,
                notes=notes or None,
                created_at=now,
                updated_at=now,
            )
            try:
                saved = self._appointments.insert(appointment)
            except SlotAlreadyBookedError as e:
                self._logger.warning(
                    "Storage rejected duplicate slot",
                    extra={"store_id": store.id, "reason": "unique_slot"},
                )
                raise ConflictError(CONFLICT_MESSAGE) from e

        self._logger.info(
            "Appointment created",
            extra={"appointment_id": saved.id, "store_id": saved.store_id, "status": saved.status.value},
        )
        return saved

    def update(self, appointment_id: str, patch: AppointmentPatch, ctx: AuthorizationContext) -> Appointment:
        store_id = self._get_appointment(appointment_id).store_id

        with self._locks.hold(store_id):
            appointment = self._get_appointment(appointment_id)
            if not can_modify(ctx, appointment):
                raise ForbiddenError("You can only update your own appointments")
            if appointment.status == AppointmentStatus.CANCELLED:
                raise BadRequestError("Cannot update a cancelled appointment")
            self._validate_notes(patch.notes)

            is_operator = ctx.operates_store(appointment.store_id)
            status = self._resolve_status_change(appointment, patch.status, is_operator)

            start = None
            if patch.start_time is not None:
                start = truncate_to_minute(to_local(patch.start_time, self._timezone))
                if not is_operator:
                    store, service = self._load_store_and_service(appointment.store_id, appointment.service_id)
                    self._validate_slot(store, service, start, exclude_id=appointment.id)

            effective = AppointmentPatch(start_time=start, status=status, notes=patch.notes)
            if effective.is_empty:
                return appointment

            try:
                updated = self._appointments.apply_patch(appointment.id, effective)
            except SlotAlreadyBookedError as e:
                raise ConflictError(CONFLICT_MESSAGE) from e
            if updated is None:
                raise NotFoundError("Appointment not found")

        self._logger.info(
            "Appointment updated",
            extra={"appointment_id": updated.id, "store_id": updated.store_id, "status": updated.status.value},
        )
        return updated

    def cancel(self, appointment_id: str, ctx: AuthorizationContext) -> Appointment:
        store_id = self._get_appointment(appointment_id).store_id

        with self._locks.hold(store_id):
            appointment = self._get_appointment(appointment_id)
            if not can_modify(ctx, appointment):
                raise ForbiddenError("You can only cancel your own appointments")
            if appointment.status == AppointmentStatus.CANCELLED:
                raise BadRequestError("Appointment is already cancelled")
            if appointment.status == AppointmentStatus.CONFIRMED:
                # Confirmed bookings are released by the store operator through update.
                raise BadRequestError("Cannot cancel a confirmed appointment")
            if is_terminal(appointment.status):
                raise BadRequestError(f"Cannot cancel a {appointment.status.value} appointment")

            updated = self._appointments.apply_patch(
                appointment.id, AppointmentPatch(status=AppointmentStatus.CANCELLED)
            )
            if updated is None:
                raise NotFoundError("Appointment not found")

        self._logger.info(
            "Appointment cancelled",
            extra={"appointment_id": updated.id, "store_id": updated.store_id, "status": updated.status.value},
        )
        return updated

    def delete(self, appointment_id: str, ctx: AuthorizationContext) -> None:
        store_id = self._get_appointment(appointment_id).store_id

        with self._locks.hold(store_id):
            appointment = self._get_appointment(appointment_id)
            if not can_delete(ctx, appointment):
                raise ForbiddenError("You can only delete your own appointments")
            if not self._appointments.delete(appointment.id):
                raise NotFoundError("Appointment not found")

        self._logger.info("Appointment deleted", extra={"appointment_id": appointment_id, "store_id": store_id})

    # ------------------------------------------------------------------
    # Reads
    # ------------------------------------------------------------------

    def find(self, appointment_id: str, ctx: AuthorizationContext) -> Appointment:
        appointment = self._get_appointment(appointment_id)
        require_read(ctx, appointment)
        return appointment

    def list_for_client(self, ctx: AuthorizationContext) -> list[Appointment]:
        return sorted(self._appointments.find_by_client(ctx.user_id), key=lambda a: a.start_time)

    def list_for_store(self, store_id: str, ctx: AuthorizationContext) -> list[Appointment]:
        if self._directory.get_store(store_id) is None:
            raise NotFoundError("Store not found")
        require_store_operator(ctx, store_id)
        return sorted(self._appointments.find_by_store(store_id), key=lambda a: a.start_time)

    # ------------------------------------------------------------------
    # Guards
    # ------------------------------------------------------------------

    def _get_appointment(self, appointment_id: str) -> Appointment:
        appointment = self._appointments.find_by_id(appointment_id)
        if appointment is None:
            raise NotFoundError("Appointment not found")
        return appointment

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

    def _validate_notes(self, notes: str | None) -> None:
        if notes is not None and len(notes) > self._notes_max_length:
            raise BadRequestError(f"Notes must be at most {self._notes_max_length} characters")

    def _validate_slot(
        self,
        store: Store,
        service: Service,
        start: datetime,
        exclude_id: str | None = None,
    ) -> None:
        if start <= self._clock():
            raise BadRequestError("Appointment date must be in the future")
        if not is_open_at(store.working_days, start):
            raise BadRequestError("Appointment time is outside store working hours")

        end = start + timedelta(minutes=service.duration_minutes)
        start_of_day, end_of_day = day_bounds(start.date(), self._timezone)
        existing = self._appointments.find_by_store_and_date_range(store.id, start_of_day, end_of_day)
        conflicts = find_conflicts(start, end, existing, self._directory.get_duration_minutes, exclude_id)
        if conflicts:
            self._logger.info(
                "Requested slot is taken",
                extra={"store_id": store.id, "reason": "overlap"},
            )
            raise ConflictError(CONFLICT_MESSAGE)

    def _resolve_status_change(
        self,
        appointment: Appointment,
        target: AppointmentStatus | None,
        is_operator: bool,
    ) -> AppointmentStatus | None:
        if target is None or target == appointment.status:
            return None
        if not is_operator:
            raise ForbiddenError("Only the store operator can change appointment status")
        if not can_transition(appointment.status, target):
            raise BadRequestError(
                f"Cannot change appointment status from {appointment.status.value} to {target.value}"
            )
        return target
