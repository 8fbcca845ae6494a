from __future__ import annotations

from datetime import date, datetime, timezone

import pytest

from storebooking.application.use_cases.appointment_lifecycle import AppointmentLifecycleUseCase
from storebooking.application.use_cases.authorization import resolve_authorization_context
from storebooking.application.use_cases.availability import AvailabilityUseCase
from storebooking.domain.entities.service import Service
from storebooking.domain.entities.store import Store
from storebooking.domain.entities.user import User, UserRole
from storebooking.domain.entities.working_day import WorkingDay
from storebooking.infrastructure.directory.memory_directory import MemoryStoreDirectory
from storebooking.infrastructure.store.memory_store import MemoryAppointmentStore

MONDAY = date(2030, 1, 7)
SUNDAY = date(2030, 1, 6)
NOW = datetime(2030, 1, 1, 8, 0, tzinfo=timezone.utc)


def weekday_hours(open_time: str = "09:00", close_time: str = "18:00") -> tuple[WorkingDay, ...]:
    """Open Monday to Friday, closed on weekends."""
    return tuple(
        WorkingDay.from_hhmm(day, True, open_time, close_time) if 1 <= day <= 5 else WorkingDay.from_hhmm(day, False)
        for day in range(7)
    )


@pytest.fixture
def directory() -> MemoryStoreDirectory:
    directory = MemoryStoreDirectory()
    directory.add_user(User(id="provider-1", name="Carlos", role=UserRole.PROVIDER))
    directory.add_user(User(id="provider-2", name="Ana", role=UserRole.PROVIDER))
    directory.add_user(User(id="client-1", name="Maria", role=UserRole.CLIENT))
    directory.add_user(User(id="client-2", name="Joao", role=UserRole.CLIENT))
    directory.add_store(
        Store(id="store-1", owner_id="provider-1", name="Barbearia", working_days=weekday_hours(), booking_interval_minutes=30)
    )
    directory.add_store(
        Store(id="store-2", owner_id="provider-2", name="Salao", working_days=weekday_hours(), booking_interval_minutes=30)
    )
    directory.add_service(Service(id="service-60", store_id="store-1", title="Corte + Barba", duration_minutes=60))
    directory.add_service(Service(id="service-30", store_id="store-1", title="Corte", duration_minutes=30))
    directory.add_service(Service(id="service-other", store_id="store-2", title="Manicure", duration_minutes=60))
    return directory


@pytest.fixture
def appointments() -> MemoryAppointmentStore:
    return MemoryAppointmentStore()


@pytest.fixture
def lifecycle(directory, appointments) -> AppointmentLifecycleUseCase:
    return AppointmentLifecycleUseCase(
        directory=directory,
        appointments=appointments,
        timezone=timezone.utc,
        clock=lambda: NOW,
    )


@pytest.fixture
def availability(directory, appointments) -> AvailabilityUseCase:
    return AvailabilityUseCase(directory=directory, appointments=appointments, timezone=timezone.utc)


@pytest.fixture
def client_ctx(directory):
    return resolve_authorization_context(directory, "client-1")


@pytest.fixture
def other_client_ctx(directory):
    return resolve_authorization_context(directory, "client-2")


@pytest.fixture
def operator_ctx(directory):
    return resolve_authorization_context(directory, "provider-1")


@pytest.fixture
def other_operator_ctx(directory):
    return resolve_authorization_context(directory, "provider-2")
