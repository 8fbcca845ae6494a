from __future__ import annotations

from storebooking.domain.entities.service import Service
from storebooking.domain.entities.store import Store
from storebooking.domain.entities.user import User, UserRole
from storebooking.domain.entities.working_day import WorkingDay
from storebooking.infrastructure.directory.memory_directory import MemoryStoreDirectory

DEFAULT_WORKING_DAYS: tuple[WorkingDay, ...] = (
    WorkingDay.from_hhmm(0, False),
    WorkingDay.from_hhmm(1, True, "08:00", "18:00"),
    WorkingDay.from_hhmm(2, True, "08:00", "18:00"),
    WorkingDay.from_hhmm(3, True, "08:00", "18:00"),
    WorkingDay.from_hhmm(4, True, "08:00", "18:00"),
    WorkingDay.from_hhmm(5, True, "08:00", "18:00"),
    WorkingDay.from_hhmm(6, True, "09:00", "14:00"),
)

DEMO_USERS = (
    User(id="provider-barber", name="Carlos Silva", role=UserRole.PROVIDER),
    User(id="provider-salon", name="Ana Souza", role=UserRole.PROVIDER),
    User(id="client-maria", name="Maria Oliveira", role=UserRole.CLIENT),
    User(id="client-joao", name="Joao Santos", role=UserRole.CLIENT),
)

DEMO_STORES = (
    Store(
        id="store-barber",
        owner_id="provider-barber",
        name="Barbearia do Carlos",
        working_days=DEFAULT_WORKING_DAYS,
        booking_interval_minutes=30,
    ),
    Store(
        id="store-salon",
        owner_id="provider-salon",
        name="Salao da Ana",
        working_days=DEFAULT_WORKING_DAYS,
        booking_interval_minutes=15,
    ),
)

DEMO_SERVICES = (
    Service(id="service-haircut", store_id="store-barber", title="Corte Masculino", duration_minutes=30, price=45.0),
    Service(id="service-beard", store_id="store-barber", title="Barba Completa", duration_minutes=20, price=30.0),
    Service(id="service-combo", store_id="store-barber", title="Corte + Barba", duration_minutes=60, price=70.0),
    Service(id="service-manicure", store_id="store-salon", title="Manicure", duration_minutes=45, price=35.0),
    Service(id="service-coloring", store_id="store-salon", title="Coloracao", duration_minutes=120, price=180.0),
)


def build_demo_directory() -> MemoryStoreDirectory:
    directory = MemoryStoreDirectory()
    for user in DEMO_USERS:
        directory.add_user(user)
    for store in DEMO_STORES:
        directory.add_store(store)
    for service in DEMO_SERVICES:
        directory.add_service(service)
    return directory
