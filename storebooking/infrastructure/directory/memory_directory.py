from __future__ import annotations

from storebooking.application.exceptions import BadRequestError, ConflictError, NotFoundError
from storebooking.application.ports.store_directory import StoreDirectoryPort
from storebooking.domain.entities.service import Service
from storebooking.domain.entities.store import Store
from storebooking.domain.entities.user import User, UserRole
from storebooking.domain.scheduling.working_hours import (
    ALLOWED_BOOKING_INTERVALS,
    MINUTES_PER_DAY,
    validate_working_days,
)


class MemoryStoreDirectory(StoreDirectoryPort):
    def __init__(self) -> None:
        self._users: dict[str, User] = {}
        self._stores: dict[str, Store] = {}
        self._services: dict[str, Service] = {}

    def get_user(self, user_id: str) -> User | None:
        return self._users.get(user_id)

    def get_store(self, store_id: str) -> Store | None:
        return self._stores.get(store_id)

    def get_service(self, service_id: str) -> Service | None:
        return self._services.get(service_id)

    def find_store_by_owner(self, user_id: str) -> Store | None:
        for store in self._stores.values():
            if store.owner_id == user_id:
                return store
        return None

    def add_user(self, user: User) -> User:
        self._users[user.id] = user
        return user

    def add_store(self, store: Store) -> Store:
        owner = self._users.get(store.owner_id)
        if owner is None:
            raise NotFoundError("User not found")
        if owner.role != UserRole.PROVIDER:
            raise BadRequestError("Only providers can have a store")
        existing = self.find_store_by_owner(owner.id)
        if existing is not None and existing.id != store.id:
            raise ConflictError("User already has a store")

        errors = validate_working_days(store.working_days)
        if errors:
            raise BadRequestError("; ".join(errors))
        if store.booking_interval_minutes not in ALLOWED_BOOKING_INTERVALS:
            raise BadRequestError(
                f"Booking interval must be one of {', '.join(str(i) for i in ALLOWED_BOOKING_INTERVALS)} minutes"
            )

        self._stores[store.id] = store
        return store

    def add_service(self, service: Service) -> Service:
        if service.store_id not in self._stores:
            raise NotFoundError("Store not found")
        if not 0 < service.duration_minutes <= MINUTES_PER_DAY:
            raise BadRequestError(f"Service duration must be between 1 and {MINUTES_PER_DAY} minutes")
        self._services[service.id] = service
        return service
