from __future__ import annotations

from abc import ABC, abstractmethod

from storebooking.domain.entities.service import Service
from storebooking.domain.entities.store import Store
from storebooking.domain.entities.user import User


class StoreDirectoryPort(ABC):
    """Read-only view of users, stores and services owned by other modules."""

    @abstractmethod
    def get_user(self, user_id: str) -> User | None:
        raise NotImplementedError

    @abstractmethod
    def get_store(self, store_id: str) -> Store | None:
        raise NotImplementedError

    @abstractmethod
    def get_service(self, service_id: str) -> Service | None:
        raise NotImplementedError

    @abstractmethod
    def find_store_by_owner(self, user_id: str) -> Store | None:
        """Store operated by ``user_id``, if any."""
        raise NotImplementedError

    def is_store_operator(self, user_id: str, store_id: str) -> bool:
        store = self.get_store(store_id)
        return store is not None and store.owner_id == user_id

    def get_duration_minutes(self, service_id: str) -> int | None:
        service = self.get_service(service_id)
        return service.duration_minutes if service else None
