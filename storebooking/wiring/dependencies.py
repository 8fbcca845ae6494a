from functools import lru_cache
import logging
from zoneinfo import ZoneInfo

from storebooking.application.ports.appointment_store import AppointmentStorePort
from storebooking.application.ports.store_directory import StoreDirectoryPort
from storebooking.application.use_cases.appointment_lifecycle import AppointmentLifecycleUseCase
from storebooking.application.use_cases.availability import AvailabilityUseCase
from storebooking.application.utils.locks import StoreLockRegistry
from storebooking.core.config import settings
from storebooking.infrastructure.directory.memory_directory import MemoryStoreDirectory
from storebooking.infrastructure.directory.seed_data import build_demo_directory
from storebooking.infrastructure.store.json_store import JsonAppointmentStore
from storebooking.infrastructure.store.memory_store import MemoryAppointmentStore


_appointment_store: AppointmentStorePort | None = None
_directory: StoreDirectoryPort | None = None


@lru_cache
def get_timezone() -> ZoneInfo:
    return ZoneInfo(settings.BUSINESS_TIMEZONE)


@lru_cache
def get_lock_registry() -> StoreLockRegistry:
    return StoreLockRegistry()


def get_appointment_store() -> AppointmentStorePort:
    global _appointment_store
    if _appointment_store is None:
        provider = settings.APPOINTMENT_STORE.lower().strip()
        if not provider:
            provider = "json" if settings.ENV.lower() in {"dev", "local"} else "memory"

        logger = logging.getLogger(__name__)
        if provider == "json":
            logger.info("Using JsonAppointmentStore (DATA_DIR=%s)", settings.DATA_DIR)
            _appointment_store = JsonAppointmentStore(data_dir=settings.DATA_DIR)
        elif provider == "memory":
            logger.info("Using MemoryAppointmentStore")
            _appointment_store = MemoryAppointmentStore()
        else:
            raise ValueError(f"Unknown APPOINTMENT_STORE provider: {provider}")
    return _appointment_store


def get_store_directory() -> StoreDirectoryPort:
    global _directory
    if _directory is None:
        _directory = build_demo_directory() if settings.SEED_DEMO_DATA else MemoryStoreDirectory()
    return _directory


def get_availability_use_case() -> AvailabilityUseCase:
    return AvailabilityUseCase(
        directory=get_store_directory(),
        appointments=get_appointment_store(),
        timezone=get_timezone(),
    )


def get_lifecycle_use_case() -> AppointmentLifecycleUseCase:
    return AppointmentLifecycleUseCase(
        directory=get_store_directory(),
        appointments=get_appointment_store(),
        timezone=get_timezone(),
        locks=get_lock_registry(),
        notes_max_length=settings.NOTES_MAX_LENGTH,
    )
