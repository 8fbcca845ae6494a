from __future__ import annotations

from dataclasses import dataclass

from storebooking.domain.entities.working_day import WorkingDay


@dataclass(frozen=True)
class Store:
    id: str
    owner_id: str
    name: str
    working_days: tuple[WorkingDay, ...]
    booking_interval_minutes: int = 30
