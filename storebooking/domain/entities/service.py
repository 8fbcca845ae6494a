from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class Service:
    id: str
    store_id: str
    title: str
    duration_minutes: int
    price: float | None = None
