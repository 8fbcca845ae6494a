from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, Field

from storebooking.domain.entities.appointment import Appointment, AppointmentStatus
from storebooking.domain.entities.time_slot import TimeSlot


class CreateAppointmentSchema(BaseModel):
    store_id: str = Field(min_length=1)
    service_id: str = Field(min_length=1)
    start_time: str = Field(min_length=1, description="ISO-8601 instant")
    notes: str | None = None


class UpdateAppointmentSchema(BaseModel):
    start_time: str | None = None
    status: AppointmentStatus | None = None
    notes: str | None = None


class TimeSlotSchema(BaseModel):
    date: str
    start_time: str
    end_time: str

    @classmethod
    def from_slot(cls, slot: TimeSlot) -> "TimeSlotSchema":
        return cls(**slot.to_dict())


class AppointmentSchema(BaseModel):
    id: str
    store_id: str
    service_id: str
    client_id: str
    start_time: datetime
    status: AppointmentStatus
    notes: str | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None

    @classmethod
    def from_entity(cls, appointment: Appointment) -> "AppointmentSchema":
        return cls(
            id=appointment.id,
            store_id=appointment.store_id,
            service_id=appointment.service_id,
            client_id=appointment.client_id,
            start_time=appointment.start_time,
            status=appointment.status,
            notes=appointment.notes,
            created_at=appointment.created_at,
            updated_at=appointment.updated_at,
        )
