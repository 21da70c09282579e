"""
Appointment Schemas

Rows of the ``appointments`` table, their status values and insert/update payloads.
"""

from datetime import datetime
from enum import Enum
from typing import Optional

from pydantic import Field

from .base import CreatePayload, RowModel, UpdatePayload


class AppointmentStatus(str, Enum):
    SCHEDULED = "scheduled"
    COMPLETED = "completed"
    CANCELLED = "cancelled"


class NewAppointment(CreatePayload):
    pet_id: str
    appointment_date: datetime
    service_type: str = Field(..., min_length=1)
    status: AppointmentStatus = AppointmentStatus.SCHEDULED
    notes: Optional[str] = None


class AppointmentUpdate(UpdatePayload):
    pet_id: Optional[str] = None
    appointment_date: Optional[datetime] = None
    service_type: Optional[str] = Field(None, min_length=1)
    status: Optional[AppointmentStatus] = None
    notes: Optional[str] = None


class Appointment(RowModel):
    id: str
    pet_id: str
    appointment_date: datetime
    service_type: str
    status: AppointmentStatus
    notes: Optional[str] = None
    created_at: datetime
    updated_at: datetime
