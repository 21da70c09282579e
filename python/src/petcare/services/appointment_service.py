"""
Appointment Service

CRUD operations on the ``appointments`` table.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from ..models import Appointment, AppointmentUpdate, NewAppointment
from .base_table_service import BaseTableService


class AppointmentService(BaseTableService[Appointment]):
    table_name = "appointments"
    row_model = Appointment

    async def list_appointments(self, pet_id: str) -> list[Appointment]:
        """
        Appointments of one pet, earliest appointment first.

        Args:
            pet_id: id of the pet the appointments belong to

        Returns:
            Appointments ordered by appointment_date ascending
        """
        return await self.fetch_many(
            self.query()
            .select("*")
            .eq("pet_id", pet_id)
            .order("appointment_date", desc=False)
        )

    async def get_appointment(self, appointment_id: str) -> Appointment:
        return await self.fetch_by_id(appointment_id)

    async def create_appointment(
        self, appointment: NewAppointment | Mapping[str, Any]
    ) -> Appointment:
        return await self.insert_row(self.coerce(NewAppointment, appointment))

    async def update_appointment(
        self, appointment_id: str, updates: AppointmentUpdate | Mapping[str, Any]
    ) -> Appointment:
        return await self.update_row(appointment_id, self.coerce(AppointmentUpdate, updates))

    async def delete_appointment(self, appointment_id: str) -> None:
        await self.delete_row(appointment_id)
