"""
Pet Service

CRUD operations on the ``pets`` table.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from ..models import NewPet, Pet, PetUpdate
from .base_table_service import BaseTableService


class PetService(BaseTableService[Pet]):
    table_name = "pets"
    row_model = Pet

    async def list_pets(self) -> list[Pet]:
        """All pets visible to the caller, newest first."""
        return await self.fetch_many(
            self.query().select("*").order("created_at", desc=True)
        )

    async def get_pet(self, pet_id: str) -> Pet:
        return await self.fetch_by_id(pet_id)

    async def create_pet(self, pet: NewPet | Mapping[str, Any]) -> Pet:
        return await self.insert_row(self.coerce(NewPet, pet))

    async def update_pet(self, pet_id: str, updates: PetUpdate | Mapping[str, Any]) -> Pet:
        return await self.update_row(pet_id, self.coerce(PetUpdate, updates))

    async def delete_pet(self, pet_id: str) -> None:
        await self.delete_row(pet_id)
