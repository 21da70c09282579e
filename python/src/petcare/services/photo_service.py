"""
Photo Service

Operations on the ``pet_photos`` table. Photos are immutable once added.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from ..models import NewPetPhoto, PetPhoto
from .base_table_service import BaseTableService


class PhotoService(BaseTableService[PetPhoto]):
    table_name = "pet_photos"
    row_model = PetPhoto

    async def list_photos(self, pet_id: str) -> list[PetPhoto]:
        """Photos of one pet, newest first."""
        return await self.fetch_many(
            self.query()
            .select("*")
            .eq("pet_id", pet_id)
            .order("created_at", desc=True)
        )

    async def add_photo(self, photo: NewPetPhoto | Mapping[str, Any]) -> PetPhoto:
        return await self.insert_row(self.coerce(NewPetPhoto, photo))

    async def delete_photo(self, photo_id: str) -> None:
        await self.delete_row(photo_id)
