"""
Pet Photo Schemas

Rows of the ``pet_photos`` table and the insert payload; photos are never updated.
"""

from datetime import datetime
from typing import Optional

from .base import CreatePayload, RowModel


class NewPetPhoto(CreatePayload):
    pet_id: str
    photo_url: str
    caption: Optional[str] = None


class PetPhoto(RowModel):
    id: str
    pet_id: str
    photo_url: str
    caption: Optional[str] = None
    created_at: datetime
