"""
Pet Schemas

Rows of the ``pets`` table and their insert/update payloads.
"""

from datetime import datetime
from typing import Optional

from pydantic import Field

from .base import CreatePayload, RowModel, UpdatePayload


class NewPet(CreatePayload):
    name: str = Field(..., min_length=1)
    type: str = Field(..., min_length=1)
    owner_id: str
    breed: Optional[str] = None
    age: Optional[int] = Field(None, ge=0)
    description: Optional[str] = None
    image_url: Optional[str] = None


class PetUpdate(UpdatePayload):
    name: Optional[str] = Field(None, min_length=1)
    type: Optional[str] = Field(None, min_length=1)
    owner_id: Optional[str] = None
    breed: Optional[str] = None
    age: Optional[int] = Field(None, ge=0)
    description: Optional[str] = None
    image_url: Optional[str] = None


class Pet(RowModel):
    id: str
    name: str
    type: str
    owner_id: str
    breed: Optional[str] = None
    age: Optional[int] = None
    description: Optional[str] = None
    image_url: Optional[str] = None
    created_at: datetime
    updated_at: datetime
