"""
Client Manager Service

Bundles the data-access services around one DatabaseClient so a caller
constructs the handle once and passes a single object around.
"""

from __future__ import annotations

from dataclasses import dataclass, field

from ..db.factory import create_db_client, get_db_client, reset_db_client
from ..db.protocol import DatabaseClient
from .appointment_service import AppointmentService
from .health_service import ConnectionStatus, check_connection
from .pet_service import PetService
from .photo_service import PhotoService
from .realtime_service import (
    ChangeCallback,
    TableName,
    TableSubscription,
    subscribe_to_table_changes,
    watch_table_changes,
)


@dataclass
class PetCareClient:
    """All data-access operations bound to one DatabaseClient."""

    db_client: DatabaseClient
    pets: PetService = field(init=False)
    appointments: AppointmentService = field(init=False)
    photos: PhotoService = field(init=False)

    def __post_init__(self) -> None:
        self.pets = PetService(self.db_client)
        self.appointments = AppointmentService(self.db_client)
        self.photos = PhotoService(self.db_client)

    async def subscribe(self, table: TableName, callback: ChangeCallback) -> TableSubscription:
        return await subscribe_to_table_changes(self.db_client, table, callback)

    def watch(self, table: TableName, callback: ChangeCallback):
        return watch_table_changes(self.db_client, table, callback)

    async def check_connection(self) -> ConnectionStatus:
        return await check_connection(self.db_client)


async def get_petcare_client() -> PetCareClient:
    """PetCareClient over the shared DatabaseClient."""
    return PetCareClient(await get_db_client())


__all__ = [
    "PetCareClient",
    "get_petcare_client",
    "create_db_client",
    "get_db_client",
    "reset_db_client",
]
