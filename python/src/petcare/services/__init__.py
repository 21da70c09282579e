"""
Services

Table services, change subscriptions and the connection health check.
"""

from .appointment_service import AppointmentService
from .client_manager import PetCareClient, get_petcare_client
from .health_service import ConnectionState, ConnectionStatus, check_connection
from .pet_service import PetService
from .photo_service import PhotoService
from .realtime_service import (
    ChangeEvent,
    ChangeType,
    ChannelState,
    TableSubscription,
    subscribe_to_table_changes,
    watch_table_changes,
)

__all__ = [
    "PetService",
    "AppointmentService",
    "PhotoService",
    "PetCareClient",
    "get_petcare_client",
    "ConnectionState",
    "ConnectionStatus",
    "check_connection",
    "ChangeEvent",
    "ChangeType",
    "ChannelState",
    "TableSubscription",
    "subscribe_to_table_changes",
    "watch_table_changes",
]
