"""
Health Service

Connection check against the backend. Reports instead of raising so a status
page can render whatever the outcome.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum

from ..db.errors import DatabaseError, ErrorKind
from ..db.protocol import DatabaseClient

logger = logging.getLogger(__name__)

SCHEMA_MISSING_MESSAGE = "Connected! Run the schema.sql to create tables."


class ConnectionState(str, Enum):
    CONNECTED = "connected"
    ERROR = "error"


@dataclass
class ConnectionStatus:
    state: ConnectionState
    message: str = ""
    pet_count: int | None = None
    error_kind: ErrorKind | None = None

    @property
    def connected(self) -> bool:
        return self.state is ConnectionState.CONNECTED


async def check_connection(db_client: DatabaseClient) -> ConnectionStatus:
    """
    Issue a head-only exact count on ``pets``.

    A missing ``pets`` relation still counts as connected: the backend answered,
    the schema just has not been applied yet.
    """
    try:
        response = await db_client.table("pets").select("*", count="exact", head=True).execute()
    except DatabaseError as e:
        if e.is_missing_relation:
            logger.info("Backend reachable but pets table is missing")
            return ConnectionStatus(ConnectionState.CONNECTED, SCHEMA_MISSING_MESSAGE)
        logger.warning("Connection check failed (%s): %s", e.kind.value, e.message)
        return ConnectionStatus(ConnectionState.ERROR, e.message, error_kind=e.kind)

    return ConnectionStatus(ConnectionState.CONNECTED, pet_count=response.count)
