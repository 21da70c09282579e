"""
Database abstraction layer.

Provides the Supabase-backed client, its structural interface and the
error type every data-access operation raises.
"""

from .errors import DatabaseError, ErrorKind
from .factory import create_db_client, get_db_client, reset_db_client
from .protocol import APIResponse, DatabaseClient

__all__ = [
    "create_db_client",
    "get_db_client",
    "reset_db_client",
    "DatabaseClient",
    "APIResponse",
    "DatabaseError",
    "ErrorKind",
]
