"""
Supabase Database Client Adapter

Wraps the supabase-py AsyncClient and exposes the DatabaseClient interface.
Calls are forwarded to the native client; backend and transport failures are
translated into DatabaseError on execute(), and realtime channels report the
server's join answer before subscribe() returns.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Callable
from typing import Any

import httpx
from postgrest.exceptions import APIError
from supabase import AsyncClient

from .errors import DatabaseError, ErrorKind, classify, from_backend_error
from .protocol import APIResponse

logger = logging.getLogger(__name__)

PLACEHOLDER_MESSAGE = (
    "Supabase is not configured: set SUPABASE_URL and SUPABASE_ANON_KEY "
    "to a valid project URL and anon key"
)

# Realtime join answers that mean the channel is not delivering
_FAILED_STATES = {"CHANNEL_ERROR", "TIMED_OUT"}


class _SupabaseTableQueryBuilder:
    """
    Forwards all query builder calls to the supabase-py request builders,
    converting the supabase APIResponse to our internal APIResponse.
    """

    def __init__(self, native_builder: Any, table: str, *, placeholder: bool = False) -> None:
        self._b = native_builder
        self._table = table
        self._placeholder = placeholder
        self._verb = "select"

    # --- Column selection ---

    def select(
        self, columns: str = "*", *, count: str | None = None, head: bool = False
    ) -> "_SupabaseTableQueryBuilder":
        if head:
            self._b = self._b.select(columns, count=count, head=True)
        else:
            self._b = self._b.select(columns, count=count)
        return self

    # --- Mutations ---

    def insert(
        self, data: dict[str, Any] | list[dict[str, Any]]
    ) -> "_SupabaseTableQueryBuilder":
        self._verb = "insert"
        self._b = self._b.insert(data)
        return self

    def update(self, data: dict[str, Any]) -> "_SupabaseTableQueryBuilder":
        self._verb = "update"
        self._b = self._b.update(data)
        return self

    def delete(self) -> "_SupabaseTableQueryBuilder":
        self._verb = "delete"
        self._b = self._b.delete()
        return self

    # --- Filters ---

    def eq(self, column: str, value: Any) -> "_SupabaseTableQueryBuilder":
        self._b = self._b.eq(column, value)
        return self

    # --- Ordering / cardinality ---

    def order(self, column: str, *, desc: bool = False) -> "_SupabaseTableQueryBuilder":
        self._b = self._b.order(column, desc=desc)
        return self

    def single(self) -> "_SupabaseTableQueryBuilder":
        self._b = self._b.single()
        return self

    # --- Execution ---

    async def execute(self) -> APIResponse:
        if self._placeholder:
            raise DatabaseError(ErrorKind.CONNECTION, PLACEHOLDER_MESSAGE)

        logger.debug("Supabase execute: %s %s", self._verb, self._table)
        try:
            native_response = await self._b.execute()
        except APIError as e:
            raise from_backend_error(e) from e
        except (httpx.HTTPError, OSError) as e:
            raise DatabaseError(
                ErrorKind.CONNECTION, str(e) or e.__class__.__name__
            ) from e
        return APIResponse(data=native_response.data, count=getattr(native_response, "count", None))


class _SupabaseRealtimeChannel:
    """
    Wraps a supabase-py AsyncRealtimeChannel; removal goes through the owning client.

    subscribe() returns only once the server has answered the join: SUBSCRIBED
    resolves it, CHANNEL_ERROR / TIMED_OUT / CLOSED raise DatabaseError. Errors
    reported after a successful join go to the ``on_error`` callback.
    """

    def __init__(self, native_client: AsyncClient, native_channel: Any, name: str, *, placeholder: bool = False) -> None:
        self._client = native_client
        self._channel = native_channel
        self._name = name
        self._placeholder = placeholder
        self._joined: asyncio.Future | None = None
        self._on_error: Callable[[DatabaseError], None] | None = None

    def on_postgres_changes(
        self,
        event: str,
        *,
        table: str,
        callback: Callable[[dict[str, Any]], None],
        schema: str = "public",
    ) -> "_SupabaseRealtimeChannel":
        self._channel.on_postgres_changes(event, callback=callback, table=table, schema=schema)
        return self

    async def subscribe(
        self, on_error: Callable[[DatabaseError], None] | None = None
    ) -> "_SupabaseRealtimeChannel":
        if self._placeholder:
            raise DatabaseError(ErrorKind.CONNECTION, PLACEHOLDER_MESSAGE)

        self._on_error = on_error
        self._joined = asyncio.get_running_loop().create_future()
        try:
            await self._channel.subscribe(self._on_state_change)
        except OSError as e:
            raise DatabaseError(ErrorKind.CONNECTION, str(e) or e.__class__.__name__) from e

        try:
            await self._joined
        except DatabaseError:
            await self._client.remove_channel(self._channel)
            raise
        return self

    async def unsubscribe(self) -> None:
        if self._placeholder:
            return
        await self._client.remove_channel(self._channel)

    def _on_state_change(self, state: Any, error: Exception | None = None) -> None:
        status = str(getattr(state, "value", state))
        joined = self._joined

        if status == "SUBSCRIBED" and error is None:
            logger.debug("Realtime channel %s state: %s", self._name, status)
            if joined is not None and not joined.done():
                joined.set_result(None)
            return

        pending = joined is not None and not joined.done()
        if status not in _FAILED_STATES and error is None and not (pending and status == "CLOSED"):
            # CLOSED after a join is our own removal
            logger.debug("Realtime channel %s state: %s", self._name, status)
            return

        failure = _channel_failure(self._name, status, error)
        logger.warning("Realtime channel %s reported %s: %s", self._name, status, failure.message)
        if pending:
            joined.set_exception(failure)
        elif self._on_error is not None:
            self._on_error(failure)


def _channel_failure(name: str, status: str, error: Exception | None) -> DatabaseError:
    """Authorization rejections keep their kind; anything else is a CONNECTION failure."""
    message = str(error) if error is not None else f"Realtime channel {name} {status.lower()}"
    kind = classify(None, message)
    if kind is not ErrorKind.AUTHORIZATION:
        kind = ErrorKind.CONNECTION
    return DatabaseError(kind, message, code=status)


class SupabaseDatabaseClient:
    """
    Supabase-backed implementation of DatabaseClient.
    Wraps a supabase-py AsyncClient instance and delegates all operations.

    A placeholder client is bound to a sentinel URL; every query or
    subscription made through it fails with a CONNECTION error.
    """

    def __init__(self, native_client: AsyncClient, *, placeholder: bool = False) -> None:
        self._client = native_client
        self.is_placeholder = placeholder

    def table(self, name: str) -> _SupabaseTableQueryBuilder:
        return _SupabaseTableQueryBuilder(
            self._client.table(name), name, placeholder=self.is_placeholder
        )

    def channel(self, name: str) -> _SupabaseRealtimeChannel:
        return _SupabaseRealtimeChannel(
            self._client, self._client.channel(name), name, placeholder=self.is_placeholder
        )
