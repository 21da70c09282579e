"""
Realtime Service

Registers change-notification callbacks on a table through a Supabase Realtime
channel. Each subscription owns one channel named ``<table>_changes`` listening
to every insert/update/delete on ``public.<table>``.

Channel lifecycle: CREATED -> SUBSCRIBED -> UNSUBSCRIBED (terminal).
Delivery stops when the subscription is disposed, either explicitly with
``unsubscribe()`` or by leaving its ``async with`` block, or when the server
drops the channel; the channel is released only on disposal.
"""

from __future__ import annotations

import asyncio
import inspect
import logging
from collections.abc import AsyncIterator, Awaitable, Callable
from contextlib import asynccontextmanager
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Literal, Union

from ..db.protocol import DatabaseClient, RealtimeChannel

logger = logging.getLogger(__name__)

TableName = Literal["pets", "appointments", "pet_photos"]
WATCHABLE_TABLES: tuple[str, ...] = ("pets", "appointments", "pet_photos")


class ChangeType(str, Enum):
    INSERT = "INSERT"
    UPDATE = "UPDATE"
    DELETE = "DELETE"


class ChannelState(str, Enum):
    CREATED = "created"
    SUBSCRIBED = "subscribed"
    UNSUBSCRIBED = "unsubscribed"


@dataclass(frozen=True)
class ChangeEvent:
    """
    One row change delivered by the backend.

    ``new`` holds the row after an insert/update, ``old`` the row before an
    update/delete. Whether ``old`` carries full columns depends on the table's
    replica identity; absent images are empty dicts.
    """

    event_type: ChangeType
    table: str
    schema: str = "public"
    new: dict[str, Any] = field(default_factory=dict)
    old: dict[str, Any] = field(default_factory=dict)
    commit_timestamp: str | None = None

    @classmethod
    def from_payload(cls, payload: dict[str, Any], table: str) -> "ChangeEvent":
        """
        Normalise a realtime payload.

        Accepts the wire shape (``{"data": {"type", "record", "old_record", ...}}``)
        as well as the already-flattened ``{"eventType", "new", "old"}`` shape.
        """
        data = payload.get("data") if isinstance(payload.get("data"), dict) else payload
        raw_type = data.get("type") or data.get("eventType") or ""
        return cls(
            event_type=ChangeType(str(raw_type).upper()),
            table=data.get("table") or table,
            schema=data.get("schema") or "public",
            new=dict(data.get("record") or data.get("new") or {}),
            old=dict(data.get("old_record") or data.get("old") or {}),
            commit_timestamp=data.get("commit_timestamp"),
        )


ChangeCallback = Callable[[ChangeEvent], Union[None, Awaitable[None]]]


class TableSubscription:
    """
    Handle for one active change subscription.

    Use as an async context manager to guarantee the channel is released:

        async with await subscribe_to_table_changes(db, "pets", on_change):
            ...
    """

    def __init__(self, channel: RealtimeChannel, table: str, callback: ChangeCallback) -> None:
        self.table = table
        self.channel_name = f"{table}_changes"
        self.state = ChannelState.CREATED
        self._channel = channel
        self._callback = callback
        self.error: Exception | None = None
        self._released = False
        self._pending: set[asyncio.Future] = set()

    async def activate(self) -> "TableSubscription":
        self._channel.on_postgres_changes(
            "*", table=self.table, schema="public", callback=self._dispatch
        )
        try:
            await self._channel.subscribe(on_error=self._on_channel_error)
        except Exception as e:
            self.state = ChannelState.UNSUBSCRIBED
            self.error = e
            self._released = True
            raise
        self.state = ChannelState.SUBSCRIBED
        logger.info("Subscribed to %s changes (channel=%s)", self.table, self.channel_name)
        return self

    async def unsubscribe(self) -> None:
        """Stop delivery and release the channel. Safe to call more than once."""
        self.state = ChannelState.UNSUBSCRIBED
        if self._released:
            return
        self._released = True
        await self._channel.unsubscribe()
        logger.info("Unsubscribed from %s changes (channel=%s)", self.table, self.channel_name)

    @property
    def active(self) -> bool:
        return self.state is ChannelState.SUBSCRIBED

    async def __aenter__(self) -> "TableSubscription":
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.unsubscribe()

    def _on_channel_error(self, error: Exception) -> None:
        """The server dropped an active channel; delivery has stopped."""
        if self.state is ChannelState.UNSUBSCRIBED:
            return
        self.state = ChannelState.UNSUBSCRIBED
        self.error = error
        logger.warning("Lost %s subscription (channel=%s): %s", self.table, self.channel_name, error)

    def _dispatch(self, payload: dict[str, Any]) -> None:
        if self.state is ChannelState.UNSUBSCRIBED:
            return
        try:
            event = ChangeEvent.from_payload(payload, self.table)
        except ValueError:
            logger.warning("Ignoring %s change with unknown event type: %r", self.table, payload)
            return

        try:
            result = self._callback(event)
        except Exception:
            logger.exception("Change callback for %s raised", self.table)
            return

        if inspect.isawaitable(result):
            task = asyncio.ensure_future(result)
            self._pending.add(task)
            task.add_done_callback(self._on_callback_done)

    def _on_callback_done(self, task: asyncio.Future) -> None:
        self._pending.discard(task)
        if not task.cancelled() and task.exception() is not None:
            logger.error(
                "Change callback for %s raised", self.table, exc_info=task.exception()
            )


async def subscribe_to_table_changes(
    db_client: DatabaseClient, table: TableName, callback: ChangeCallback
) -> TableSubscription:
    """
    Subscribe ``callback`` to every change on ``table``.

    Args:
        db_client: handle the channel is opened on
        table: one of pets, appointments, pet_photos
        callback: called with a ChangeEvent; may be a coroutine function

    Returns:
        An active TableSubscription the caller must dispose of

    Raises:
        ValueError: unknown table
        DatabaseError: the channel could not be activated
    """
    if table not in WATCHABLE_TABLES:
        raise ValueError(
            f"Cannot subscribe to '{table}'. Valid tables: {', '.join(WATCHABLE_TABLES)}"
        )
    channel = db_client.channel(f"{table}_changes")
    subscription = TableSubscription(channel, table, callback)
    return await subscription.activate()


@asynccontextmanager
async def watch_table_changes(
    db_client: DatabaseClient, table: TableName, callback: ChangeCallback
) -> AsyncIterator[TableSubscription]:
    """Scoped subscription: active inside the block, released on every exit path."""
    subscription = await subscribe_to_table_changes(db_client, table, callback)
    try:
        yield subscription
    finally:
        await subscription.unsubscribe()
