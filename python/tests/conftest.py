"""
Shared pytest fixtures.

FakeDatabaseClient is an in-memory stand-in for the Supabase backend that
implements the DatabaseClient protocol: it assigns ids and timestamps, applies
eq filters and ordering, honours single(), returns deleted/updated rows and
pushes change events to subscribed channels, so service behaviour can be tested
without a network.
"""

import os
import uuid
from datetime import datetime, timedelta, timezone
from typing import Any

import pytest

from petcare.db.errors import DatabaseError, ErrorKind
from petcare.db.protocol import APIResponse
from petcare.db.factory import reset_db_client

# Tests must never pick up real credentials
os.environ.pop("SUPABASE_URL", None)
os.environ.pop("SUPABASE_ANON_KEY", None)

TABLES = ("pets", "appointments", "pet_photos")
NO_UPDATED_AT = {"pet_photos"}


class FakeClock:
    """Strictly increasing timestamps, one second apart."""

    def __init__(self) -> None:
        self._now = datetime(2026, 1, 1, tzinfo=timezone.utc)

    def tick(self) -> str:
        self._now += timedelta(seconds=1)
        return self._now.isoformat()


class FakeQuery:
    def __init__(self, db: "FakeDatabaseClient", table: str) -> None:
        self._db = db
        self.table = table
        self.op = "select"
        self.data: Any = None
        self.filters: list[tuple[str, Any]] = []
        self.orders: list[tuple[str, bool]] = []
        self.is_single = False
        self.count: str | None = None
        self.head = False

    def select(self, columns="*", *, count=None, head=False):
        self.count = count
        self.head = head
        return self

    def insert(self, data):
        self.op = "insert"
        self.data = data
        return self

    def update(self, data):
        self.op = "update"
        self.data = data
        return self

    def delete(self):
        self.op = "delete"
        return self

    def eq(self, column, value):
        self.filters.append((column, value))
        return self

    def order(self, column, *, desc=False):
        self.orders.append((column, desc))
        return self

    def single(self):
        self.is_single = True
        return self

    async def execute(self) -> APIResponse:
        self._db.queries.append(self)
        if self._db.fail_with is not None:
            raise self._db.fail_with
        if self.table not in self._db.rows:
            raise DatabaseError(
                ErrorKind.QUERY,
                f'relation "public.{self.table}" does not exist',
                code="42P01",
            )
        return getattr(self, f"_run_{self.op}")()

    def _matches(self, row: dict) -> bool:
        return all(row.get(column) == value for column, value in self.filters)

    def _run_select(self) -> APIResponse:
        rows = [dict(r) for r in self._db.rows[self.table] if self._matches(r)]
        for column, desc in reversed(self.orders):
            rows.sort(key=lambda r: r[column], reverse=desc)
        count = len(rows) if self.count else None
        if self.head:
            return APIResponse(data=[], count=count)
        if self.is_single:
            if len(rows) != 1:
                raise DatabaseError(
                    ErrorKind.NOT_FOUND,
                    "JSON object requested, multiple (or no) rows returned",
                    code="PGRST116",
                )
            return APIResponse(data=rows[0], count=count)
        return APIResponse(data=rows, count=count)

    def _run_insert(self) -> APIResponse:
        stamp = self._db.clock.tick()
        row = dict(self.data, id=str(uuid.uuid4()), created_at=stamp)
        if self.table not in NO_UPDATED_AT:
            row["updated_at"] = stamp
        self._db.rows[self.table].append(row)
        self._db.broadcast(self.table, "INSERT", new=row)
        return APIResponse(data=[dict(row)])

    def _run_update(self) -> APIResponse:
        updated = []
        for row in self._db.rows[self.table]:
            if self._matches(row):
                old = dict(row)
                row.update(self.data)
                if self.table not in NO_UPDATED_AT:
                    row["updated_at"] = self._db.clock.tick()
                updated.append(dict(row))
                self._db.broadcast(self.table, "UPDATE", new=row, old=old)
        return APIResponse(data=updated)

    def _run_delete(self) -> APIResponse:
        kept, deleted = [], []
        for row in self._db.rows[self.table]:
            (deleted if self._matches(row) else kept).append(row)
        self._db.rows[self.table] = kept
        for row in deleted:
            self._db.broadcast(self.table, "DELETE", old=row)
        return APIResponse(data=deleted)


class FakeChannel:
    def __init__(self, db: "FakeDatabaseClient", name: str) -> None:
        self._db = db
        self.name = name
        self.bindings: list[tuple[str, str, str, Any]] = []
        self.subscribed = False
        self.on_error = None

    def on_postgres_changes(self, event, *, table, callback, schema="public"):
        self.bindings.append((event, table, schema, callback))
        return self

    async def subscribe(self, on_error=None):
        if self._db.fail_with is not None:
            raise self._db.fail_with
        self.subscribed = True
        self.on_error = on_error
        self._db.channels.append(self)
        return self

    def drop(self, error: Exception) -> None:
        """Server-side loss of a joined channel."""
        self.on_error(error)

    async def unsubscribe(self):
        self.subscribed = False
        self._db.channels.remove(self)


class FakeDatabaseClient:
    def __init__(self, tables=TABLES) -> None:
        self.rows: dict[str, list[dict]] = {t: [] for t in tables}
        self.clock = FakeClock()
        self.queries: list[FakeQuery] = []
        self.channels: list[FakeChannel] = []
        self.fail_with: Exception | None = None

    def table(self, name: str) -> FakeQuery:
        return FakeQuery(self, name)

    def channel(self, name: str) -> FakeChannel:
        return FakeChannel(self, name)

    def broadcast(self, table: str, event_type: str, new=None, old=None) -> None:
        payload = {
            "data": {
                "type": event_type,
                "table": table,
                "schema": "public",
                "record": dict(new) if new else None,
                "old_record": dict(old) if old else None,
                "commit_timestamp": self.clock.tick(),
            },
            "ids": [1],
        }
        for channel in list(self.channels):
            for event, bound_table, _schema, callback in channel.bindings:
                if bound_table == table and event in ("*", event_type):
                    callback(payload)


@pytest.fixture
def fake_db():
    return FakeDatabaseClient()


@pytest.fixture(autouse=True)
def _reset_shared_client():
    reset_db_client()
    yield
    reset_db_client()


@pytest.fixture
def sample_pet():
    return {
        "name": "Buddy",
        "type": "dog",
        "breed": "Golden Retriever",
        "age": 3,
        "description": "Friendly and loves to play fetch",
        "image_url": "https://example.com/buddy.jpg",
        "owner_id": "owner-1",
    }


@pytest.fixture
def schemaless_db():
    """Backend reachable but with no tables created yet."""
    return FakeDatabaseClient(tables=())
