"""
Database Client Protocol

Defines the structural interface the data-access services talk to.
Uses Python Protocols for structural subtyping (duck typing) — adapters
do not need to inherit from these classes.
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
from typing import Any, Protocol, runtime_checkable


@dataclass
class APIResponse:
    """
    Response wrapper matching supabase-py APIResponse structure.
    Adapters return this to guarantee uniform access patterns.
    """

    data: list[dict[str, Any]] | dict[str, Any] | None = None
    count: int | None = None


@runtime_checkable
class TableQueryBuilder(Protocol):
    """Fluent query builder for table operations (mirrors supabase-py's async builders)."""

    # Column selection
    def select(
        self, columns: str = "*", *, count: str | None = None, head: bool = False
    ) -> "TableQueryBuilder": ...

    # Mutation
    def insert(self, data: dict[str, Any] | list[dict[str, Any]]) -> "TableQueryBuilder": ...
    def update(self, data: dict[str, Any]) -> "TableQueryBuilder": ...
    def delete(self) -> "TableQueryBuilder": ...

    # Filters
    def eq(self, column: str, value: Any) -> "TableQueryBuilder": ...

    # Ordering / cardinality
    def order(self, column: str, *, desc: bool = False) -> "TableQueryBuilder": ...
    def single(self) -> "TableQueryBuilder": ...

    # Execution
    async def execute(self) -> APIResponse: ...


@runtime_checkable
class RealtimeChannel(Protocol):
    """One logical subscription endpoint bound to a table's change stream."""

    def on_postgres_changes(
        self,
        event: str,
        *,
        table: str,
        callback: Callable[[dict[str, Any]], None],
        schema: str = "public",
    ) -> "RealtimeChannel": ...

    async def subscribe(
        self, on_error: Callable[[Exception], None] | None = None
    ) -> "RealtimeChannel": ...
    async def unsubscribe(self) -> None: ...


@runtime_checkable
class DatabaseClient(Protocol):
    """
    Unified database client interface.

    Implemented by SupabaseDatabaseClient (wraps supabase-py's AsyncClient).
    """

    def table(self, name: str) -> TableQueryBuilder: ...
    def channel(self, name: str) -> RealtimeChannel: ...
