"""
Base Table Service

Common plumbing for the per-table data-access services:
- Row parsing into the table's row model
- Single-row fetch / insert / update / delete by id
- Translation of empty mutation results into NOT_FOUND
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import Any, ClassVar, Generic, TypeVar

from pydantic import BaseModel

from ..db.errors import DatabaseError, ErrorKind, not_found
from ..db.protocol import DatabaseClient, TableQueryBuilder
from ..models.base import CreatePayload, RowModel, UpdatePayload

logger = logging.getLogger(__name__)

RowT = TypeVar("RowT", bound=RowModel)
PayloadT = TypeVar("PayloadT", bound=BaseModel)


class BaseTableService(Generic[RowT]):
    """Base class for services bound to a single backend table."""

    table_name: ClassVar[str]
    row_model: ClassVar[type[RowModel]]

    def __init__(self, db_client: DatabaseClient):
        """
        Args:
            db_client: handle every query of this service goes through
        """
        self.db_client = db_client

    def query(self) -> TableQueryBuilder:
        return self.db_client.table(self.table_name)

    @staticmethod
    def coerce(model: type[PayloadT], data: PayloadT | Mapping[str, Any]) -> PayloadT:
        """Accept either the payload model or a plain mapping validated into it."""
        if isinstance(data, model):
            return data
        return model.model_validate(dict(data))

    def parse_rows(self, data: Any) -> list[RowT]:
        rows = data or []
        if isinstance(rows, dict):
            rows = [rows]
        return [self.row_model.model_validate(row) for row in rows]  # type: ignore[misc]

    async def fetch_many(self, builder: TableQueryBuilder) -> list[RowT]:
        response = await builder.execute()
        return self.parse_rows(response.data)

    async def fetch_by_id(self, row_id: str) -> RowT:
        """
        Fetch exactly one row by id.

        Raises:
            DatabaseError: NOT_FOUND when zero or several rows match
        """
        response = await self.query().select("*").eq("id", row_id).single().execute()
        rows = self.parse_rows(response.data)
        if len(rows) != 1:
            raise not_found(self.table_name, row_id)
        return rows[0]

    async def insert_row(self, payload: CreatePayload) -> RowT:
        response = await self.query().insert(payload.to_payload()).execute()
        rows = self.parse_rows(response.data)
        if not rows:
            # Insert returned no representation, typically a SELECT policy hiding the row
            raise DatabaseError(
                ErrorKind.QUERY, f"Insert into '{self.table_name}' returned no row"
            )
        logger.debug("Inserted %s row %s", self.table_name, rows[0].id)  # type: ignore[attr-defined]
        return rows[0]

    async def update_row(self, row_id: str, payload: UpdatePayload) -> RowT:
        """
        Update one row by id and return its new state.

        Raises:
            DatabaseError: QUERY when no field is set, NOT_FOUND when no row matched
        """
        changes = payload.to_payload()
        if not changes:
            raise DatabaseError(
                ErrorKind.QUERY, f"Update of '{self.table_name}' row '{row_id}' has no fields"
            )
        response = await self.query().update(changes).eq("id", row_id).execute()
        rows = self.parse_rows(response.data)
        if not rows:
            raise not_found(self.table_name, row_id)
        logger.debug("Updated %s row %s (%s)", self.table_name, row_id, ", ".join(changes))
        return rows[0]

    async def delete_row(self, row_id: str) -> None:
        """
        Hard-delete one row by id.

        Raises:
            DatabaseError: NOT_FOUND when no row matched (including a repeated delete)
        """
        response = await self.query().delete().eq("id", row_id).execute()
        if not response.data:
            raise not_found(self.table_name, row_id)
        logger.debug("Deleted %s row %s", self.table_name, row_id)
