"""
Schema Base Classes

Shared pydantic bases: row models tolerate unknown columns, payload models
reject them and serialise to JSON-ready dicts.
"""

from typing import Any, Dict

from pydantic import BaseModel, ConfigDict


class RowModel(BaseModel):
    """A row as returned by the backend; unknown columns are ignored."""

    model_config = ConfigDict(extra="ignore")


class CreatePayload(BaseModel):
    """Insert payload. Server-generated fields are not declared, so passing one fails."""

    model_config = ConfigDict(extra="forbid")

    def to_payload(self) -> Dict[str, Any]:
        return self.model_dump(mode="json")


class UpdatePayload(BaseModel):
    """Partial update. Only fields the caller explicitly set are sent."""

    model_config = ConfigDict(extra="forbid")

    def to_payload(self) -> Dict[str, Any]:
        return self.model_dump(mode="json", exclude_unset=True)
