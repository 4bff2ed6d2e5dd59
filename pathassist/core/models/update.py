"""
RecordUpdate and UpdateReceipt — the persistence contract.

The controller sends a RecordUpdate; the persistence sink answers with
an UpdateReceipt. Sinks NEVER raise: failures are captured in the
receipt.
"""

from __future__ import annotations

from datetime import UTC, datetime
from typing import Literal

from pydantic import BaseModel, Field


def _now_iso() -> str:
    """Current UTC time as ISO string."""
    return datetime.now(UTC).isoformat()


class RecordUpdate(BaseModel):
    """A requested write of one field on one record."""

    record_id: str
    field_name: str
    new_value: str


class UpdateReceipt(BaseModel):
    """Result of a persistence request."""

    record_id: str
    field_name: str = ""
    new_value: str = ""
    status: Literal["ok", "failed"] = "ok"
    error: str | None = None
    completed_at: str = Field(default_factory=_now_iso)

    @property
    def ok(self) -> bool:
        """Whether the update was stored."""
        return self.status == "ok"

    @property
    def failed(self) -> bool:
        return self.status == "failed"

    @classmethod
    def success(cls, update: RecordUpdate) -> UpdateReceipt:
        """Create a success receipt for ``update``."""
        return cls(
            record_id=update.record_id,
            field_name=update.field_name,
            new_value=update.new_value,
            status="ok",
        )

    @classmethod
    def failure(cls, update: RecordUpdate, error: str) -> UpdateReceipt:
        """Create a failure receipt for ``update``."""
        return cls(
            record_id=update.record_id,
            field_name=update.field_name,
            new_value=update.new_value,
            status="failed",
            error=error,
        )
