"""
Mock org — in-memory test double for every provider capability.

Holds objects, picklists and records in dicts. By default every call
succeeds; failures can be injected per capability or per record.
Successful updates are applied to the stored record so a reload sees
the new value.
"""

from __future__ import annotations

from pathassist.adapters.base import (
    MetadataProvider,
    PersistenceSink,
    ProviderError,
    RecordProvider,
)
from pathassist.core.models.record import ObjectInfo, PicklistEntry, RecordSnapshot
from pathassist.core.models.update import RecordUpdate, UpdateReceipt


class MockOrg(MetadataProvider, RecordProvider, PersistenceSink):
    """Universal in-memory org for tests and demos."""

    def __init__(self) -> None:
        self._objects: dict[str, ObjectInfo] = {}
        self._picklists: dict[tuple[str, str], dict[str, list[PicklistEntry]]] = {}
        self._records: dict[str, RecordSnapshot] = {}
        self._update_failures: dict[str, str] = {}
        self._metadata_error: str | None = None
        self._record_error: str | None = None
        self._call_log: list[RecordUpdate] = []

    # ── Setup ────────────────────────────────────────────────────

    def add_object(self, info: ObjectInfo) -> None:
        self._objects[info.api_name] = info

    def set_picklist(
        self,
        object_name: str,
        record_type_id: str,
        field_name: str,
        entries: list[PicklistEntry],
    ) -> None:
        """Set the picklist entries of a field for one record type."""
        fields = self._picklists.setdefault((object_name, record_type_id), {})
        fields[field_name] = list(entries)

    def add_record(self, record: RecordSnapshot) -> None:
        self._records[record.record_id] = record

    def set_update_failure(self, record_id: str, error: str = "Mock failure") -> None:
        """Configure updates of a specific record to fail."""
        self._update_failures[record_id] = error

    def set_metadata_error(self, error: str | None) -> None:
        self._metadata_error = error

    def set_record_error(self, error: str | None) -> None:
        self._record_error = error

    # ── Inspection ───────────────────────────────────────────────

    @property
    def call_log(self) -> list[RecordUpdate]:
        """All updates this mock has received."""
        return self._call_log

    @property
    def call_count(self) -> int:
        """Number of times update_record has been called."""
        return len(self._call_log)

    def record(self, record_id: str) -> RecordSnapshot | None:
        return self._records.get(record_id)

    def reset(self) -> None:
        """Clear call log and injected failures."""
        self._call_log.clear()
        self._update_failures.clear()
        self._metadata_error = None
        self._record_error = None

    # ── Provider capabilities ────────────────────────────────────

    def get_object_info(self, object_name: str) -> ObjectInfo:
        if self._metadata_error:
            raise ProviderError(self._metadata_error)
        info = self._objects.get(object_name)
        if info is None:
            raise ProviderError(f"Object {object_name} is not supported")
        return info

    def get_picklist_values(
        self, object_name: str, record_type_id: str
    ) -> dict[str, list[PicklistEntry]]:
        if self._metadata_error:
            raise ProviderError(self._metadata_error)
        return dict(self._picklists.get((object_name, record_type_id), {}))

    def get_record(self, record_id: str) -> RecordSnapshot:
        if self._record_error:
            raise ProviderError(self._record_error)
        record = self._records.get(record_id)
        if record is None:
            raise ProviderError(f"Record {record_id} does not exist")
        return record

    def update_record(self, update: RecordUpdate) -> UpdateReceipt:
        self._call_log.append(update)

        if update.record_id in self._update_failures:
            return UpdateReceipt.failure(update, self._update_failures[update.record_id])

        record = self._records.get(update.record_id)
        if record is None:
            return UpdateReceipt.failure(update, f"Record {update.record_id} does not exist")

        fields = dict(record.fields)
        fields[update.field_name] = update.new_value
        self._records[update.record_id] = record.model_copy(update={"fields": fields})
        return UpdateReceipt.success(update)
