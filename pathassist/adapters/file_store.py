"""
File org — a YAML file standing in for the record store.

The file holds object schemas, picklist values per record type and
records::

    objects:
      Opportunity:
        label: Opportunity
        fields:
          StageName: {label: Stage}
        record_types:
          - {id: "012000000000000AAA", name: Master, master: true}
        picklists:
          "012000000000000AAA":
            StageName:
              - {value: Prospecting, label: Prospecting}
    records:
      "006000000000001":
        object: Opportunity
        record_type_id: null
        fields: {StageName: Prospecting}

The file is re-read on every call so a reload sees committed values.
Writes are atomic (write to temp file, then rename).
"""

from __future__ import annotations

import logging
import os
import tempfile
from pathlib import Path
from typing import Any

import yaml
from pydantic import BaseModel, Field, ValidationError

from pathassist.adapters.base import (
    MetadataProvider,
    PersistenceSink,
    ProviderError,
    RecordProvider,
)
from pathassist.core.models.record import (
    FieldInfo,
    ObjectInfo,
    PicklistEntry,
    RecordSnapshot,
    RecordTypeInfo,
)
from pathassist.core.models.update import RecordUpdate, UpdateReceipt

logger = logging.getLogger(__name__)


class _RecordTypeData(BaseModel):
    id: str
    name: str = ""
    master: bool = False


class _FieldData(BaseModel):
    label: str = ""


class _ObjectData(BaseModel):
    label: str = ""
    fields: dict[str, _FieldData] = Field(default_factory=dict)
    record_types: list[_RecordTypeData] = Field(default_factory=list)
    picklists: dict[str, dict[str, list[PicklistEntry]]] = Field(default_factory=dict)


class _RecordData(BaseModel):
    object: str
    record_type_id: str | None = None
    fields: dict[str, Any] = Field(default_factory=dict)


class OrgData(BaseModel):
    """Parsed contents of the org file."""

    objects: dict[str, _ObjectData] = Field(default_factory=dict)
    records: dict[str, _RecordData] = Field(default_factory=dict)


class FileOrg(MetadataProvider, RecordProvider, PersistenceSink):
    """Provider and sink backed by a single YAML file."""

    def __init__(self, path: Path):
        self._path = path

    @property
    def path(self) -> Path:
        return self._path

    def __repr__(self) -> str:
        return f"<FileOrg path={str(self._path)!r}>"

    # ── File I/O ─────────────────────────────────────────────────

    def load(self) -> OrgData:
        """Read and validate the org file.

        Raises:
            ProviderError: If the file is missing or invalid.
        """
        if not self._path.is_file():
            raise ProviderError(f"Org data file not found: {self._path}")

        try:
            raw = self._path.read_text(encoding="utf-8")
            data = yaml.safe_load(raw) or {}
        except (OSError, yaml.YAMLError) as e:
            raise ProviderError(f"Cannot read {self._path}: {e}") from e

        if not isinstance(data, dict):
            raise ProviderError(
                f"Expected a YAML mapping in {self._path}, got {type(data).__name__}"
            )

        try:
            return OrgData.model_validate(data)
        except ValidationError as e:
            raise ProviderError(f"Invalid org data in {self._path}: {e}") from e

    def save(self, org: OrgData) -> None:
        """Write the org file atomically."""
        self._path.parent.mkdir(parents=True, exist_ok=True)
        content = yaml.safe_dump(
            org.model_dump(mode="json"),
            sort_keys=False,
            allow_unicode=True,
        )

        fd, tmp_path = tempfile.mkstemp(
            dir=self._path.parent,
            prefix=".org_",
            suffix=".tmp",
        )
        os.close(fd)
        tmp = Path(tmp_path)
        try:
            tmp.write_text(content, encoding="utf-8")
            tmp.replace(self._path)
            logger.debug("Org data saved to %s", self._path)
        except Exception:
            tmp.unlink(missing_ok=True)
            raise

    # ── Provider capabilities ────────────────────────────────────

    def get_object_info(self, object_name: str) -> ObjectInfo:
        obj = self._get_object(self.load(), object_name)
        return ObjectInfo(
            api_name=object_name,
            label=obj.label,
            fields={
                api_name: FieldInfo(api_name=api_name, label=field.label)
                for api_name, field in obj.fields.items()
            },
            record_type_infos={
                rt.id: RecordTypeInfo(record_type_id=rt.id, name=rt.name, master=rt.master)
                for rt in obj.record_types
            },
        )

    def get_picklist_values(
        self, object_name: str, record_type_id: str
    ) -> dict[str, list[PicklistEntry]]:
        obj = self._get_object(self.load(), object_name)
        if record_type_id not in {rt.id for rt in obj.record_types}:
            raise ProviderError(
                f"Record type {record_type_id} is not available on {object_name}"
            )
        return dict(obj.picklists.get(record_type_id, {}))

    def get_record(self, record_id: str) -> RecordSnapshot:
        data = self.load().records.get(record_id)
        if data is None:
            raise ProviderError(f"Record {record_id} does not exist")
        return RecordSnapshot(
            record_id=record_id,
            object_name=data.object,
            record_type_id=data.record_type_id,
            fields=dict(data.fields),
        )

    def update_record(self, update: RecordUpdate) -> UpdateReceipt:
        try:
            org = self.load()
        except ProviderError as e:
            return UpdateReceipt.failure(update, str(e))

        record = org.records.get(update.record_id)
        if record is None:
            return UpdateReceipt.failure(update, f"Record {update.record_id} does not exist")

        obj = org.objects.get(record.object)
        if obj is None or update.field_name not in obj.fields:
            return UpdateReceipt.failure(
                update,
                f"Field {update.field_name} does not exist on {record.object}",
            )

        record.fields[update.field_name] = update.new_value

        try:
            self.save(org)
        except OSError as e:
            logger.error("Failed to save %s: %s", self._path, e)
            return UpdateReceipt.failure(update, f"Cannot write {self._path}: {e}")

        logger.info("%s.%s → %s", update.record_id, update.field_name, update.new_value)
        return UpdateReceipt.success(update)

    @staticmethod
    def _get_object(org: OrgData, object_name: str) -> _ObjectData:
        obj = org.objects.get(object_name)
        if obj is None:
            raise ProviderError(f"Object {object_name} is not supported")
        return obj
