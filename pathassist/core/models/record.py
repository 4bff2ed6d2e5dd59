"""
Record and object metadata models — what the external providers return.

These mirror the shapes a CRM metadata API hands back: an object's
field labels and record types, the picklist entries enabled for a
record type, and a record's live field values.
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, Field


class FieldInfo(BaseModel):
    """Schema of one object field."""

    api_name: str
    label: str = ""


class RecordTypeInfo(BaseModel):
    """A record type available on an object."""

    record_type_id: str
    name: str = ""
    master: bool = False


class ObjectInfo(BaseModel):
    """Object schema: field labels and record types."""

    api_name: str
    label: str = ""
    fields: dict[str, FieldInfo] = Field(default_factory=dict)
    record_type_infos: dict[str, RecordTypeInfo] = Field(default_factory=dict)

    def field_label(self, field_name: str) -> str | None:
        """Label of ``field_name``, or None if the object has no such field."""
        info = self.fields.get(field_name)
        if info is None:
            return None
        return info.label or field_name

    def master_record_type_id(self) -> str | None:
        """The object's master record type id, if it declares one."""
        for info in self.record_type_infos.values():
            if info.master:
                return info.record_type_id
        return None


class PicklistEntry(BaseModel):
    """One picklist value as returned by the metadata provider."""

    value: str
    label: str = ""


class RecordSnapshot(BaseModel):
    """A record's live field values and record type."""

    record_id: str
    object_name: str = ""
    record_type_id: str | None = None
    fields: dict[str, Any] = Field(default_factory=dict)

    def field_value(self, field_name: str) -> Any:
        return self.fields.get(field_name)

    def resolve_record_type_id(self, object_info: ObjectInfo) -> str | None:
        """The record's record type, falling back to the object's master one."""
        return self.record_type_id or object_info.master_record_type_id()
