"""
Provider base — the contract between the path and the record store.

The path consumes three capabilities and nothing else:

    MetadataProvider   object schema + picklist values per record type
    RecordProvider     a record's live field values and record type
    PersistenceSink    write one field on one record

Providers raise ProviderError on failure and the message is shown to
the user verbatim. Sinks NEVER raise: failures are captured in the
UpdateReceipt.
"""

from __future__ import annotations

from abc import ABC, abstractmethod

from pathassist.core.models.record import ObjectInfo, PicklistEntry, RecordSnapshot
from pathassist.core.models.update import RecordUpdate, UpdateReceipt


class ProviderError(Exception):
    """Raised when a provider cannot return the requested data."""


class MetadataProvider(ABC):
    """Supplies object schema and picklist values."""

    @abstractmethod
    def get_object_info(self, object_name: str) -> ObjectInfo:
        """Return the object's schema (field labels, record types)."""

    @abstractmethod
    def get_picklist_values(
        self, object_name: str, record_type_id: str
    ) -> dict[str, list[PicklistEntry]]:
        """Return picklist entries per field for a record type.

        Fields with no picklist for that record type are absent from
        the result.
        """


class RecordProvider(ABC):
    """Supplies live record data."""

    @abstractmethod
    def get_record(self, record_id: str) -> RecordSnapshot:
        """Return the record's current field values and record type."""


class PersistenceSink(ABC):
    """Stores field updates."""

    @abstractmethod
    def update_record(self, update: RecordUpdate) -> UpdateReceipt:
        """Write ``update.new_value`` to the record's field.

        MUST never raise exceptions. All failures are captured in the
        receipt with status='failed'.
        """

    def __repr__(self) -> str:
        return f"<{self.__class__.__name__}>"
