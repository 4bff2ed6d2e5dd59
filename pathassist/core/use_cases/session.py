"""
Path session — wires the providers to a PathController.

The controller never fetches anything itself. The session loads the
record, its object schema and the picklist values for its record
type, feeds them in, and reloads after every commit (successful or
not) so the controller is back on fresh data.
"""

from __future__ import annotations

import logging

from pathassist.adapters.base import MetadataProvider, ProviderError, RecordProvider
from pathassist.core.engine.controller import PathController, Phase, Signal

logger = logging.getLogger(__name__)


class PathSession:
    """Drives one controller against a metadata and a record provider."""

    def __init__(
        self,
        controller: PathController,
        object_name: str,
        metadata: MetadataProvider,
        records: RecordProvider,
    ):
        self.controller = controller
        self.object_name = object_name
        self._metadata = metadata
        self._records = records

    def load(self) -> bool:
        """Fetch record, schema and picklist values into the controller.

        Returns:
            True if the controller ended up READY.
        """
        controller = self.controller

        try:
            record = self._records.get_record(controller.record_id)
            object_info = self._metadata.get_object_info(self.object_name)
        except ProviderError as e:
            controller.on_load_error(str(e))
            return False

        if not controller.on_record_loaded(record, object_info):
            return False

        record_type_id = controller.record_type_id
        if record_type_id is None:
            controller.on_load_error(
                f"No record type available for record {controller.record_id}"
            )
            return False

        try:
            picklists = self._metadata.get_picklist_values(self.object_name, record_type_id)
        except ProviderError as e:
            controller.on_load_error(str(e))
            return False

        controller.on_metadata_loaded(picklists)
        return controller.phase == Phase.READY

    def set_record_id(self, record_id: str) -> bool:
        """Switch to another record and load it."""
        self.controller.set_record_id(record_id)
        return self.load()

    def confirm_primary_action(self) -> Signal:
        signal = self.controller.confirm_primary_action()
        self._reload_after(signal)
        return signal

    def confirm_closed_outcome(self) -> Signal:
        signal = self.controller.confirm_closed_outcome()
        if signal in (Signal.CLOSE_CHOOSER, Signal.FAILED):
            self.load()
        return signal

    def _reload_after(self, signal: Signal) -> None:
        if signal in (Signal.COMMITTED, Signal.FAILED):
            logger.debug("Reloading after %s", signal)
            self.load()
