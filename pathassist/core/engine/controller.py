"""
Path controller — owns one record's path and decides what the user can do.

The controller is a small state machine:

    LOADING     record, object schema or steps still missing
    READY       everything loaded, a scenario is resolved
    COMMITTING  an update is in flight

A commit always unwinds to LOADING: the record and its metadata are
dropped and whoever drives the controller reloads them. Selecting a
step while READY re-resolves the scenario synchronously.

Everything the view shows (rendered steps, button text, chooser
header) is derived on read from the controller's fields; nothing is
cached.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence
from enum import StrEnum

from pydantic import BaseModel, Field

from pathassist.adapters.base import PersistenceSink
from pathassist.core.engine.scenarios import (
    Scenario,
    ScenarioKind,
    ScenarioResolver,
    build_scenarios,
)
from pathassist.core.engine.steps import build_steps, validate_steps
from pathassist.core.models.config import GENERIC_ERROR_MESSAGE, PathConfig
from pathassist.core.models.errors import PathError
from pathassist.core.models.record import ObjectInfo, PicklistEntry, RecordSnapshot
from pathassist.core.models.scenario import ScenarioState
from pathassist.core.models.step import RenderedStep, Step
from pathassist.core.models.update import RecordUpdate, UpdateReceipt

logger = logging.getLogger(__name__)

# Value of the placeholder last step that opens the closed-stage chooser.
# Never written to the record.
OPEN_MODAL_TO_SELECT_CLOSED_STAGE = "pathAssistant_selectAClosedStageValue"

# ── CSS classes ─────────────────────────────────────────────────────
CSS_ITEM = "slds-path__item"
CSS_WON = "slds-is-won"
CSS_LOST = "slds-is-lost"
CSS_ACTIVE = "slds-is-active"
CSS_CURRENT = "slds-is-current"
CSS_COMPLETE = "slds-is-complete"
CSS_INCOMPLETE = "slds-is-incomplete"


class Phase(StrEnum):
    """Coarse controller states."""

    LOADING = "loading"
    READY = "ready"
    COMMITTING = "committing"


class Signal(StrEnum):
    """What the view should do after a user action."""

    NONE = "none"
    OPEN_CHOOSER = "open_chooser"
    CLOSE_CHOOSER = "close_chooser"
    COMMITTED = "committed"
    FAILED = "failed"


class PathView(BaseModel):
    """Serializable snapshot of everything the view renders."""

    phase: Phase
    record_id: str
    field_label: str = ""
    current_step: str | None = None
    selected_step: str | None = None
    scenario: ScenarioKind | None = None
    steps: list[RenderedStep] = Field(default_factory=list)
    closed_steps: list[Step] = Field(default_factory=list)
    update_button_text: str = ""
    modal_header: str = ""
    select_label: str = ""
    is_update_button_disabled: bool = True
    hide_update_button: bool = False
    show_spinner: bool = True
    chooser_open: bool = False
    error: PathError | None = None


class PathController:
    """Per-record path state and the actions that change it.

    Args:
        record_id: Record the path is drawn for.
        picklist_field: API name of the tracked picklist field.
        closed_ok: Picklist value of the successful closed stage.
        closed_ko: Picklist value of the failed closed stage.
        sink: Where field updates are written.
        last_stage_label: Label of the placeholder last step shown while
            the record is still open.
        resolver: Scenario resolver. Defaults to the built-in copy.
        hide_update_button: Passed through to the view.
        generic_error_message: Passed through to the view.
    """

    def __init__(
        self,
        record_id: str,
        picklist_field: str,
        closed_ok: str,
        closed_ko: str,
        sink: PersistenceSink,
        last_stage_label: str = "Closed",
        resolver: ScenarioResolver | None = None,
        hide_update_button: bool = False,
        generic_error_message: str = GENERIC_ERROR_MESSAGE,
    ):
        self.record_id = record_id
        self.picklist_field = picklist_field
        self.closed_ok = closed_ok
        self.closed_ko = closed_ko
        self.last_stage_label = last_stage_label
        self.hide_update_button = hide_update_button
        self.generic_error_message = generic_error_message
        self._sink = sink
        self._resolver = resolver or ScenarioResolver()

        self._record: RecordSnapshot | None = None
        self._object_info: ObjectInfo | None = None
        self._field_label: str = ""
        self._record_type_id: str | None = None
        self._steps: list[Step] | None = None
        self._current_scenario: Scenario | None = None

        self.selected_step_value: str | None = None
        self.selected_closed_step_value: str | None = None
        self.chooser_open = False
        self.error: PathError | None = None
        self.last_receipt: UpdateReceipt | None = None
        self._committing = False

    @classmethod
    def from_config(cls, config: PathConfig, sink: PersistenceSink) -> PathController:
        """Build a controller from a loaded path.yml."""
        scenarios = build_scenarios(config.labels.layouts(), token=config.labels.token)
        return cls(
            record_id=config.record_id,
            picklist_field=config.picklist_field,
            closed_ok=config.closed_ok,
            closed_ko=config.closed_ko,
            sink=sink,
            last_stage_label=config.last_stage_label,
            resolver=ScenarioResolver(scenarios),
            hide_update_button=config.hide_update_button,
            generic_error_message=config.labels.generic_error,
        )

    # ── Lifecycle ────────────────────────────────────────────────

    @property
    def phase(self) -> Phase:
        if self._committing:
            return Phase.COMMITTING
        if self.is_loaded:
            return Phase.READY
        return Phase.LOADING

    @property
    def is_loaded(self) -> bool:
        """True when record, object schema and steps are all present."""
        return (
            self._record is not None
            and self._object_info is not None
            and self._steps is not None
        )

    @property
    def record_type_id(self) -> str | None:
        return self._record_type_id

    @property
    def steps(self) -> list[Step]:
        return list(self._steps or [])

    @property
    def current_scenario(self) -> Scenario | None:
        return self._current_scenario

    def report_error(self, error: PathError) -> None:
        """Record an error. A later report replaces this one."""
        logger.warning("%s: %s", error.kind, error.message)
        self.error = error

    def on_load_error(self, message: str) -> None:
        """A provider failed; show its message as is and drop the loaded record."""
        self._record = None
        self._current_scenario = None
        self.report_error(PathError.metadata_load(message))

    def on_record_loaded(self, record: RecordSnapshot, object_info: ObjectInfo) -> bool:
        """Take in the record and its object schema.

        Resolves the record type (falling back to the object's master
        record type) and the tracked field's label.

        Returns:
            True if the schema has the tracked field. On failure an
            error is reported and the previous record is dropped.
        """
        field_label = object_info.field_label(self.picklist_field)
        if field_label is None:
            self._record = None
            self._object_info = None
            self._field_label = ""
            self._record_type_id = None
            self._steps = None
            self._current_scenario = None
            self.report_error(
                PathError.metadata_load(
                    f"Field {self.picklist_field} is not available on {object_info.api_name}"
                )
            )
            return False

        record_type_id = record.resolve_record_type_id(object_info)
        if self._record_type_id is not None and record_type_id != self._record_type_id:
            # steps belong to the previous record type
            self._steps = None

        self._record = record
        self._object_info = object_info
        self._field_label = field_label
        self._record_type_id = record_type_id
        logger.debug(
            "Record %s loaded (record type %s)", record.record_id, self._record_type_id
        )
        self._refresh_scenario()
        return True

    def on_metadata_loaded(
        self, picklist_values: dict[str, Sequence[PicklistEntry]]
    ) -> bool:
        """Build and validate the steps from the record type's picklists.

        Args:
            picklist_values: Picklist entries per field, as returned by
                the metadata provider for the current record type.

        Returns:
            True if the steps are usable. On failure an error is
            reported and no scenario is resolved.
        """
        entries = picklist_values.get(self.picklist_field)
        if entries is None:
            self._steps = None
            self._current_scenario = None
            self.report_error(
                PathError.metadata_load(
                    f"Impossible to load {self.picklist_field} values "
                    f"for record type {self._record_type_id}"
                )
            )
            return False

        steps = build_steps(entries)
        error = validate_steps(steps, self.closed_ok, self.closed_ko, self._record_type_id)
        if error is not None:
            self._steps = None
            self._current_scenario = None
            self.report_error(error)
            return False

        self._steps = steps
        logger.debug("Loaded %d steps for %s", len(steps), self.picklist_field)
        self._refresh_scenario()
        return True

    def set_record_id(self, record_id: str) -> None:
        """Point the controller at another record and drop everything loaded."""
        if record_id == self.record_id:
            return
        logger.debug("Record changed %s → %s", self.record_id, record_id)
        self.record_id = record_id
        self._clear_metadata()
        self.error = None

    def _clear_metadata(self) -> None:
        self._record = None
        self._object_info = None
        self._field_label = ""
        self._record_type_id = None
        self._steps = None
        self._current_scenario = None
        self.selected_step_value = None
        self.selected_closed_step_value = None
        self.chooser_open = False

    def _refresh_scenario(self) -> None:
        # Fresh data always re-resolves; partial data never keeps a scenario
        if self.is_loaded:
            self._resolve()
        else:
            self._current_scenario = None

    def _resolve(self) -> None:
        self._current_scenario = self._resolver.resolve(self.scenario_state())

    # ── User actions ─────────────────────────────────────────────

    def select_step(self, step_value: str) -> Scenario | None:
        """The user clicked a step (or the closed-stage placeholder)."""
        if self.phase != Phase.READY:
            logger.debug("Ignoring selection of %r while %s", step_value, self.phase)
            return None
        if not self._is_selectable(step_value):
            logger.warning("%r is not a selectable step, ignoring", step_value)
            return None
        self.selected_step_value = step_value
        self._resolve()
        return self._current_scenario

    def _is_selectable(self, step_value: str) -> bool:
        if step_value == OPEN_MODAL_TO_SELECT_CLOSED_STAGE:
            return not self.is_closed
        return any(step.equals(step_value) for step in self._steps or [])

    def select_closed_outcome(self, value: str) -> bool:
        """The user picked a closed stage in the chooser.

        Only the two closed values are accepted. The scenario does not
        change; the pick only enables confirm_closed_outcome.
        """
        if self.phase != Phase.READY:
            return False
        if value not in (self.closed_ok, self.closed_ko):
            logger.warning("%r is not a closed stage, ignoring", value)
            return False
        self.selected_closed_step_value = value
        return True

    def close_chooser(self) -> None:
        """The user cancelled the chooser."""
        self.chooser_open = False

    def confirm_primary_action(self) -> Signal:
        """The user pressed the action button."""
        if self.phase != Phase.READY:
            logger.debug("Ignoring action while %s", self.phase)
            return Signal.NONE

        scenario = self._current_scenario
        if scenario is None:
            return Signal.NONE

        if scenario.kind == ScenarioKind.MARK_AS_COMPLETE:
            next_step = self.next_step
            if next_step is None:
                logger.warning("No step after %r, nothing to complete", self.current_step.value)
                return Signal.NONE
            if next_step.equals(self.closed_ok) or next_step.equals(self.closed_ko):
                return self._open_chooser()
            assert next_step.value is not None
            return self._commit(next_step.value)

        if scenario.kind == ScenarioKind.MARK_AS_CURRENT:
            assert self.selected_step_value is not None
            return self._commit(self.selected_step_value)

        # select_closed, change_closed
        return self._open_chooser()

    def confirm_closed_outcome(self) -> Signal:
        """The user pressed Save in the chooser.

        Returns:
            CLOSE_CHOOSER once the outcome is written, FAILED if the
            write failed (the chooser is closed either way), NONE if
            nothing was picked.
        """
        if not self.selected_closed_step_value:
            return Signal.NONE
        if self.phase != Phase.READY:
            logger.debug("Ignoring closed outcome while %s", self.phase)
            return Signal.NONE

        signal = self._commit(self.selected_closed_step_value)
        if signal == Signal.NONE:
            return signal
        self.chooser_open = False
        if signal == Signal.FAILED:
            return Signal.FAILED
        return Signal.CLOSE_CHOOSER

    def _open_chooser(self) -> Signal:
        self.chooser_open = True
        return Signal.OPEN_CHOOSER

    def _commit(self, step_value: str) -> Signal:
        """Write ``step_value`` to the record, then drop loaded state."""
        if self._committing:
            return Signal.NONE

        self._committing = True
        update = RecordUpdate(
            record_id=self.record_id,
            field_name=self.picklist_field,
            new_value=step_value,
        )
        logger.info("Updating %s.%s → %s", update.record_id, update.field_name, step_value)

        try:
            receipt = self._sink.update_record(update)
        except Exception as e:
            # Sinks should never raise
            logger.error("Sink %r raised during update: %s", self._sink, e)
            receipt = UpdateReceipt.failure(update, f"Unexpected error: {e}")
        finally:
            self._committing = False

        self.last_receipt = receipt
        self._clear_metadata()

        if receipt.failed:
            self.report_error(PathError.persistence(receipt.error or self.generic_error_message))
            return Signal.FAILED
        return Signal.COMMITTED

    # ── Derived view model ───────────────────────────────────────

    @property
    def current_step(self) -> Step:
        """The step matching the record's field value, or the empty step."""
        if self._record is None or not self._steps:
            return Step.empty()
        live_value = self._record.field_value(self.picklist_field)
        if live_value is None:
            return Step.empty()
        for step in self._steps:
            if step.equals(str(live_value)):
                return step
        return Step.empty()

    @property
    def next_step(self) -> Step | None:
        current = self.current_step
        if current.index is None or not self._steps:
            return None
        next_index = current.index + 1
        if next_index >= len(self._steps):
            return None
        return self._steps[next_index]

    @property
    def is_closed_ok(self) -> bool:
        return self.current_step.equals(self.closed_ok)

    @property
    def is_closed_ko(self) -> bool:
        return self.current_step.equals(self.closed_ko)

    @property
    def is_closed(self) -> bool:
        return self.is_closed_ok or self.is_closed_ko

    @property
    def closed_steps(self) -> list[Step]:
        """The two closed steps, in picklist order."""
        return [
            step
            for step in self._steps or []
            if step.equals(self.closed_ok) or step.equals(self.closed_ko)
        ]

    def scenario_state(self) -> ScenarioState:
        return ScenarioState(
            is_closed_stage=self.is_closed,
            selected_stage=self.selected_step_value,
            current_stage=self.current_step.value,
            open_modal_stage=OPEN_MODAL_TO_SELECT_CLOSED_STAGE,
        )

    def _step_css_class(self, step: Step, current: Step) -> str:
        classes = [CSS_ITEM]

        if step.equals(self.closed_ok):
            classes.append(CSS_WON)
        if step.equals(self.closed_ko):
            classes.append(CSS_LOST)
        if step.equals(self.selected_step_value):
            classes.append(CSS_ACTIVE)

        if current.has_value() and step.equals(current):
            classes.append(CSS_CURRENT)
            if not self.selected_step_value:
                # nothing selected: the current step is also the active one
                classes.append(CSS_ACTIVE)
        elif step.is_before(current) and not self.is_closed_ko:
            classes.append(CSS_COMPLETE)
        else:
            classes.append(CSS_INCOMPLETE)

        return " ".join(classes)

    @property
    def rendered_steps(self) -> list[RenderedStep]:
        """Open steps in order, then one last step for the closed stage.

        The last step is the closed stage the record reached, or a
        placeholder that opens the chooser while the record is open.
        """
        if not self.is_loaded:
            return []

        current = self.current_step
        rendered = [
            RenderedStep.from_step(step, self._step_css_class(step, current))
            for step in self._steps or []
            if not (step.equals(self.closed_ok) or step.equals(self.closed_ko))
        ]

        if self.is_closed:
            last = current
            is_placeholder = False
        else:
            last = Step(value=OPEN_MODAL_TO_SELECT_CLOSED_STAGE, label=self.last_stage_label)
            is_placeholder = True
        rendered.append(
            RenderedStep.from_step(last, self._step_css_class(last, current), is_placeholder)
        )
        return rendered

    @property
    def field_label(self) -> str:
        return self._field_label

    @property
    def select_label(self) -> str:
        """Label of the chooser's select input."""
        return self._field_label

    @property
    def update_button_text(self) -> str:
        if self._current_scenario is None:
            return ""
        return self._current_scenario.layout.get_update_button_text(self._field_label)

    @property
    def modal_header(self) -> str:
        if self._current_scenario is None:
            return ""
        return self._current_scenario.layout.get_modal_header(self._field_label)

    @property
    def is_update_button_disabled(self) -> bool:
        """True if the field is empty and the user selected nothing yet."""
        return not self.current_step.has_value() and not self.selected_step_value

    @property
    def show_spinner(self) -> bool:
        return self._committing or not self.is_loaded

    def view(self) -> PathView:
        scenario = self._current_scenario
        return PathView(
            phase=self.phase,
            record_id=self.record_id,
            field_label=self._field_label,
            current_step=self.current_step.value,
            selected_step=self.selected_step_value,
            scenario=scenario.kind if scenario else None,
            steps=self.rendered_steps,
            closed_steps=self.closed_steps,
            update_button_text=self.update_button_text,
            modal_header=self.modal_header,
            select_label=self.select_label,
            is_update_button_disabled=self.is_update_button_disabled,
            hide_update_button=self.hide_update_button,
            show_spinner=self.show_spinner,
            chooser_open=self.chooser_open,
            error=self.error,
        )
