"""
PathConfig — what path to draw, for which record, with which copy.

Loaded from path.yml. The required keys name the record and the
picklist field; ``labels`` optionally replaces the built-in copy of
the four scenarios.
"""

from __future__ import annotations

from pydantic import BaseModel, Field, model_validator

from pathassist.core.models.scenario import DEFAULT_TOKEN, ScenarioLayout

GENERIC_ERROR_MESSAGE = (
    "An unexpected error occurred. Please contact your System Administrator."
)


class LayoutLabels(BaseModel):
    """Copy for one scenario."""

    modal_header: str = ""
    update_button_text: str = ""


class LabelsConfig(BaseModel):
    """Custom labels. Unset scenarios keep the built-in copy."""

    token: str = DEFAULT_TOKEN
    mark_as_complete: LayoutLabels | None = None
    mark_as_current: LayoutLabels | None = None
    select_closed: LayoutLabels | None = None
    change_closed: LayoutLabels | None = None
    generic_error: str = GENERIC_ERROR_MESSAGE

    def layouts(self) -> dict[str, ScenarioLayout]:
        """Layouts for the scenarios that have custom copy, keyed by scenario name."""
        result: dict[str, ScenarioLayout] = {}
        for name in ("mark_as_complete", "mark_as_current", "select_closed", "change_closed"):
            labels: LayoutLabels | None = getattr(self, name)
            if labels is None:
                continue
            result[name] = ScenarioLayout(
                modal_header=labels.modal_header,
                update_button_text=labels.update_button_text,
                token=self.token,
            )
        return result


class PathConfig(BaseModel):
    """Root configuration, loaded from path.yml."""

    object_name: str
    record_id: str
    picklist_field: str
    closed_ok: str
    closed_ko: str
    last_stage_label: str = "Closed"
    hide_update_button: bool = False

    data_file: str = "org.yml"
    labels: LabelsConfig = Field(default_factory=LabelsConfig)

    @model_validator(mode="after")
    def _distinct_closed_values(self) -> PathConfig:
        if self.closed_ok == self.closed_ko:
            raise ValueError("closed_ok and closed_ko must be different values")
        return self
