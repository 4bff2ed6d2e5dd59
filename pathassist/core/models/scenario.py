"""
Scenario value types — the state snapshot and the copy contract.

ScenarioState is the only input the scenario predicates look at.
ScenarioLayout holds the text templates shown for a scenario: the
header of the closed-stage chooser and the action button label.
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict

# Default placeholder replaced with the tracked field's label
DEFAULT_TOKEN = "{0}"


class ScenarioState(BaseModel):
    """Snapshot of the four facts a scenario is chosen from."""

    model_config = ConfigDict(frozen=True)

    is_closed_stage: bool = False
    selected_stage: str | None = None
    current_stage: str | None = None
    open_modal_stage: str = ""


class RenderedLayout(BaseModel):
    """Layout templates with the field label substituted in."""

    modal_header: str = ""
    update_button_text: str = ""


class ScenarioLayout(BaseModel):
    """Text templates for one scenario.

    Only the first occurrence of ``token`` is replaced in each
    template. An empty template is valid: it means the scenario has
    no such element (e.g. no chooser header for "mark as current").
    """

    model_config = ConfigDict(frozen=True)

    modal_header: str = ""
    update_button_text: str = ""
    token: str = DEFAULT_TOKEN

    def get_modal_header(self, field_label: str) -> str:
        return self._replace_token(self.modal_header, field_label)

    def get_update_button_text(self, field_label: str) -> str:
        return self._replace_token(self.update_button_text, field_label)

    def render(self, field_label: str) -> RenderedLayout:
        return RenderedLayout(
            modal_header=self.get_modal_header(field_label),
            update_button_text=self.get_update_button_text(field_label),
        )

    def _replace_token(self, template: str, field_label: str) -> str:
        return template.replace(self.token, field_label, 1)
