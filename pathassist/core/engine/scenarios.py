"""
Scenarios — which single user interaction is valid right now.

There are exactly four scenarios. Each one is a predicate over a
ScenarioState plus the layout shown when it applies. They are
evaluated in a fixed priority order and the first match wins:

    1. mark_as_complete  open record, nothing else selected
    2. mark_as_current   another step selected
    3. select_closed     open record, closed-stage placeholder selected
    4. change_closed     closed record, nothing else selected

mark_as_complete and mark_as_current can both hold for the same state
only through ordering, never by predicate alone, so the order of
SCENARIO_ORDER is part of the contract.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterable, Mapping
from dataclasses import dataclass
from enum import StrEnum

from pathassist.core.models.scenario import DEFAULT_TOKEN, ScenarioLayout, ScenarioState

logger = logging.getLogger(__name__)


class ScenarioKind(StrEnum):
    """The closed set of user interactions."""

    MARK_AS_COMPLETE = "mark_as_complete"
    MARK_AS_CURRENT = "mark_as_current"
    SELECT_CLOSED = "select_closed"
    CHANGE_CLOSED = "change_closed"


# ── Predicates ──────────────────────────────────────────────────────


def _mark_as_complete(state: ScenarioState) -> bool:
    if state.is_closed_stage:
        return False
    return not state.selected_stage or state.selected_stage == state.current_stage


def _mark_as_current(state: ScenarioState) -> bool:
    if state.selected_stage == state.current_stage:
        return False
    if state.is_closed_stage:
        return bool(state.selected_stage)
    return bool(state.selected_stage) and state.selected_stage != state.open_modal_stage


def _select_closed(state: ScenarioState) -> bool:
    return not state.is_closed_stage and state.selected_stage == state.open_modal_stage


def _change_closed(state: ScenarioState) -> bool:
    if not state.is_closed_stage:
        return False
    return not state.selected_stage or state.selected_stage == state.current_stage


_PREDICATES: dict[ScenarioKind, Callable[[ScenarioState], bool]] = {
    ScenarioKind.MARK_AS_COMPLETE: _mark_as_complete,
    ScenarioKind.MARK_AS_CURRENT: _mark_as_current,
    ScenarioKind.SELECT_CLOSED: _select_closed,
    ScenarioKind.CHANGE_CLOSED: _change_closed,
}

SCENARIO_ORDER: tuple[ScenarioKind, ...] = (
    ScenarioKind.MARK_AS_COMPLETE,
    ScenarioKind.MARK_AS_CURRENT,
    ScenarioKind.SELECT_CLOSED,
    ScenarioKind.CHANGE_CLOSED,
)

DEFAULT_LAYOUTS: dict[ScenarioKind, ScenarioLayout] = {
    ScenarioKind.MARK_AS_COMPLETE: ScenarioLayout(
        modal_header="Select Closed {0}",
        update_button_text="Mark {0} as Complete",
    ),
    ScenarioKind.MARK_AS_CURRENT: ScenarioLayout(
        modal_header="",
        update_button_text="Mark as Current {0}",
    ),
    ScenarioKind.SELECT_CLOSED: ScenarioLayout(
        modal_header="Select Closed {0}",
        update_button_text="Select Closed {0}",
    ),
    ScenarioKind.CHANGE_CLOSED: ScenarioLayout(
        modal_header="Select Closed {0}",
        update_button_text="Change Closed {0}",
    ),
}


@dataclass(frozen=True)
class Scenario:
    """One user interaction: a predicate and the layout that goes with it."""

    kind: ScenarioKind
    layout: ScenarioLayout

    def applies_to_state(self, state: ScenarioState) -> bool:
        return _PREDICATES[self.kind](state)


def build_scenarios(
    layouts: Mapping[ScenarioKind, ScenarioLayout] | None = None,
    token: str = DEFAULT_TOKEN,
) -> tuple[Scenario, ...]:
    """Build the four scenarios in priority order.

    Args:
        layouts: Per-scenario layout overrides. Missing kinds use the
            default copy.
        token: Placeholder applied to the default layouts.

    Returns:
        Scenarios ordered as SCENARIO_ORDER.
    """
    overrides = dict(layouts or {})
    scenarios = []
    for kind in SCENARIO_ORDER:
        layout = overrides.get(kind)
        if layout is None:
            layout = DEFAULT_LAYOUTS[kind].model_copy(update={"token": token})
        scenarios.append(Scenario(kind=kind, layout=layout))
    return tuple(scenarios)


def resolve_scenario(
    state: ScenarioState, scenarios: Iterable[Scenario]
) -> Scenario | None:
    """Return the first scenario that applies to ``state``, or None."""
    for scenario in scenarios:
        if scenario.applies_to_state(state):
            return scenario
    return None


class ScenarioResolver:
    """First-match-wins evaluator over a fixed, ordered scenario list."""

    def __init__(self, scenarios: Iterable[Scenario] | None = None):
        self._scenarios: tuple[Scenario, ...] = (
            tuple(scenarios) if scenarios is not None else build_scenarios()
        )

    @property
    def scenarios(self) -> tuple[Scenario, ...]:
        return self._scenarios

    def get(self, kind: ScenarioKind) -> Scenario | None:
        """Look up a scenario by kind."""
        for scenario in self._scenarios:
            if scenario.kind == kind:
                return scenario
        return None

    def resolve(self, state: ScenarioState) -> Scenario | None:
        scenario = resolve_scenario(state, self._scenarios)
        logger.debug(
            "Resolved %s for closed=%s selected=%r current=%r",
            scenario.kind if scenario else "no scenario",
            state.is_closed_stage,
            state.selected_stage,
            state.current_stage,
        )
        return scenario
