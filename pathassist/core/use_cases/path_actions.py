"""
Path actions — the CLI's view of a path: show it, or move it forward.

Each call builds a fresh session from path.yml and the org data file
it points to, loads the record, applies the requested selection and
reports the resulting view.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path

from pathassist.adapters.file_store import FileOrg
from pathassist.core.config.loader import (
    ConfigError,
    find_config_file,
    load_config,
    resolve_data_file,
)
from pathassist.core.engine.controller import PathController, PathView, Signal
from pathassist.core.models.config import PathConfig
from pathassist.core.models.update import UpdateReceipt
from pathassist.core.use_cases.session import PathSession

logger = logging.getLogger(__name__)


@dataclass
class PathResult:
    """Outcome of showing or advancing a path."""

    config: PathConfig | None = None
    view: PathView | None = None
    signal: Signal | None = None
    receipt: UpdateReceipt | None = None
    needs_closed: bool = False
    error: str | None = None

    def to_dict(self) -> dict:
        result: dict = {}
        if self.error:
            result["error"] = self.error
        if self.needs_closed:
            result["needs_closed"] = True
        if self.signal is not None:
            result["signal"] = self.signal.value
        if self.receipt is not None:
            result["receipt"] = self.receipt.model_dump(mode="json")
        if self.view is not None:
            result["path"] = self.view.model_dump(mode="json")
        return result


def open_session(config_path: Path | None = None) -> tuple[PathConfig, PathSession]:
    """Load path.yml and build a session on its org data file.

    Raises:
        ConfigError: If the configuration cannot be loaded.
    """
    if config_path is None:
        config_path = find_config_file()
    if config_path is None:
        raise ConfigError("No path.yml found.")

    config = load_config(config_path)
    org = FileOrg(resolve_data_file(config, config_path))
    controller = PathController.from_config(config, sink=org)
    session = PathSession(controller, config.object_name, metadata=org, records=org)
    return config, session


def _start(config_path: Path | None, select: str | None) -> tuple[PathResult, PathSession | None]:
    result = PathResult()

    try:
        config, session = open_session(config_path)
    except ConfigError as e:
        result.error = str(e)
        return result, None
    result.config = config

    controller = session.controller
    if not session.load():
        result.error = controller.error.message if controller.error else controller.generic_error_message
        result.view = controller.view()
        return result, None

    if select is not None and controller.select_step(select) is None:
        result.error = f"'{select}' is not a selectable step"
        result.view = controller.view()
        return result, None

    return result, session


def show_path(config_path: Path | None = None, select: str | None = None) -> PathResult:
    """Load the path and resolve the action, optionally after a selection."""
    result, session = _start(config_path, select)
    if session is not None:
        result.view = session.controller.view()
    return result


def advance_path(
    config_path: Path | None = None,
    select: str | None = None,
    closed: str | None = None,
) -> PathResult:
    """Perform the primary action on the path.

    Args:
        config_path: Optional explicit path to path.yml.
        select: Step to select before acting (none = act on the current step).
        closed: Closed stage to commit if the action opens the chooser.

    Returns:
        PathResult with the signal, the receipt of any commit and the
        reloaded view.
    """
    result, session = _start(config_path, select)
    if session is None:
        return result

    controller = session.controller
    signal = session.confirm_primary_action()

    if signal == Signal.OPEN_CHOOSER:
        if closed is None:
            choices = ", ".join(step.value or "" for step in controller.closed_steps)
            result.needs_closed = True
            result.error = f"Choose a closed stage with --closed ({choices})"
        elif not controller.select_closed_outcome(closed):
            result.error = f"'{closed}' is not a closed stage"
        else:
            signal = session.confirm_closed_outcome()
    elif signal == Signal.NONE:
        result.error = "No action is available for this record"
    elif closed is not None:
        logger.info("Ignoring --closed %s: no closed stage to choose", closed)

    result.signal = signal
    if signal in (Signal.COMMITTED, Signal.FAILED, Signal.CLOSE_CHOOSER):
        result.receipt = controller.last_receipt
        if result.receipt is not None and result.receipt.failed:
            result.error = result.receipt.error

    result.view = controller.view()
    return result
