"""
Step construction and validation.

Steps come from the picklist entries enabled for the record's record
type. Construction keeps picklist order, drops repeated values and
numbers the survivors from zero, so building twice from the same
payload yields the same sequence.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Sequence

from pathassist.core.models.errors import PathError
from pathassist.core.models.record import PicklistEntry
from pathassist.core.models.step import Step

logger = logging.getLogger(__name__)

# Starting stage plus the two closed ones
MIN_STEPS = 3


def build_steps(entries: Iterable[PicklistEntry]) -> list[Step]:
    """Build the ordered, de-duplicated step list."""
    steps: list[Step] = []
    seen: set[str] = set()
    for entry in entries:
        if entry.value in seen:
            logger.debug("Skipping duplicate picklist value %r", entry.value)
            continue
        seen.add(entry.value)
        steps.append(Step(value=entry.value, label=entry.label, index=len(steps)))
    return steps


def validate_steps(
    steps: Sequence[Step],
    closed_ok: str,
    closed_ko: str,
    record_type_id: str | None,
) -> PathError | None:
    """Check the steps can drive a path with two closed stages.

    All checks run and the last failing one is reported, so a list
    that is both too short and missing a closed value reports
    insufficient steps.

    Returns:
        The error to report, or None if the steps are usable.
    """
    error: PathError | None = None

    if not any(step.equals(closed_ok) for step in steps):
        error = PathError.missing_required_value(
            f"{closed_ok} stage is not available for record type {record_type_id}"
        )

    if not any(step.equals(closed_ko) for step in steps):
        error = PathError.missing_required_value(
            f"{closed_ko} stage is not available for record type {record_type_id}"
        )

    if len(steps) < MIN_STEPS:
        error = PathError.insufficient_steps(
            f"Not enough picklist values are available for record type {record_type_id}."
        )

    return error
