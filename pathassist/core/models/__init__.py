"""
Domain models — Pydantic types for the path assistant.

All models are re-exported here for convenient access:

    from pathassist.core.models import Step, ScenarioState, ScenarioLayout, PathError
"""

from pathassist.core.models.config import (
    GENERIC_ERROR_MESSAGE,
    LabelsConfig,
    LayoutLabels,
    PathConfig,
)
from pathassist.core.models.errors import ErrorKind, PathError
from pathassist.core.models.record import (
    FieldInfo,
    ObjectInfo,
    PicklistEntry,
    RecordSnapshot,
    RecordTypeInfo,
)
from pathassist.core.models.scenario import (
    DEFAULT_TOKEN,
    RenderedLayout,
    ScenarioLayout,
    ScenarioState,
)
from pathassist.core.models.step import RenderedStep, Step
from pathassist.core.models.update import RecordUpdate, UpdateReceipt

__all__ = [
    "DEFAULT_TOKEN",
    "GENERIC_ERROR_MESSAGE",
    # errors.py
    "ErrorKind",
    # record.py
    "FieldInfo",
    # config.py
    "LabelsConfig",
    "LayoutLabels",
    "ObjectInfo",
    "PathConfig",
    "PathError",
    "PicklistEntry",
    "RecordSnapshot",
    "RecordTypeInfo",
    # update.py
    "RecordUpdate",
    # scenario.py
    "RenderedLayout",
    # step.py
    "RenderedStep",
    "ScenarioLayout",
    "ScenarioState",
    "Step",
    "UpdateReceipt",
]
