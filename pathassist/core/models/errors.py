"""
Reported errors — what went wrong, without raising.

The controller keeps a single PathError: a later report replaces an
earlier one. The surrounding application decides how to show it.
"""

from __future__ import annotations

from enum import StrEnum

from pydantic import BaseModel


class ErrorKind(StrEnum):
    """Kinds of errors the path can report."""

    METADATA_LOAD = "metadata_load"
    MISSING_REQUIRED_VALUE = "missing_required_value"
    INSUFFICIENT_STEPS = "insufficient_steps"
    PERSISTENCE = "persistence"


class PathError(BaseModel):
    """A reported error condition."""

    kind: ErrorKind
    message: str = ""

    @classmethod
    def metadata_load(cls, message: str) -> PathError:
        return cls(kind=ErrorKind.METADATA_LOAD, message=message)

    @classmethod
    def missing_required_value(cls, message: str) -> PathError:
        return cls(kind=ErrorKind.MISSING_REQUIRED_VALUE, message=message)

    @classmethod
    def insufficient_steps(cls, message: str) -> PathError:
        return cls(kind=ErrorKind.INSUFFICIENT_STEPS, message=message)

    @classmethod
    def persistence(cls, message: str) -> PathError:
        return cls(kind=ErrorKind.PERSISTENCE, message=message)

    def __str__(self) -> str:
        return self.message
