"""
Step model — one selectable stage of the tracked picklist field.

Steps are built once when picklist metadata loads and never change
afterwards. Identity is the picklist value; ordering is the index.
The sentinel empty step (no value, no index) stands for "no current
step resolved yet" and compares as neither before, after nor same
as anything.
"""

from __future__ import annotations

from typing import Union

from pydantic import BaseModel, ConfigDict


class Step(BaseModel):
    """A stage of the path."""

    model_config = ConfigDict(frozen=True)

    value: str | None = None
    label: str = ""
    index: int | None = None

    @classmethod
    def empty(cls) -> Step:
        """The sentinel step used when no current step matches."""
        return cls()

    def equals(self, other: Union[Step, str, None]) -> bool:
        """True if ``other`` has the same value.

        ``other`` may be another Step or a bare picklist value.
        """
        if other is None:
            return False
        if isinstance(other, Step):
            return self.value == other.value
        if isinstance(other, str):
            return self.value == other
        return False

    def has_value(self) -> bool:
        return bool(self.value)

    def is_before(self, other: Step) -> bool:
        """True if this step sits earlier in the path than ``other``."""
        if self.index is None or other.index is None:
            return False
        return self.index < other.index

    def is_after(self, other: Step) -> bool:
        """True if this step sits later in the path than ``other``."""
        if self.index is None or other.index is None:
            return False
        return self.index > other.index

    def is_same(self, other: Step) -> bool:
        """True if both steps share the same position."""
        if self.index is None or other.index is None:
            return False
        return self.index == other.index


class RenderedStep(BaseModel):
    """A step as handed to the view, tagged with its CSS classes."""

    value: str | None = None
    label: str = ""
    index: int | None = None
    class_text: str = ""
    is_placeholder: bool = False

    @classmethod
    def from_step(
        cls, step: Step, class_text: str, is_placeholder: bool = False
    ) -> RenderedStep:
        return cls(
            value=step.value,
            label=step.label,
            index=step.index,
            class_text=class_text,
            is_placeholder=is_placeholder,
        )
