# application/outcome.py
from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Union

from domain.steps.base import Step


@dataclass(frozen=True)
class Done:
    value: Any = None


@dataclass(frozen=True)
class Continue:
    step: Step


StepOutcome = Union[Done, Continue]


def to_outcome(value: Any) -> StepOutcome:
    """
    Tag a raw step result.
    A Step instance means "run this next, in place"; anything else is final.
    """
    if isinstance(value, Continue):
        if not isinstance(value.step, Step):
            raise TypeError(f"Continue expects a Step, got {type(value.step).__name__}")
        return value
    if isinstance(value, Done):
        return value
    if isinstance(value, Step):
        return Continue(step=value)
    return Done(value=value)
