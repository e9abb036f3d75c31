# domain/run.py
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any


_UNSET = object()


@dataclass
class StepRecord:
    """
    Descriptor of a step being run (or already run) within a pipeline.

    ``result`` stays ``None`` until the step has executed successfully;
    ``has_result`` distinguishes that from a step whose result is ``None``.
    """

    name: str
    _result: Any = field(default=_UNSET, init=False, repr=False)

    @property
    def has_result(self) -> bool:
        return self._result is not _UNSET

    @property
    def result(self) -> Any:
        return None if self._result is _UNSET else self._result

    @result.setter
    def result(self, value: Any) -> None:
        self._result = value
