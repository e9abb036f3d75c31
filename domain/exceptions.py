# domain/exceptions.py
from __future__ import annotations


class TomatoError(Exception):
    """Base class for errors raised by steps and the pipeline runner."""


class StepNotImplementedError(TomatoError):
    """The base Step.execute was invoked; concrete steps must override it."""


class MissingPreviousResultError(TomatoError):
    """A step that reads the previous result was run without one."""


class ElementNotFoundError(TomatoError):
    """A selector matched nothing in the previous page."""


class StepAssertionError(TomatoError):
    """An Assertion step's check returned a falsy value."""


class StepFailedError(TomatoError):
    """
    Failure of a single step, annotated by the runner.

    The original exception stays reachable through ``cause`` (and ``__cause__``);
    its text is kept and the step name is appended.
    """

    def __init__(self, step_name: str, cause: BaseException):
        self.step_name = step_name
        self.cause = cause
        super().__init__(step_name, cause)

    @property
    def cause_type(self) -> type:
        return type(self.cause)

    def __str__(self) -> str:
        text = str(self.cause) or type(self.cause).__name__
        return f'{text} [at step "{self.step_name}"]'
