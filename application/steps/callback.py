# application/steps/callback.py
from __future__ import annotations

from typing import TYPE_CHECKING, Any, Optional

from domain.exceptions import StepAssertionError
from domain.run import StepRecord
from domain.steps.base import Step, maybe_await

if TYPE_CHECKING:
    from application.session import Session


def _previous_result(previous: Optional[StepRecord]) -> Any:
    return previous.result if previous is not None else None


class Callback(Step):
    """Options: {"callback": fn}. Returns fn(previous result), awaited if needed."""

    async def execute(self, session: "Session", previous: Optional[StepRecord]) -> Any:
        callback = self.option("callback")
        if not callable(callback):
            raise TypeError(f"{type(self).__name__} '{self.name}' requires a callable 'callback' option")
        return await maybe_await(callback(_previous_result(previous)))


class Assertion(Callback):
    """
    Options: {"callback": check, "explain": fn (optional)}.

    Passes the previous result through when ``check`` is truthy. Otherwise
    fails with "Assertion failed: <name>", followed by " - <explain(prev)>"
    when ``explain`` is given; ``explain`` is only called on failure.
    """

    async def execute(self, session: "Session", previous: Optional[StepRecord]) -> Any:
        success = await super().execute(session, previous)
        prev_result = _previous_result(previous)
        if success:
            return prev_result

        explain = self.option("explain")
        explanation = ""
        if explain is not None:
            explanation = " - " + str(await maybe_await(explain(prev_result)))

        session.logger.warning("assertion.failed", step_name=self.name, explanation=explanation[3:] or None)
        raise StepAssertionError(f"Assertion failed: {self.name}{explanation}")
