# application/executor/pipeline_runner.py
from __future__ import annotations

import time
import uuid
from typing import TYPE_CHECKING, Any, Iterable, Optional, Tuple

from application.outcome import Continue, Done, StepOutcome, to_outcome
from application.ports.logger import LoggerPort
from domain.exceptions import StepFailedError
from domain.run import StepRecord
from domain.steps.base import Step

if TYPE_CHECKING:
    from application.session import Session


class PipelineRunner:
    """
    Runs steps strictly one after another against a single Session.

    Each step is configured and executed with the record of the step before
    it. A step may hand back another Step; that step is run right away in its
    place (with the producing step's record as its previous result) and the
    last non-Step result of the chain becomes the result for that position.

    The first failure stops the run. It is wrapped once in StepFailedError
    naming the step that raised it, which is the inlined step if the failure
    happened inside a chain.
    """

    def __init__(self, run_id: Optional[str] = None):
        self._run_id = run_id

    async def run(self, steps: Iterable[Step], session: "Session") -> Any:
        run_id = self._run_id or uuid.uuid4().hex
        logger = session.logger.bind(run_id=run_id)

        steps = list(steps)
        logger.info("run.start", step_count=len(steps))
        t0 = time.perf_counter()

        previous: Optional[StepRecord] = None
        for index, step in enumerate(steps):
            previous = await self._run_position(step, index, previous, session, logger)

        logger.info("run.end", elapsed_ms=int((time.perf_counter() - t0) * 1000))
        return previous.result if previous is not None else None

    async def _run_position(
        self,
        step: Step,
        index: int,
        previous: Optional[StepRecord],
        session: "Session",
        logger: LoggerPort,
    ) -> StepRecord:
        current: Step = step
        depth = 0

        while True:
            record, outcome = await self._run_single(current, index, depth, previous, session, logger)

            if isinstance(outcome, Done):
                return record

            logger.info(
                "step.inline",
                index=index,
                from_step=current.name,
                to_step=outcome.step.name,
                depth=depth + 1,
            )
            previous = record
            current = outcome.step
            depth += 1

    async def _run_single(
        self,
        step: Step,
        index: int,
        depth: int,
        previous: Optional[StepRecord],
        session: "Session",
        logger: LoggerPort,
    ) -> Tuple[StepRecord, StepOutcome]:
        record = StepRecord(name=step.name)
        session.last_step = record

        logger.info(
            "step.start",
            index=index,
            depth=depth,
            step_name=step.name,
            step_type=type(step).__name__,
        )
        t0 = time.perf_counter()

        try:
            await session.notify_before_step(record)
            outcome = to_outcome(await step.run(session, previous))
        except Exception as e:
            logger.error(
                "step.failed",
                index=index,
                depth=depth,
                step_name=step.name,
                error_type=type(e).__name__,
                error=str(e),
                elapsed_ms=int((time.perf_counter() - t0) * 1000),
            )
            raise StepFailedError(step.name, e) from e

        record.result = outcome.value if isinstance(outcome, Done) else outcome.step

        logger.info(
            "step.end",
            index=index,
            depth=depth,
            step_name=step.name,
            inline=isinstance(outcome, Continue),
            elapsed_ms=int((time.perf_counter() - t0) * 1000),
        )

        await session.notify_after_step(record)
        return record, outcome
