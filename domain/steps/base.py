# domain/steps/base.py
from __future__ import annotations

import inspect
from typing import TYPE_CHECKING, Any, Awaitable, Callable, Optional, Union

from domain.exceptions import MissingPreviousResultError, StepNotImplementedError
from domain.run import StepRecord

if TYPE_CHECKING:
    from application.session import Session


Resolver = Callable[[Any], Union[Any, Awaitable[Any]]]

MODE_STATIC = "static"
MODE_IDENTITY = "identity"
MODE_RESOLVER = "resolver"


async def maybe_await(value: Any) -> Any:
    if inspect.isawaitable(value):
        return await value
    return value


class Step:
    """
    Named unit of pipeline work with a two-phase lifecycle.

    The second constructor argument selects how ``options`` is obtained:

      - ``True``: options become the previous step's result on every run
      - a callable: called with the previous step's result on every run
        (sync or async); its return value becomes the options
      - anything else: static options, used as-is

    ``options`` is rewritten on each run of a resolving step, so a single
    instance must not be run by two pipelines at the same time.
    """

    def __init__(self, name: str, options: Any = None):
        self.name = name
        self._resolver: Optional[Resolver] = None
        self.options: Any = None

        if options is True:
            self._mode = MODE_IDENTITY
        elif callable(options):
            self._mode = MODE_RESOLVER
            self._resolver = options
        else:
            self._mode = MODE_STATIC
            self.options = options

    @property
    def mode(self) -> str:
        return self._mode

    def __repr__(self) -> str:
        return f"{type(self).__name__}(name={self.name!r}, mode={self._mode!r})"

    async def configure(self, session: "Session", previous: Optional[StepRecord]) -> None:
        if self._mode == MODE_STATIC:
            return

        prev_result = previous.result if previous is not None else None
        if self._mode == MODE_IDENTITY:
            self.options = prev_result
        else:
            self.options = await maybe_await(self._resolver(prev_result))

    async def execute(self, session: "Session", previous: Optional[StepRecord]) -> Any:
        raise StepNotImplementedError(f"{type(self).__name__} has no implementation")

    async def run(self, session: "Session", previous: Optional[StepRecord]) -> Any:
        """Configure, then execute. A configure failure means execute never runs."""
        await self.configure(session, previous)
        return await self.execute(session, previous)

    def require_previous(self, previous: Optional[StepRecord]) -> StepRecord:
        if previous is None or not previous.has_result:
            raise MissingPreviousResultError(
                f"{type(self).__name__} '{self.name}' requires a result from a previous step"
            )
        return previous

    def option(self, key: str, default: Any = None) -> Any:
        opts = self.options
        if opts is None:
            return default
        if isinstance(opts, dict):
            return opts.get(key, default)
        return getattr(opts, key, default)
