# application/session.py
from __future__ import annotations

from typing import TYPE_CHECKING, Any, Callable, List, Optional

from requests.cookies import RequestsCookieJar

from application.executor.pipeline_runner import PipelineRunner
from application.ports.http_client import HttpClientPort
from application.ports.logger import LoggerPort
from domain.run import StepRecord
from domain.steps.base import Step, maybe_await
from domain.steps.http import HttpRequestSpec

if TYPE_CHECKING:
    from infrastructure.config.settings import TomatoSettings


StepHook = Callable[[StepRecord], Any]
RequestHook = Callable[[Step, HttpRequestSpec], Any]


class Session:
    """
    Context shared by every step of a run.

    Holds the cookie jar, the optional lifecycle hooks and ``last_step``,
    the record of the step that is running or ran most recently. Extra
    keyword arguments are set as attributes so steps and hooks can share
    caller-defined state.

    Hooks may be plain functions or coroutine functions; either way the
    runner waits for them before moving on.
    """

    def __init__(
        self,
        jar: Optional[RequestsCookieJar] = None,
        *,
        before_step: Optional[StepHook] = None,
        after_step: Optional[StepHook] = None,
        before_request: Optional[RequestHook] = None,
        logger: Optional[LoggerPort] = None,
        http_client: Optional[HttpClientPort] = None,
        settings: Optional["TomatoSettings"] = None,
        **extra: Any,
    ):
        self.jar: RequestsCookieJar = jar if jar is not None else RequestsCookieJar()
        self.before_step = before_step
        self.after_step = after_step
        self.before_request = before_request
        self.last_step: Optional[StepRecord] = None
        self._settings = settings
        self._logger = logger
        self._http_client = http_client

        for key, value in extra.items():
            if hasattr(self, key):
                raise TypeError(f"Session option '{key}' collides with a built-in attribute")
            setattr(self, key, value)

    @property
    def settings(self) -> "TomatoSettings":
        if self._settings is None:
            from infrastructure.config.settings import load_settings

            self._settings = load_settings()
        return self._settings

    @property
    def logger(self) -> LoggerPort:
        if self._logger is None:
            from infrastructure.logging.loguru_logger import LoguruLogger

            self._logger = LoguruLogger()
        return self._logger

    @logger.setter
    def logger(self, value: LoggerPort) -> None:
        self._logger = value

    @property
    def http_client(self) -> HttpClientPort:
        """Default client is created on first use and bound to ``jar``."""
        if self._http_client is None:
            from infrastructure.http.requests_client import RequestsSessionHttpClient

            self._http_client = RequestsSessionHttpClient(
                jar=self.jar,
                base_headers=self.settings.base_headers,
                timeout_sec=self.settings.timeout_sec,
            )
        return self._http_client

    async def notify_before_step(self, record: StepRecord) -> None:
        if self.before_step is not None:
            await maybe_await(self.before_step(record))

    async def notify_after_step(self, record: StepRecord) -> None:
        if self.after_step is not None:
            await maybe_await(self.after_step(record))

    async def notify_before_request(self, step: Step, spec: HttpRequestSpec) -> None:
        if self.before_request is not None:
            await maybe_await(self.before_request(step, spec))

    async def run_steps(self, steps: List[Step]) -> Any:
        return await PipelineRunner().run(steps, self)
