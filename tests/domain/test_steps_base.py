# tests/domain/test_steps_base.py
import asyncio

import pytest

from domain.exceptions import MissingPreviousResultError, StepNotImplementedError
from domain.run import StepRecord
from domain.steps.base import MODE_IDENTITY, MODE_RESOLVER, MODE_STATIC, Step, maybe_await


def _record(name, result):
    record = StepRecord(name=name)
    record.result = result
    return record


class EchoStep(Step):
    async def execute(self, session, previous):
        return self.options


class TestStepModes:
    def test_static_options(self):
        step = Step("s", {"url": "https://example.com"})
        assert step.mode == MODE_STATIC
        assert step.options == {"url": "https://example.com"}

    def test_none_options_is_static(self):
        step = Step("s")
        assert step.mode == MODE_STATIC
        assert step.options is None

    def test_true_sentinel_is_identity(self):
        step = Step("s", True)
        assert step.mode == MODE_IDENTITY
        assert step.options is None

    def test_callable_is_resolver(self):
        step = Step("s", lambda prev: prev)
        assert step.mode == MODE_RESOLVER

    def test_repr_contains_name_and_mode(self):
        assert repr(EchoStep("fetch", True)) == "EchoStep(name='fetch', mode='identity')"


class TestConfigure:
    @pytest.mark.asyncio
    async def test_static_configure_keeps_options(self):
        step = Step("s", {"a": 1})
        await step.configure(None, _record("prev", {"b": 2}))
        assert step.options == {"a": 1}

    @pytest.mark.asyncio
    async def test_identity_takes_previous_result_as_is(self):
        prev_result = {"url": "https://example.com/next"}
        step = Step("s", True)

        await step.configure(None, _record("prev", prev_result))

        assert step.options is prev_result

    @pytest.mark.asyncio
    async def test_identity_does_not_await_previous_result(self):
        loop = asyncio.get_running_loop()
        future = loop.create_future()
        step = Step("s", True)

        await step.configure(None, _record("prev", future))

        assert step.options is future

    @pytest.mark.asyncio
    async def test_resolver_called_once_with_previous_result(self):
        calls = []

        def resolver(prev):
            calls.append(prev)
            return prev * 2

        step = Step("s", resolver)
        await step.configure(None, _record("prev", 21))

        assert calls == [21]
        assert step.options == 42

    @pytest.mark.asyncio
    async def test_async_resolver_is_awaited(self):
        async def resolver(prev):
            await asyncio.sleep(0)
            return {"url": prev}

        step = Step("s", resolver)
        await step.configure(None, _record("prev", "https://example.com"))

        assert step.options == {"url": "https://example.com"}

    @pytest.mark.asyncio
    async def test_resolver_without_previous_gets_none(self):
        seen = []
        step = Step("s", lambda prev: seen.append(prev) or "cfg")

        await step.configure(None, None)

        assert seen == [None]
        assert step.options == "cfg"

    @pytest.mark.asyncio
    async def test_resolver_reruns_on_each_configure(self):
        step = Step("s", lambda prev: prev + 1)

        await step.configure(None, _record("p", 1))
        assert step.options == 2
        await step.configure(None, _record("p", 10))
        assert step.options == 11


class TestRun:
    @pytest.mark.asyncio
    async def test_base_execute_fails_loudly(self):
        with pytest.raises(StepNotImplementedError, match="Step has no implementation"):
            await Step("s", {}).execute(None, None)

    @pytest.mark.asyncio
    async def test_run_configures_then_executes(self):
        step = EchoStep("s", lambda prev: prev.upper())
        assert await step.run(None, _record("p", "abc")) == "ABC"

    @pytest.mark.asyncio
    async def test_resolver_failure_skips_execute(self):
        executed = []

        class Tracking(Step):
            async def execute(self, session, previous):
                executed.append(True)

        def resolver(prev):
            raise ValueError("bad config")

        with pytest.raises(ValueError, match="bad config"):
            await Tracking("s", resolver).run(None, None)
        assert executed == []


class TestRequirePrevious:
    def test_missing_previous_raises(self):
        with pytest.raises(MissingPreviousResultError, match="'reader' requires a result"):
            Step("reader").require_previous(None)

    def test_previous_without_result_raises(self):
        with pytest.raises(MissingPreviousResultError):
            Step("reader").require_previous(StepRecord(name="pending"))

    def test_previous_with_result_is_returned(self):
        record = _record("p", None)
        assert Step("reader").require_previous(record) is record


class TestOption:
    def test_option_from_dict(self):
        assert Step("s", {"selector": "a"}).option("selector") == "a"

    def test_option_default_when_missing(self):
        assert Step("s", {}).option("selector", "form") == "form"

    def test_option_default_when_options_none(self):
        assert Step("s").option("selector", "x") == "x"

    def test_option_from_attribute(self):
        class Opts:
            selector = "#login"

        assert Step("s", Opts()).option("selector") == "#login"


@pytest.mark.asyncio
async def test_maybe_await_passes_plain_values():
    assert await maybe_await(3) == 3


@pytest.mark.asyncio
async def test_maybe_await_awaits_coroutines():
    async def f():
        return "done"

    assert await maybe_await(f()) == "done"
