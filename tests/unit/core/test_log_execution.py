"""Unit tests for log_execution and LoggingContext."""

import pytest
import structlog
from structlog.testing import capture_logs

from rolehex.core.logging import LoggingContext, log_execution
from rolehex.domain.exceptions import DuplicateRoleError

traced = log_execution("SERVICE", (DuplicateRoleError,))


class Worker:
    @traced
    async def succeed(self, value):
        return value * 2

    @traced
    async def reject(self):
        raise DuplicateRoleError.for_name("ADMIN")

    @traced
    async def explode(self):
        raise RuntimeError("boom")

    @traced
    async def numbers(self, limit):
        for i in range(limit):
            yield i

    @traced
    async def broken_stream(self):
        yield 1
        raise RuntimeError("stream broke")


def _events(logs, name):
    return [entry for entry in logs if entry["event"] == name]


@pytest.mark.asyncio
async def test_logs_entry_and_completion():
    with capture_logs() as logs:
        assert await Worker().succeed(21) == 42

    started = _events(logs, "Executing")[0]
    completed = _events(logs, "Completed")[0]
    assert started["layer"] == "SERVICE"
    assert started["operation"] == "Worker.succeed"
    assert started["args"] == ["21"]
    assert completed["duration_ms"] >= 0


@pytest.mark.asyncio
async def test_expected_error_logged_as_rejection():
    with capture_logs() as logs:
        with pytest.raises(DuplicateRoleError):
            await Worker().reject()

    rejected = _events(logs, "Operation rejected")
    assert len(rejected) == 1
    assert rejected[0]["log_level"] == "info"
    assert rejected[0]["exc_type"] == "DuplicateRoleError"
    assert not _events(logs, "Operation failed")


@pytest.mark.asyncio
async def test_unexpected_error_logged_as_failure():
    with capture_logs() as logs:
        with pytest.raises(RuntimeError, match="boom"):
            await Worker().explode()

    failed = _events(logs, "Operation failed")
    assert len(failed) == 1
    assert failed[0]["log_level"] == "error"
    assert not _events(logs, "Completed")


@pytest.mark.asyncio
async def test_async_generator_completes_after_exhaustion():
    with capture_logs() as logs:
        items = [i async for i in Worker().numbers(3)]

    assert items == [0, 1, 2]
    assert len(_events(logs, "Completed")) == 1
    assert _events(logs, "Completed")[0]["operation"] == "Worker.numbers"


@pytest.mark.asyncio
async def test_async_generator_failure_is_logged_and_raised():
    received = []
    with capture_logs() as logs:
        with pytest.raises(RuntimeError, match="stream broke"):
            async for item in Worker().broken_stream():
                received.append(item)

    assert received == [1]
    assert len(_events(logs, "Operation failed")) == 1


@pytest.mark.asyncio
async def test_slow_operation_warning(monkeypatch):
    monkeypatch.setenv("ROLEHEX_SLOW_OPERATION_THRESHOLD_MS", "-1")

    with capture_logs() as logs:
        await Worker().succeed(1)

    slow = _events(logs, "Slow operation detected")
    assert len(slow) == 1
    assert slow[0]["log_level"] == "warning"


def test_long_arguments_are_truncated():
    from rolehex.core.logging import _format_args

    formatted = _format_args(("x" * 500,), {"flag": True})

    assert len(formatted[0]) == 100
    assert formatted[0].endswith("...")
    assert formatted[1] == "flag=True"


class TrackedStream:
    def __init__(self):
        self.closed = False

    @traced
    async def items(self):
        try:
            for i in range(10):
                yield i
        finally:
            self.closed = True


@pytest.mark.asyncio
async def test_async_generator_closes_inner_stream_when_consumer_stops_early():
    owner = TrackedStream()
    stream = owner.items()

    async for item in stream:
        if item == 1:
            break
    await stream.aclose()

    assert owner.closed is True


def test_logging_context_binds_and_restores_values():
    structlog.contextvars.bind_contextvars(command="outer")

    with LoggingContext(command="create-role", role_name="ADMIN"):
        bound = structlog.contextvars.get_contextvars()
        assert bound["command"] == "create-role"
        assert bound["role_name"] == "ADMIN"

    restored = structlog.contextvars.get_contextvars()
    assert restored["command"] == "outer"
    assert "role_name" not in restored
    structlog.contextvars.clear_contextvars()


def test_logging_context_unbinds_on_error():
    with pytest.raises(ValueError):
        with LoggingContext(command="list-roles"):
            raise ValueError("boom")

    assert "command" not in structlog.contextvars.get_contextvars()
