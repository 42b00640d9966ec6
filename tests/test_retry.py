"""Tests for the backoff retrier."""

import pytest

from llm.retry import retry_with_backoff


class Flaky:
    def __init__(self, failures, result="ok"):
        self.failures = failures
        self.result = result
        self.calls = 0
        self.error = RuntimeError("boom")

    async def __call__(self):
        self.calls += 1
        if self.calls <= self.failures:
            raise self.error
        return self.result


@pytest.mark.asyncio
async def test_first_call_succeeds(recording_sleep):
    op = Flaky(failures=0)
    assert await retry_with_backoff(op, sleep=recording_sleep) == "ok"
    assert op.calls == 1
    assert recording_sleep.delays == []


@pytest.mark.asyncio
async def test_recovers_after_failures(recording_sleep):
    op = Flaky(failures=2)
    assert await retry_with_backoff(op, max_attempts=3, initial_delay_ms=1000, sleep=recording_sleep) == "ok"
    assert op.calls == 3
    assert recording_sleep.delays == [1.0, 2.0]


@pytest.mark.asyncio
async def test_exhaustion_reraises_last_error(recording_sleep):
    op = Flaky(failures=100)
    with pytest.raises(RuntimeError) as exc:
        await retry_with_backoff(op, max_attempts=3, initial_delay_ms=1000, sleep=recording_sleep)

    assert exc.value is op.error
    assert op.calls == 4
    assert recording_sleep.delays == [1.0, 2.0, 4.0]


@pytest.mark.asyncio
async def test_zero_retries_calls_once(recording_sleep):
    op = Flaky(failures=1)
    with pytest.raises(RuntimeError):
        await retry_with_backoff(op, max_attempts=0, sleep=recording_sleep)
    assert op.calls == 1
    assert recording_sleep.delays == []
