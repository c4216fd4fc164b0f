import asyncio
import time

import pytest

from ghscore.timing import timed, timed_async
from ghscore.types import TimedResult


def test_timed_returns_output_and_elapsed():
    result = timed(lambda: {"value": 0.42})
    assert isinstance(result, TimedResult)
    assert result.output == {"value": 0.42}
    assert result.elapsed_seconds >= 0


def test_timed_measures_the_wrapped_work():
    result = timed(lambda: time.sleep(0.02))
    assert result.output is None
    assert result.elapsed_seconds >= 0.015


def test_timed_output_is_identical_object():
    payload = object()
    assert timed(lambda: payload).output is payload


def test_timed_invokes_once():
    calls = []
    timed(lambda: calls.append(1))
    assert calls == [1]


def test_timed_propagates_exceptions_unchanged():
    err = ValueError("boom")

    def fail():
        raise err

    with pytest.raises(ValueError) as excinfo:
        timed(fail)
    assert excinfo.value is err


def test_timed_async():
    async def work():
        await asyncio.sleep(0)
        return 7

    result = asyncio.run(timed_async(work))
    assert result.output == 7
    assert result.elapsed_seconds >= 0


def test_timed_async_propagates():
    async def fail():
        raise KeyError("missing")

    with pytest.raises(KeyError):
        asyncio.run(timed_async(fail))
