import time
from typing import Awaitable, Callable, TypeVar

from .types import TimedResult

T = TypeVar("T")


def timed(fn: Callable[[], T]) -> TimedResult[T]:
    """Run ``fn`` once and pair its result with the elapsed wall-clock seconds.

    Exceptions from ``fn`` propagate unchanged; nothing is returned for a failed call.
    """
    t0 = time.perf_counter()
    output = fn()
    return TimedResult(output, time.perf_counter() - t0)


async def timed_async(fn: Callable[[], Awaitable[T]]) -> TimedResult[T]:
    """Awaitable counterpart of :func:`timed` for coroutine functions."""
    t0 = time.perf_counter()
    output = await fn()
    return TimedResult(output, time.perf_counter() - t0)
