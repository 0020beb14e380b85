# simple_blog/perf.py
import functools
import logging
import time
from contextlib import asynccontextmanager
from typing import AsyncIterator, Callable

from fastapi import Request

logger = logging.getLogger(__name__)


class Timer:
    """Elapsed wall time since construction, frozen once `stop` is called"""

    def __init__(self):
        self.start: float = time.perf_counter()
        self.end: float | None = None

    def stop(self) -> float:
        self.end = time.perf_counter()
        return self.elapsed

    @property
    def elapsed(self) -> float:
        end = self.end if self.end is not None else time.perf_counter()
        return end - self.start


@asynccontextmanager
async def async_perf_log(
    operation: str, logger: logging.Logger = logger
) -> AsyncIterator[Timer]:
    """Times the block, logging how it ended"""
    timer = Timer()
    logger.info(f"Starting: {operation}")
    try:
        yield timer
    except Exception as e:
        logger.error(f"Failed: {operation} after {timer.stop():.3f}s - {e}")
        raise
    logger.info(f"Completed: {operation} in {timer.stop():.3f}s")


def time_async_function(func: Callable) -> Callable:
    """Decorator: wraps each await of `func` in async_perf_log"""
    label = f"Function: {func.__qualname__}"

    @functools.wraps(func)
    async def wrapper(*args, **kwargs):
        async with async_perf_log(label):
            return await func(*args, **kwargs)

    return wrapper


async def performance_middleware(request: Request, call_next):
    """Logs each request and reports its duration in X-Process-Time"""
    operation = f"{request.method} {request.url.path}"
    async with async_perf_log(f"Request {operation}") as timer:
        response = await call_next(request)
        logger.info(f"Request {operation} answered {response.status_code}")

    response.headers["X-Process-Time"] = f"{timer.elapsed:.3f}"
    return response
