# storefront_e2e/utils/timing.py
from __future__ import annotations

"""Timing helpers
-----------------
Monotonic clock, a stopwatch, a polling wait for conditions Playwright has no
built-in wait for (e.g. "enabled"), and a decorator that logs how long the
browser waits take.
"""

import time
from typing import Callable, Optional, ParamSpec, TypeVar

from storefront_e2e.utils.logger import get_logger

P = ParamSpec("P")
T = TypeVar("T")


def now_ms() -> int:
    """Monotonic time in milliseconds."""
    return time.monotonic_ns() // 1_000_000


def sleep_ms(ms: int) -> None:
    if ms > 0:
        time.sleep(ms / 1000.0)


class Stopwatch:
    """
    Elapsed milliseconds since construction (or the last `restart()`).

        with Stopwatch() as sw:
            page.reload()
        log.debug(f"reload took {sw.elapsed_ms} ms")
    """

    def __init__(self) -> None:
        self._started = now_ms()
        self._stopped: Optional[int] = None

    def restart(self) -> "Stopwatch":
        self._started, self._stopped = now_ms(), None
        return self

    @property
    def elapsed_ms(self) -> int:
        end = self._stopped if self._stopped is not None else now_ms()
        return max(0, end - self._started)

    def __enter__(self) -> "Stopwatch":
        return self.restart()

    def __exit__(self, exc_type, exc, tb) -> None:
        self._stopped = now_ms()


# ---------------- Polling ----------------

def wait_for(
    predicate: Callable[[], T],
    timeout_ms: int,
    interval_ms: int = 100,
    description: Optional[str] = None,
) -> T:
    """
    Call `predicate` every `interval_ms` until it returns something truthy and
    return that value. The predicate always runs at least once.

    Raises:
        TimeoutError once `timeout_ms` has elapsed without a truthy result.
    """
    sw = Stopwatch()
    while True:
        result = predicate()
        if result:
            return result
        if sw.elapsed_ms >= timeout_ms:
            what = f" waiting for {description}" if description else ""
            raise TimeoutError(f"Timed out after {timeout_ms} ms{what}")
        sleep_ms(max(1, min(interval_ms, timeout_ms - sw.elapsed_ms)))


# ---------------- measure decorator ----------------

def measure(label: str = "", level: str = "DEBUG") -> Callable[[Callable[P, T]], Callable[P, T]]:
    """
    Log the wall time of each call, whether it returns or raises.

        @measure("wait_for_async_activity")
        def wait_for_async_activity(self, timeout_ms=None): ...
    """
    log = get_logger(__name__)
    emit = getattr(log, level.lower(), log.debug)

    def decorator(func: Callable[P, T]) -> Callable[P, T]:
        name = label or func.__name__

        def wrapper(*args: P.args, **kwargs: P.kwargs) -> T:
            sw = Stopwatch()
            try:
                return func(*args, **kwargs)
            finally:
                ms = sw.elapsed_ms
                emit(f"{name} took {ms} ms" if ms < 1000 else f"{name} took {ms / 1000:.2f} s")

        wrapper.__name__ = func.__name__
        wrapper.__qualname__ = func.__qualname__
        wrapper.__doc__ = func.__doc__
        return wrapper

    return decorator


__all__ = ["now_ms", "sleep_ms", "Stopwatch", "wait_for", "measure"]
