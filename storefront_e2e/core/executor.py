# storefront_e2e/core/executor.py
from __future__ import annotations

"""Resilient interaction executor
---------------------------------
Runs a browser action with a bounded number of attempts. Before each attempt
it waits for in-page AJAX to settle; an "element not yet interactable" failure
is retried, anything else fails fast unless the caller's classifier says
otherwise. Failures are re-raised unchanged.
"""

from typing import Any, Callable, Optional, Protocol

from storefront_e2e.core.failures import FailureKind
from storefront_e2e.utils.logger import get_logger

log = get_logger(__name__)

Action = Callable[[], Any]
RetryPredicate = Callable[[BaseException], bool]

DEFAULT_ATTEMPTS = 3


class BrowserDriver(Protocol):
    """Capabilities the executor needs from the browser layer."""

    def wait_for_async_activity(self, timeout_ms: Optional[int] = None) -> None: ...

    def wait_for_interactable(self, element: str, timeout_ms: Optional[int] = None) -> None: ...

    def click(self, element: str, scope: Optional[str] = None) -> None: ...

    def check_option(self, element: str) -> None: ...

    def select_option(self, element: str, value: str) -> None: ...

    def classify_failure(self, exc: BaseException) -> FailureKind: ...


class InteractionExecutor:
    """
    Bounded-retry wrapper around browser interactions.

    Wrapped actions must be safe to repeat: "click this button" converges,
    "append this row" does not.
    """

    def __init__(self, driver: BrowserDriver, *, attempts: int = DEFAULT_ATTEMPTS) -> None:
        if attempts < 1:
            raise ValueError("attempts must be >= 1")
        self.driver = driver
        self.default_attempts = attempts

    def execute(
        self,
        action: Action,
        attempts: Optional[int] = None,
        is_retryable: Optional[RetryPredicate] = None,
    ) -> None:
        """
        Run `action` up to `attempts` times.

        A failure the driver classifies as ELEMENT_NOT_INTERACTABLE is retried;
        any other failure is retried only when `is_retryable(exc)` is true.
        The failure of the last attempt, or the first non-retryable one, is
        re-raised as is.
        """
        remaining = self.default_attempts if attempts is None else attempts
        if remaining < 1:
            raise ValueError("attempts must be >= 1")
        total = remaining

        while remaining > 0:
            remaining -= 1
            attempt = total - remaining
            try:
                self.driver.wait_for_async_activity()
                action()
                return
            except Exception as exc:
                kind = self.driver.classify_failure(exc)
                if remaining <= 0:
                    if total > 1:
                        log.error(
                            f"Giving up after {total} attempts ({kind.value}): {exc}"
                        )
                    raise
                if kind is FailureKind.ELEMENT_NOT_INTERACTABLE:
                    log.warning(f"Attempt {attempt}/{total} hit a non-interactable element, retrying")
                    continue
                if is_retryable is not None and is_retryable(exc):
                    log.warning(f"Attempt {attempt}/{total} failed ({kind.value}), caller marked it retryable")
                    continue
                raise

    # ---------- Convenience wrappers ----------

    def click_resilient(self, element: str, scope: Optional[str] = None, attempts: Optional[int] = None) -> None:
        def _do() -> None:
            self.driver.wait_for_interactable(element)
            self.driver.click(element, scope)

        self.execute(_do, attempts)

    def check_option_resilient(self, element: str, attempts: Optional[int] = None) -> None:
        def _do() -> None:
            self.driver.wait_for_interactable(element)
            self.driver.check_option(element)

        self.execute(_do, attempts)

    def select_option_resilient(self, element: str, option: str, attempts: Optional[int] = None) -> None:
        def _do() -> None:
            self.driver.wait_for_interactable(element)
            self.driver.select_option(element, option)

        self.execute(_do, attempts)


__all__ = ["Action", "BrowserDriver", "InteractionExecutor", "RetryPredicate", "DEFAULT_ATTEMPTS"]
