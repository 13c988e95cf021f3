# storefront_e2e/core/failures.py
from __future__ import annotations

"""Driver failure classification
--------------------------------
Maps exceptions raised by browser interactions to a small set of structured
kinds, so retry decisions match on a kind instead of on raw driver prose.
"""

from enum import Enum

from playwright.sync_api import TimeoutError as PWTimeoutError


class FailureKind(str, Enum):
    ELEMENT_NOT_INTERACTABLE = "element_not_interactable"
    STALE_REFERENCE = "stale_reference"
    TIMEOUT = "timeout"
    OTHER = "other"


# Lowercase fragments. Playwright folds the actionability log into the
# TimeoutError message, WebDriver-backed grids report "is not clickable at point".
NOT_INTERACTABLE_PATTERNS = (
    "is not clickable at point",
    "intercepts pointer events",
    "element is not visible",
    "element is not enabled",
    "element is outside of the viewport",
    "element is not stable",
    "not interactable",
)

STALE_REFERENCE_PATTERNS = (
    "not attached to the dom",
    "element is detached",
    "stale element",
)


def _message(exc: BaseException) -> str:
    # playwright.Error keeps the full text on .message
    msg = getattr(exc, "message", None)
    if not isinstance(msg, str) or not msg:
        msg = str(exc)
    return msg.lower()


def classify_failure(exc: BaseException) -> FailureKind:
    """Return the structured kind for a failure raised by a browser interaction."""
    msg = _message(exc)
    if any(p in msg for p in NOT_INTERACTABLE_PATTERNS):
        return FailureKind.ELEMENT_NOT_INTERACTABLE
    if any(p in msg for p in STALE_REFERENCE_PATTERNS):
        return FailureKind.STALE_REFERENCE
    if isinstance(exc, (PWTimeoutError, TimeoutError)):
        return FailureKind.TIMEOUT
    return FailureKind.OTHER


def is_not_interactable(exc: BaseException) -> bool:
    return classify_failure(exc) is FailureKind.ELEMENT_NOT_INTERACTABLE


def is_stale_reference(exc: BaseException) -> bool:
    """Ready-made `is_retryable` predicate for callers that re-query on every attempt."""
    return classify_failure(exc) is FailureKind.STALE_REFERENCE


__all__ = [
    "FailureKind",
    "NOT_INTERACTABLE_PATTERNS",
    "STALE_REFERENCE_PATTERNS",
    "classify_failure",
    "is_not_interactable",
    "is_stale_reference",
]
