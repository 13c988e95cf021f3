import pytest
from playwright.sync_api import Error as PWError
from playwright.sync_api import TimeoutError as PWTimeoutError

from storefront_e2e.core.failures import (
    FailureKind,
    classify_failure,
    is_not_interactable,
    is_stale_reference,
)


@pytest.mark.parametrize(
    "msg",
    [
        "unknown error: Element <a> is not clickable at point (10, 20). Other element would receive the click",
        "<div class=\"blockUI blockOverlay\"></div> intercepts pointer events",
        "element is not visible",
        "Element Is Not Enabled",
        "element is outside of the viewport",
        "element not interactable",
    ],
)
def test_interactability_messages(msg):
    assert classify_failure(RuntimeError(msg)) is FailureKind.ELEMENT_NOT_INTERACTABLE
    assert is_not_interactable(RuntimeError(msg))


def test_stale_messages():
    exc = RuntimeError("Element is not attached to the DOM")
    assert classify_failure(exc) is FailureKind.STALE_REFERENCE
    assert is_stale_reference(exc)
    assert not is_not_interactable(exc)


def test_playwright_timeout_with_actionability_log_is_not_interactable():
    # Playwright folds the actionability log into the timeout message
    exc = PWTimeoutError(
        "Timeout 5000ms exceeded.\n=========================== logs ===========================\n"
        "waiting for locator(\"#place_order\")\n  - element is not visible - waiting..."
    )
    assert classify_failure(exc) is FailureKind.ELEMENT_NOT_INTERACTABLE


def test_plain_timeouts():
    assert classify_failure(PWTimeoutError("Timeout 10000ms exceeded.")) is FailureKind.TIMEOUT
    assert classify_failure(TimeoutError("waited too long")) is FailureKind.TIMEOUT


def test_other_errors():
    assert classify_failure(PWError("net::ERR_CONNECTION_REFUSED")) is FailureKind.OTHER
    assert classify_failure(AssertionError("Expected to see 'Order received'")) is FailureKind.OTHER
    assert not is_stale_reference(ValueError(""))
