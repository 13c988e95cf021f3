# storefront_e2e/core/driver.py
from __future__ import annotations

"""Playwright browser driver
----------------------------
Thin layer over a Playwright sync Page exposing the waits, interactions and
DOM assertions the page objects and the interaction executor rely on.
Selectors are CSS or XPath strings.
"""

from typing import List, Optional

from playwright.sync_api import Dialog, Locator, Page

from storefront_e2e.core.failures import FailureKind, classify_failure
from storefront_e2e.utils.config import Settings, get_settings
from storefront_e2e.utils.logger import get_logger
from storefront_e2e.utils.timing import measure, wait_for


JQUERY_IDLE_JS = "() => typeof window.jQuery === 'undefined' || window.jQuery.active === 0"

# [{value, text}] for selected <option>s and checked radios/checkboxes among the matches
SELECTED_VALUES_JS = """
els => els.flatMap(el => {
  if (el.tagName === 'SELECT') {
    return Array.from(el.selectedOptions).map(o => ({value: o.value, text: o.text.trim()}));
  }
  return el.checked ? [{value: el.value, text: ''}] : [];
})
"""

SCROLL_TO_JS = """
(el, offset) => {
  const r = el.getBoundingClientRect();
  window.scrollTo(window.scrollX + r.left + offset[0], window.scrollY + r.top + offset[1]);
}
"""


def _is_xpath(selector: str) -> bool:
    return selector.startswith("/") or selector.startswith("(")


class PlaywrightDriver:
    """Browser capabilities over one Playwright page."""

    def __init__(self, page: Page, settings: Optional[Settings] = None) -> None:
        self.page = page
        self.settings = settings or get_settings()
        self.log = get_logger(__name__)

    # ---------- Locating ----------

    def locate(self, selector: str, scope: Optional[str] = None) -> Locator:
        target = f"xpath={selector}" if _is_xpath(selector) else selector
        if scope:
            root = f"xpath={scope}" if _is_xpath(scope) else scope
            return self.page.locator(root).locator(target)
        return self.page.locator(target)

    # ---------- Failure classification ----------

    def classify_failure(self, exc: BaseException) -> FailureKind:
        return classify_failure(exc)

    # ---------- Waits ----------

    @measure("wait_for_async_activity")
    def wait_for_async_activity(self, timeout_ms: Optional[int] = None) -> None:
        """Block until jQuery reports no in-flight AJAX requests (no-op without jQuery)."""
        self.page.wait_for_function(
            JQUERY_IDLE_JS,
            timeout=timeout_ms if timeout_ms is not None else self.settings.AJAX_TIMEOUT_MS,
        )

    def wait_for_interactable(self, element: str, timeout_ms: Optional[int] = None) -> None:
        """Wait until the first match is visible and enabled."""
        timeout = timeout_ms if timeout_ms is not None else self.settings.WAIT_TIMEOUT_MS
        loc = self.locate(element).first
        loc.wait_for(state="visible", timeout=timeout)
        wait_for(loc.is_enabled, timeout, description=f"{element} enabled")

    wait_for_element_clickable = wait_for_interactable

    def wait_for_element(self, element: str, timeout_ms: Optional[int] = None) -> None:
        self.locate(element).first.wait_for(state="attached", timeout=self._wait_timeout(timeout_ms))

    def wait_for_element_visible(self, element: str, timeout_ms: Optional[int] = None) -> None:
        self.locate(element).first.wait_for(state="visible", timeout=self._wait_timeout(timeout_ms))

    def wait_for_element_not_visible(self, element: str, timeout_ms: Optional[int] = None) -> None:
        self.locate(element).first.wait_for(state="hidden", timeout=self._wait_timeout(timeout_ms))

    def wait_for_text(self, text: str, timeout_ms: Optional[int] = None, scope: Optional[str] = None) -> None:
        root = self.locate(scope) if scope else self.page
        root.get_by_text(text).first.wait_for(state="visible", timeout=self._wait_timeout(timeout_ms))

    def _wait_timeout(self, timeout_ms: Optional[int]) -> int:
        return timeout_ms if timeout_ms is not None else self.settings.WAIT_TIMEOUT_MS

    # ---------- Navigation ----------

    def am_on_url(self, url: str) -> None:
        self.log.debug(f"Navigating to {url}")
        self.page.goto(url, wait_until="domcontentloaded", timeout=self.settings.PAGE_LOAD_TIMEOUT)

    def reload_page(self) -> None:
        self.page.reload(wait_until="domcontentloaded", timeout=self.settings.PAGE_LOAD_TIMEOUT)

    def grab_current_url(self) -> str:
        return self.page.url or ""

    # ---------- Interactions ----------

    def click(self, element: str, scope: Optional[str] = None) -> None:
        self.locate(element, scope).first.click(timeout=self.settings.ACTION_TIMEOUT_MS)

    def check_option(self, element: str) -> None:
        self.locate(element).first.check(timeout=self.settings.ACTION_TIMEOUT_MS)

    def select_option(self, element: str, value: str, force: bool = False) -> None:
        """
        Choose `value` on a <select>, or check the radio whose value matches
        among the elements `element` resolves to.
        """
        loc = self.locate(element)
        timeout = self.settings.ACTION_TIMEOUT_MS
        if loc.first.evaluate("el => el.tagName") == "SELECT":
            loc.first.select_option(value=value, timeout=timeout, force=force)
            return
        for candidate in loc.all():
            if candidate.get_attribute("value") == value:
                candidate.check(timeout=timeout, force=force)
                return
        raise AssertionError(f"No option with value {value!r} in {element}")

    def fill_field(self, element: str, value: str) -> None:
        self.locate(element).first.fill(value, timeout=self.settings.ACTION_TIMEOUT_MS)

    def scroll_to(self, element: str, offset_x: int = 0, offset_y: int = 0) -> None:
        self.locate(element).first.evaluate(SCROLL_TO_JS, [offset_x, offset_y])

    def accept_next_popup(self) -> None:
        """Accept the next alert/confirm dialog. Call before the action that opens it."""
        def _accept(dialog: Dialog) -> None:
            self.log.debug(f"Accepting {dialog.type} dialog: {dialog.message}")
            dialog.accept()

        self.page.once("dialog", _accept)

    # ---------- Assertions ----------

    def see(self, text: str, scope: Optional[str] = None) -> None:
        body = self.locate(scope or "body").first.inner_text(timeout=self.settings.WAIT_TIMEOUT_MS)
        if text not in body:
            raise AssertionError(f"Expected to see {text!r} in {scope or 'page'}")

    def see_element(self, element: str) -> None:
        if not self.locate(element).first.is_visible():
            raise AssertionError(f"Expected element {element} to be visible")

    def dont_see_element(self, element: str) -> None:
        if self.locate(element).first.is_visible():
            raise AssertionError(f"Expected element {element} not to be visible")

    def see_in_field(self, element: str, value: str) -> None:
        actual = self.locate(element).first.input_value(timeout=self.settings.WAIT_TIMEOUT_MS)
        if actual != value:
            raise AssertionError(f"Expected {element} to contain {value!r}, got {actual!r}")

    def see_option_is_selected(self, element: str, option: str) -> None:
        selected: List[dict] = self.locate(element).evaluate_all(SELECTED_VALUES_JS)
        if not any(option in (s.get("value"), s.get("text")) for s in selected):
            found = [s.get("value") for s in selected]
            raise AssertionError(f"Expected {option!r} selected in {element}, selected: {found}")


__all__ = ["PlaywrightDriver", "JQUERY_IDLE_JS"]
