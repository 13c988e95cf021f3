# storefront_e2e/core/browser.py
from __future__ import annotations

"""WooCommerce browser
----------------------
The tester object scenarios and page objects talk to: the Playwright driver
plus shop navigation and the retrying `try_*` interactions.
"""

from typing import Optional

from playwright.sync_api import Page

from storefront_e2e.core.driver import PlaywrightDriver
from storefront_e2e.core.executor import Action, InteractionExecutor, RetryPredicate
from storefront_e2e.utils.config import Settings


class WooCommerceBrowser(PlaywrightDriver):
    """Adds WooCommerce-specific helpers for easier shop navigation."""

    CART_PATH = "/cart/"
    LOGIN_PATH = "/wp-login.php"

    FIELD_LOGIN_USERNAME = "#user_login"
    FIELD_LOGIN_PASSWORD = "#user_pass"
    BUTTON_LOGIN = "#wp-submit"
    SELECTOR_ADMIN_BAR = "#wpadminbar"

    def __init__(self, page: Page, settings: Optional[Settings] = None) -> None:
        super().__init__(page, settings)
        self.executor = InteractionExecutor(self, attempts=self.settings.TRY_ACTION_ATTEMPTS)

    # ---------- Retrying interactions ----------

    def try_action(
        self,
        action: Action,
        attempts: Optional[int] = None,
        is_retryable: Optional[RetryPredicate] = None,
    ) -> None:
        """Run `action`, retrying while the target element is not yet clickable."""
        self.executor.execute(action, attempts, is_retryable)

    def try_to_click(self, element: str, scope: Optional[str] = None, attempts: Optional[int] = None) -> None:
        self.executor.click_resilient(element, scope, attempts)

    def try_to_check_option(self, element: str, attempts: Optional[int] = None) -> None:
        self.executor.check_option_resilient(element, attempts)

    def try_to_select_option(self, element: str, option: str, attempts: Optional[int] = None) -> None:
        self.executor.select_option_resilient(element, option, attempts)

    # ---------- Navigation ----------

    def am_on_page(self, path: str) -> None:
        """Open a site-relative path (e.g. '/checkout/')."""
        self.am_on_url(self.settings.url_for(path))

    def am_on_cart_page(self) -> None:
        self.am_on_page(self.CART_PATH)

    def login_as_admin(self) -> None:
        self.login_as(self.settings.ADMIN_USERNAME, self.settings.ADMIN_PASSWORD)

    def login_as(self, username: str, password: str) -> None:
        self.am_on_page(self.LOGIN_PATH)
        self.fill_field(self.FIELD_LOGIN_USERNAME, username)
        self.fill_field(self.FIELD_LOGIN_PASSWORD, password)
        self.try_to_click(self.BUTTON_LOGIN)
        self.wait_for_element(self.SELECTOR_ADMIN_BAR, timeout_ms=self.settings.PAGE_LOAD_TIMEOUT)
        self.log.info(f"Logged in as {username}")


__all__ = ["WooCommerceBrowser"]
