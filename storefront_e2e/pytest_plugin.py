# storefront_e2e/pytest_plugin.py
from __future__ import annotations

"""pytest plugin
----------------
Fixtures the scenario classes depend on: one Playwright browser per session,
a fresh context/page per test, store fixtures (DB + REST) and page objects.
Registered through the `pytest11` entry point, so installing the package is
enough for a gateway suite to use them.
"""

from datetime import datetime, timezone
from typing import Iterator

import pytest
from playwright.sync_api import Browser, Page, sync_playwright

from storefront_e2e.core.browser import WooCommerceBrowser
from storefront_e2e.fixtures.database import WooCommerceDB
from storefront_e2e.fixtures.store_api import GatewaySettingsOverrides, Product, StoreAPI
from storefront_e2e.pages.admin.payment_token_editor import PaymentTokenEditor
from storefront_e2e.pages.frontend.add_payment_method import AddPaymentMethod
from storefront_e2e.pages.frontend.checkout import Checkout
from storefront_e2e.pages.frontend.payment_methods import PaymentMethods
from storefront_e2e.pages.frontend.product import ProductPage
from storefront_e2e.utils.config import Settings, get_settings
from storefront_e2e.utils.logger import bind, get_logger, unbind

SHIPPABLE_PRODUCT_NAME = "Shippable 1"

log = get_logger(__name__)


def pytest_configure(config: pytest.Config) -> None:
    config.addinivalue_line("markers", "e2e: drives a real browser against the storefront")


@pytest.hookimpl(hookwrapper=True)
def pytest_runtest_makereport(item: pytest.Item, call: pytest.CallInfo):
    # expose the report of each phase as item.rep_setup / rep_call / rep_teardown
    outcome = yield
    rep = outcome.get_result()
    setattr(item, f"rep_{rep.when}", rep)


# ---------- Session fixtures ----------


@pytest.fixture(scope="session")
def e2e_settings() -> Settings:
    return get_settings()


@pytest.fixture(scope="session")
def e2e_browser(e2e_settings: Settings) -> Iterator[Browser]:
    s = e2e_settings
    with sync_playwright() as p:
        browser_type = getattr(p, s.BROWSER_TYPE.value)
        browser = browser_type.launch(**s.playwright_launch_kwargs())
        log.info(f"Launched {s.BROWSER_TYPE.value} (headless={s.HEADLESS})")
        try:
            yield browser
        finally:
            browser.close()


@pytest.fixture(scope="session")
def store_db(e2e_settings: Settings) -> Iterator[WooCommerceDB]:
    db = WooCommerceDB.from_settings(e2e_settings)
    try:
        yield db
    finally:
        db.dispose()


@pytest.fixture(scope="session")
def store_api(e2e_settings: Settings) -> Iterator[StoreAPI]:
    with StoreAPI(e2e_settings) as api:
        yield api


# ---------- Per-test fixtures ----------


@pytest.fixture
def e2e_page(request: pytest.FixtureRequest, e2e_browser: Browser, e2e_settings: Settings) -> Iterator[Page]:
    """A page in its own browser context; screenshots it when the test body fails."""
    s = e2e_settings
    context = e2e_browser.new_context(**s.playwright_context_kwargs())
    context.set_default_navigation_timeout(s.PAGE_LOAD_TIMEOUT)
    context.set_default_timeout(s.ACTION_TIMEOUT_MS)
    page = context.new_page()
    bind(test=request.node.name)
    try:
        yield page
        rep = getattr(request.node, "rep_call", None)
        if s.SCREENSHOT_ON_FAILURE and rep is not None and rep.failed:
            _save_failure_screenshot(page, request.node.name, s)
    finally:
        unbind("test")
        context.close()


def _save_failure_screenshot(page: Page, test_name: str, settings: Settings) -> None:
    ts = datetime.now(timezone.utc).strftime("%Y%m%dT%H%M%SZ")
    safe = "".join(c if c.isalnum() or c in "-_" else "_" for c in test_name)
    out = settings.OUTPUT_DIR / "failures" / f"{safe}_{ts}.png"
    out.parent.mkdir(parents=True, exist_ok=True)
    page.screenshot(path=str(out), full_page=True)
    log.warning(f"Failure screenshot: {out}")


@pytest.fixture
def tester(e2e_page: Page, e2e_settings: Settings) -> WooCommerceBrowser:
    return WooCommerceBrowser(e2e_page, e2e_settings)


@pytest.fixture
def shippable_product(store_api: StoreAPI) -> Iterator[Product]:
    product = store_api.create_simple_product(SHIPPABLE_PRODUCT_NAME)
    try:
        yield product
    finally:
        store_api.delete_product(product.id)


@pytest.fixture
def gateway_settings(store_api: StoreAPI) -> Iterator[GatewaySettingsOverrides]:
    """Gateway setting changes made through this are reverted after the test."""
    overrides = GatewaySettingsOverrides(store_api)
    try:
        yield overrides
    finally:
        overrides.restore()


# ---------- Page objects ----------


@pytest.fixture
def product_page(tester: WooCommerceBrowser) -> ProductPage:
    return ProductPage(tester)


@pytest.fixture
def checkout_page(tester: WooCommerceBrowser) -> Checkout:
    return Checkout(tester)


@pytest.fixture
def payment_methods_page(tester: WooCommerceBrowser) -> PaymentMethods:
    return PaymentMethods(tester)


@pytest.fixture
def add_payment_method_page(tester: WooCommerceBrowser) -> AddPaymentMethod:
    return AddPaymentMethod(tester)


@pytest.fixture
def token_editor(tester: WooCommerceBrowser) -> PaymentTokenEditor:
    return PaymentTokenEditor(tester)
