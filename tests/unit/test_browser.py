from unittest.mock import MagicMock

import pytest
from playwright.sync_api import Error as PWError

from storefront_e2e.core.browser import WooCommerceBrowser
from storefront_e2e.core.driver import JQUERY_IDLE_JS
from storefront_e2e.utils.config import Settings


@pytest.fixture
def settings():
    return Settings(BASE_URL="http://shop.test", ADMIN_USERNAME="shopadmin", ADMIN_PASSWORD="s3cret", TRY_ACTION_ATTEMPTS=3)


@pytest.fixture
def page():
    return MagicMock(name="page")


def test_locate_css_xpath_and_scope(page, settings):
    b = WooCommerceBrowser(page, settings)

    b.locate("#place_order")
    page.locator.assert_called_with("#place_order")

    b.locate("//tr[@class='token']")
    page.locator.assert_called_with("xpath=//tr[@class='token']")

    b.locate("a.edit", scope="(//tr)[1]")
    page.locator.assert_called_with("xpath=(//tr)[1]")
    page.locator.return_value.locator.assert_called_with("a.edit")


def test_try_to_click_retries_not_clickable(page, settings):
    loc = page.locator.return_value.first
    loc.click.side_effect = [
        PWError("Element is not clickable at point (100, 200). Other element would receive the click"),
        None,
    ]
    b = WooCommerceBrowser(page, settings)

    b.try_to_click("#place_order")

    assert loc.click.call_count == 2
    # jQuery idle wait before each attempt
    assert page.wait_for_function.call_count == 2
    assert page.wait_for_function.call_args.args[0] == JQUERY_IDLE_JS
    assert page.wait_for_function.call_args.kwargs["timeout"] == settings.AJAX_TIMEOUT_MS


def test_try_to_click_gives_up_after_configured_attempts(page, settings):
    loc = page.locator.return_value.first
    loc.click.side_effect = PWError("<div class=\"blockUI\"></div> intercepts pointer events")
    b = WooCommerceBrowser(page, settings)

    with pytest.raises(PWError):
        b.try_to_click("#place_order")

    assert loc.click.call_count == 3


def test_try_to_check_option_fails_fast_on_other_errors(page, settings):
    loc = page.locator.return_value.first
    loc.check.side_effect = PWError("net::ERR_ABORTED")
    b = WooCommerceBrowser(page, settings)

    with pytest.raises(PWError):
        b.try_to_check_option("#terms")

    assert loc.check.call_count == 1


def test_select_option_checks_matching_radio(page, settings):
    loc = page.locator.return_value
    loc.first.evaluate.return_value = "INPUT"
    r1, r2 = MagicMock(), MagicMock()
    r1.get_attribute.return_value = "11"
    r2.get_attribute.return_value = "12"
    loc.all.return_value = [r1, r2]
    b = WooCommerceBrowser(page, settings)

    b.try_to_select_option('input[name="wc-acme-payment-token"]', "12")

    r1.check.assert_not_called()
    r2.check.assert_called_once()

    with pytest.raises(AssertionError):
        b.select_option('input[name="wc-acme-payment-token"]', "99")


def test_select_option_on_select_element(page, settings):
    loc = page.locator.return_value
    loc.first.evaluate.return_value = "SELECT"
    b = WooCommerceBrowser(page, settings)

    b.select_option("#billing_country", "US", force=True)

    loc.first.select_option.assert_called_once_with(value="US", timeout=settings.ACTION_TIMEOUT_MS, force=True)


def test_see_option_is_selected(page, settings):
    loc = page.locator.return_value
    loc.evaluate_all.return_value = [{"value": "12", "text": ""}]
    b = WooCommerceBrowser(page, settings)

    b.see_option_is_selected("[name=default]", "12")
    with pytest.raises(AssertionError):
        b.see_option_is_selected("[name=default]", "11")


def test_see_and_see_in_field(page, settings):
    loc = page.locator.return_value.first
    loc.inner_text.return_value = "Order received"
    loc.input_value.return_value = "1308"
    b = WooCommerceBrowser(page, settings)

    b.see("Order received", ".entry-title")
    b.see_in_field("#last_four", "1308")
    with pytest.raises(AssertionError):
        b.see("Checkout")
    with pytest.raises(AssertionError):
        b.see_in_field("#last_four", "9990")


def test_am_on_page_and_login(page, settings):
    b = WooCommerceBrowser(page, settings)

    b.login_as_admin()

    page.goto.assert_called_once()
    assert page.goto.call_args.args[0] == "http://shop.test/wp-login.php"
    fill = page.locator.return_value.first.fill
    assert [c.args[0] for c in fill.call_args_list] == ["shopadmin", "s3cret"]
    page.locator.return_value.first.click.assert_called_once()


def test_accept_next_popup_registers_one_shot_handler(page, settings):
    b = WooCommerceBrowser(page, settings)

    b.accept_next_popup()

    event, handler = page.once.call_args.args
    assert event == "dialog"
    dialog = MagicMock()
    handler(dialog)
    dialog.accept.assert_called_once()


def test_cart_page_and_current_url(page, settings):
    page.url = "http://shop.test/cart/"
    b = WooCommerceBrowser(page, settings)

    b.am_on_cart_page()

    assert page.goto.call_args.args[0] == "http://shop.test/cart/"
    assert b.grab_current_url() == "http://shop.test/cart/"
