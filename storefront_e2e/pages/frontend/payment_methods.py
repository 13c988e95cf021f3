# storefront_e2e/pages/frontend/payment_methods.py
from __future__ import annotations

"""Payment Methods page object
------------------------------
My Account > Payment methods: the customer's saved payment methods table.
"""

from storefront_e2e.core.browser import WooCommerceBrowser
from storefront_e2e.core.failures import is_stale_reference
from storefront_e2e.pages.selectors import xpath_contains_text, xpath_has_class, xpath_value


class PaymentMethods:

    URL = "/my-account/payment-methods/"

    SELECTOR_PAYMENT_METHODS_TABLE = ".woocommerce-MyAccount-paymentMethods"
    # row for the payment method with ID {token}
    SELECTOR_PAYMENT_METHOD_ROW = (
        f"//tr[{xpath_has_class('payment-method')}]"
        "[descendant::input[@name = 'token-id' and @value = {token}]]"
    )

    TEXT_PAYMENT_METHOD_DELETED = "Payment method deleted."

    def __init__(self, tester: WooCommerceBrowser) -> None:
        self.tester = tester

    @classmethod
    def route(cls) -> str:
        return cls.URL

    def get_payment_method_row_selector(self, token: str) -> str:
        return self.SELECTOR_PAYMENT_METHOD_ROW.replace("{token}", xpath_value(token))

    def get_payment_method_element_selector(self, token: str, selector: str) -> str:
        """XPath for `selector` (a relative XPath step) inside the row of `token`."""
        return f"{self.get_payment_method_row_selector(token)}//{selector}"

    def _row_action_selector(self, token: str, action: str) -> str:
        return self.get_payment_method_element_selector(token, f"a[{xpath_has_class(action)}]")

    def see_payment_method(self, token: str) -> None:
        selector = self.get_payment_method_row_selector(token)
        self.tester.wait_for_element_visible(selector)
        self.tester.see_element(selector)

    def dont_see_payment_method(self, token: str) -> None:
        selector = self.get_payment_method_row_selector(token)
        self.tester.wait_for_element_not_visible(selector)
        self.tester.dont_see_element(selector)

    def see_payment_method_nickname(self, token: str, nickname: str) -> None:
        selector = self.get_payment_method_element_selector(token, xpath_contains_text("div", nickname))
        self.tester.wait_for_element_visible(selector)
        self.tester.see_element(selector)

    def set_payment_method_nickname(self, token: str, nickname: str) -> None:
        self.tester.try_to_click(self._row_action_selector(token, "edit"))
        self.tester.fill_field(
            self.get_payment_method_element_selector(token, "input[@name = 'nickname']"), nickname
        )
        save = self._row_action_selector(token, "save")

        def _save() -> None:
            self.tester.wait_for_interactable(save)
            self.tester.click(save)

        # the row is re-rendered while the edit form opens
        self.tester.try_action(_save, is_retryable=is_stale_reference)

    def delete_payment_method(self, token: str) -> None:
        self.tester.accept_next_popup()
        self.tester.try_to_click(self._row_action_selector(token, "delete"))
        self.tester.wait_for_text(self.TEXT_PAYMENT_METHOD_DELETED)
