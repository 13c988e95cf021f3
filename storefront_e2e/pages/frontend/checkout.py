# storefront_e2e/pages/frontend/checkout.py
from __future__ import annotations

"""Checkout page object
-----------------------
Billing form, payment method list and the Place order button.
"""

from storefront_e2e.core.browser import WooCommerceBrowser


DEFAULT_BILLING_DETAILS = {
    "first_name": "John",
    "last_name": "Doe",
    "address_1": "1234 Main St",
    "city": "San Francisco",
    "postcode": "94107",
    "phone": "8005551234",
    "email": "john.doe@example.com",
}


class Checkout:

    URL = "/checkout/"

    BUTTON_PLACE_ORDER = "#place_order"

    FIELD_BILLING = "#billing_{name}"
    FIELD_BILLING_COUNTRY = "#billing_country"
    FIELD_BILLING_STATE = "#billing_state"

    # {gateway_id} is the dasherized gateway ID
    FIELD_TOKENIZE_PAYMENT_METHOD = 'form input[id="wc-{gateway_id}-tokenize-payment-method"]'
    FIELD_SAVED_PAYMENT_METHOD = 'form input[id="wc-{gateway_id}-payment-token-{token}"]'
    FIELD_USE_NEW_PAYMENT_METHOD = "form input[id$=use-new-payment-method]"
    FIELD_PAYMENT_METHOD = "#payment_method_{gateway_id}"

    SELECTOR_PAYMENT_METHOD_TITLE = 'label[for="payment_method_{gateway_id}"]'

    TEXT_USE_NEW_CARD = "Use a new card"

    def __init__(self, tester: WooCommerceBrowser) -> None:
        self.tester = tester

    @classmethod
    def route(cls) -> str:
        return cls.URL

    # ---------- Selectors ----------

    @classmethod
    def tokenize_payment_method_selector(cls, gateway_id_dasherized: str) -> str:
        return cls.FIELD_TOKENIZE_PAYMENT_METHOD.replace("{gateway_id}", gateway_id_dasherized)

    @classmethod
    def saved_payment_method_selector(cls, gateway_id_dasherized: str, token: str) -> str:
        return (
            cls.FIELD_SAVED_PAYMENT_METHOD
            .replace("{gateway_id}", gateway_id_dasherized)
            .replace("{token}", token)
        )

    @classmethod
    def payment_method_title_selector(cls, gateway_id: str) -> str:
        return cls.SELECTOR_PAYMENT_METHOD_TITLE.replace("{gateway_id}", gateway_id)

    # ---------- Actions ----------

    def fill_billing_details(self, details: dict[str, str] | None = None, country: str = "US", state: str = "CA") -> None:
        """Fill the billing form; country/state selects are enhanced widgets, so the hidden <select> is forced."""
        fields = dict(DEFAULT_BILLING_DETAILS)
        fields.update(details or {})
        self.tester.wait_for_element_visible(self.FIELD_BILLING.replace("{name}", "first_name"))
        self.tester.select_option(self.FIELD_BILLING_COUNTRY, country, force=True)
        self.tester.wait_for_async_activity()
        self.tester.select_option(self.FIELD_BILLING_STATE, state, force=True)
        for name, value in fields.items():
            self.tester.fill_field(self.FIELD_BILLING.replace("{name}", name), value)
        # totals refresh over AJAX once the address changes
        self.tester.wait_for_async_activity()

    def select_payment_method(self, gateway_id: str) -> None:
        self.tester.try_to_check_option(self.FIELD_PAYMENT_METHOD.replace("{gateway_id}", gateway_id))

    def place_order(self) -> None:
        self.tester.try_to_click(self.BUTTON_PLACE_ORDER)

    # ---------- Assertions ----------

    def see_payment_method_title(self, gateway_id: str, title: str) -> None:
        selector = self.payment_method_title_selector(gateway_id)
        self.tester.wait_for_element_visible(selector)
        self.tester.see(title, selector)
