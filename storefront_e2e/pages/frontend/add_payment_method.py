# storefront_e2e/pages/frontend/add_payment_method.py
from __future__ import annotations

from storefront_e2e.core.browser import WooCommerceBrowser


class AddPaymentMethod:
    """My Account > Add payment method."""

    URL = "/my-account/add-payment-method/"

    BUTTON_ADD = '[id="place_order"]'

    TEXT_PAYMENT_METHOD_ADDED = "New payment method added"

    def __init__(self, tester: WooCommerceBrowser) -> None:
        self.tester = tester

    @classmethod
    def route(cls) -> str:
        return cls.URL

    def submit(self) -> None:
        self.tester.try_to_click(self.BUTTON_ADD)
