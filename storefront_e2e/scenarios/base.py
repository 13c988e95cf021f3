# storefront_e2e/scenarios/base.py
from __future__ import annotations

"""Payment gateway scenario base
--------------------------------
Shared steps for gateway acceptance tests. A gateway suite subclasses one of
the scenario classes and sets `gateway` to its GatewayProfile:

    class TestAcmeCreditCard(CreditCardTokenizationScenarios):
        gateway = load_profile("gateways/acme.yaml")
"""

from typing import Iterator, Optional

import pytest

from storefront_e2e.core.browser import WooCommerceBrowser
from storefront_e2e.core.profile_loader import CardData, GatewayProfile
from storefront_e2e.fixtures.database import WooCommerceDB
from storefront_e2e.fixtures.store_api import GatewaySettingsOverrides, Product, StoreAPI
from storefront_e2e.pages.frontend.checkout import Checkout
from storefront_e2e.pages.frontend.product import ProductPage
from storefront_e2e.utils.logger import get_logger, log_with_context


class PaymentGatewayScenarios:

    pytestmark = [pytest.mark.e2e]

    gateway: Optional[GatewayProfile] = None

    TEXT_ORDER_RECEIVED = "Order received"
    SELECTOR_ORDER_DETAILS = ".woocommerce-order-details"
    SELECTOR_ENTRY_TITLE = ".entry-title"

    @pytest.fixture(autouse=True)
    def _gateway_setup(
        self,
        tester: WooCommerceBrowser,
        store_db: WooCommerceDB,
        store_api: StoreAPI,
        shippable_product: Product,
        gateway_settings: GatewaySettingsOverrides,
    ) -> Iterator[None]:
        self.tester = tester
        self.db = store_db
        self.api = store_api
        self.shippable_product = shippable_product
        # cards saved during the current test
        self.saved_cards_count = 0
        self.log = log_with_context(
            get_logger(__name__), gateway=self.gateway.id if self.gateway else None
        )
        self.gateway_settings = gateway_settings

        yield

        if self.gateway is not None:
            self.remove_payment_tokens()

    def get_gateway(self) -> GatewayProfile:
        if self.gateway is None:
            raise NotImplementedError(f"{type(self).__name__} must set `gateway`")
        return self.gateway

    def get_gateway_id(self) -> str:
        return self.get_gateway().id

    # ---------- Shared steps ----------

    def add_shippable_product_to_cart_and_go_to_checkout(self, product_page: ProductPage) -> None:
        self.tester.am_on_url(ProductPage.route(self.shippable_product))
        product_page.add_simple_product_to_cart(self.shippable_product)
        self.tester.am_on_page(Checkout.route())

    def place_order_and_tokenize_payment_method(self, checkout_page: Checkout) -> None:
        self.log.info("Placing order and saving the payment method")
        self.check_tokenize_payment_method_field(checkout_page)
        self.place_order(checkout_page)

    def check_tokenize_payment_method_field(self, checkout_page: Checkout) -> None:
        """Tick "Securely Save to Account", switching to a new card first when saved ones are listed."""
        if self._has_saved_payment_methods():
            self.tester.wait_for_text(Checkout.TEXT_USE_NEW_CARD)
            self.tester.try_to_click(Checkout.FIELD_USE_NEW_PAYMENT_METHOD)

        self.tester.try_to_check_option(
            Checkout.tokenize_payment_method_selector(self.get_gateway().id_dasherized)
        )

    def _has_saved_payment_methods(self) -> bool:
        return self.tester.locate(Checkout.FIELD_USE_NEW_PAYMENT_METHOD).count() > 0

    def see_order_received(self) -> None:
        self.tester.wait_for_element_visible(
            self.SELECTOR_ORDER_DETAILS, timeout_ms=self.tester.settings.ORDER_RECEIVED_TIMEOUT_MS
        )
        self.tester.see(self.TEXT_ORDER_RECEIVED, self.SELECTOR_ENTRY_TITLE)

    def get_admin_user_id(self) -> int:
        return self.db.grab_user_id_from_database(self.tester.settings.ADMIN_USERNAME)

    def remove_payment_tokens(self) -> None:
        """Delete the admin user's tokens for this gateway so the next test starts without any."""
        removed = self.db.delete_payment_tokens(self.get_admin_user_id(), self.get_gateway_id())
        if removed:
            self.log.info(f"Removed {removed} payment token(s) left by the test")

    def get_tokenized_payment_method_token(self) -> Optional[str]:
        """Raw token of the payment method saved last for the admin user and this gateway."""
        token_ids = self.db.grab_payment_token_ids(self.get_admin_user_id(), self.get_gateway_id())
        if not token_ids:
            self.log.warning("No payment token saved for the admin user")
            return None
        return self.db.grab_payment_token(token_ids[-1])

    def place_order(self, checkout_page: Checkout) -> None:
        """
        Place an order from the Checkout page.

        Gateways that need extra steps (a particular card number, a test
        amount) override this.
        """
        checkout_page.place_order()

    def get_new_credit_card_data(self) -> CardData:
        """Card data for the next payment, a different card per save in one test when available."""
        cards = list(self.get_credit_cards_data().values())
        if len(cards) > self.saved_cards_count:
            return cards[self.saved_cards_count]
        return cards[0]

    def get_credit_cards_data(self) -> dict[str, CardData]:
        return self.get_gateway().credit_cards


__all__ = ["PaymentGatewayScenarios"]
