# storefront_e2e/scenarios/credit_card.py
from __future__ import annotations

import pytest

from storefront_e2e.pages.admin.payment_token_editor import PaymentTokenEditor
from storefront_e2e.pages.frontend.add_payment_method import AddPaymentMethod
from storefront_e2e.pages.frontend.checkout import Checkout
from storefront_e2e.pages.frontend.payment_methods import PaymentMethods
from storefront_e2e.pages.frontend.product import ProductPage
from storefront_e2e.scenarios.base import PaymentGatewayScenarios


class CreditCardScenarios(PaymentGatewayScenarios):
    """Checkout with a credit card gateway, no saved payment methods involved."""

    CUSTOM_TITLE = "My Credit Card"

    def test_custom_name_is_shown(self, product_page: ProductPage, checkout_page: Checkout) -> None:
        self.gateway_settings.apply(self.get_gateway_id(), {"title": self.CUSTOM_TITLE})

        self.add_shippable_product_to_cart_and_go_to_checkout(product_page)

        checkout_page.see_payment_method_title(self.get_gateway_id(), self.CUSTOM_TITLE)

    def test_successful_transaction_for_shippable_product(self, product_page: ProductPage, checkout_page: Checkout) -> None:
        self.add_shippable_product_to_cart_and_go_to_checkout(product_page)

        checkout_page.fill_billing_details()

        self.place_order(checkout_page)
        self.see_order_received()


class CreditCardTokenizationScenarios(CreditCardScenarios):
    """Saving, reusing, editing and deleting tokenized cards as the admin user."""

    TEXT_NEW_PAYMENT_METHOD_ADDED = AddPaymentMethod.TEXT_PAYMENT_METHOD_ADDED
    NICKNAME = "My Saved Card"

    @pytest.fixture(autouse=True)
    def _tokenization_setup(self, _gateway_setup) -> None:
        self.tester.login_as_admin()

    def _place_order_saving_payment_method(self, product_page: ProductPage, checkout_page: Checkout) -> None:
        self.add_shippable_product_to_cart_and_go_to_checkout(product_page)

        checkout_page.fill_billing_details()

        self.place_order_and_tokenize_payment_method(checkout_page)
        self.see_order_received()
        self.saved_cards_count += 1

    def test_successful_transaction_for_shippable_product_saving_the_payment_method(
        self,
        product_page: ProductPage,
        checkout_page: Checkout,
        payment_methods_page: PaymentMethods,
    ) -> None:
        self._place_order_saving_payment_method(product_page, checkout_page)

        token = self.get_tokenized_payment_method_token()
        assert token, "no payment token was saved"

        self.tester.am_on_page(PaymentMethods.route())
        self.tester.wait_for_element_visible(PaymentMethods.SELECTOR_PAYMENT_METHODS_TABLE)

        self.see_tokenized_payment_method(token, payment_methods_page)

    def add_payment_method(self, add_payment_method_page: AddPaymentMethod) -> None:
        """
        Submit the Add payment method form.

        Gateways that need extra steps (card number, test amount) override this.
        """
        add_payment_method_page.submit()

    def see_tokenized_payment_method(self, token: str, payment_methods_page: PaymentMethods) -> None:
        payment_methods_page.see_payment_method(token)

    def test_successful_transaction_for_shippable_product_with_saved_payment_method(
        self, product_page: ProductPage, checkout_page: Checkout
    ) -> None:
        self._place_order_saving_payment_method(product_page, checkout_page)

        self.add_shippable_product_to_cart_and_go_to_checkout(product_page)

        checkout_page.fill_billing_details()

        token = self.get_tokenized_payment_method_token()
        assert token, "no payment token was saved"
        self.place_order_using_tokenized_payment_method(token, checkout_page)
        self.see_order_received()

    def place_order_using_tokenized_payment_method(self, token: str, checkout_page: Checkout) -> None:
        self.tester.try_to_select_option(self.get_saved_payment_method_selector(token), token)
        checkout_page.place_order()

    def get_saved_payment_method_selector(self, token: str) -> str:
        return Checkout.saved_payment_method_selector(self.get_gateway().id_dasherized, token)

    def test_editing_a_saved_payment_method(
        self,
        product_page: ProductPage,
        checkout_page: Checkout,
        payment_methods_page: PaymentMethods,
    ) -> None:
        self._place_order_saving_payment_method(product_page, checkout_page)

        token = self.get_tokenized_payment_method_token()
        assert token, "no payment token was saved"

        self.tester.am_on_page(PaymentMethods.route())

        payment_methods_page.set_payment_method_nickname(token, self.NICKNAME)
        payment_methods_page.see_payment_method_nickname(token, self.NICKNAME)

        self.tester.reload_page()

        payment_methods_page.see_payment_method_nickname(token, self.NICKNAME)

        payment_methods_page.delete_payment_method(token)
        payment_methods_page.dont_see_payment_method(token)

        self.tester.reload_page()

        payment_methods_page.dont_see_payment_method(token)

    def test_adding_a_saved_payment_method(
        self,
        add_payment_method_page: AddPaymentMethod,
        payment_methods_page: PaymentMethods,
    ) -> None:
        if not self.get_gateway().supports_add_payment_method:
            pytest.skip("This gateway does not support this feature")

        self.tester.am_on_page(AddPaymentMethod.route())
        self.add_payment_method(add_payment_method_page)
        self.tester.wait_for_text(self.TEXT_NEW_PAYMENT_METHOD_ADDED)

        self.tester.am_on_page(PaymentMethods.route())
        token = self.get_tokenized_payment_method_token()
        assert token, "no payment token was saved"
        payment_methods_page.see_payment_method(token)

    def test_seeing_a_saved_payment_method_in_the_payment_tokens_editor(
        self,
        product_page: ProductPage,
        checkout_page: Checkout,
        token_editor: PaymentTokenEditor,
    ) -> None:
        if not self.get_gateway().supports_token_editor:
            pytest.skip("This gateway does not support this feature")

        self._place_order_saving_payment_method(product_page, checkout_page)

        self.tester.am_on_page(PaymentTokenEditor.route(self.get_admin_user_id()))

        token = self.get_tokenized_payment_method_token()
        assert token, "no payment token was saved"
        token_editor.see_payment_token(token)


__all__ = ["CreditCardScenarios", "CreditCardTokenizationScenarios"]
