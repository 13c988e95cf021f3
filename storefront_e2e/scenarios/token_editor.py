# storefront_e2e/scenarios/token_editor.py
from __future__ import annotations

"""Payment token editor scenarios
---------------------------------
Adding, defaulting and removing payment tokens from the admin user profile.
"""

import pytest

from storefront_e2e.core.profile_loader import PaymentTokenData
from storefront_e2e.pages.admin.payment_token_editor import PaymentTokenEditor
from storefront_e2e.pages.frontend.checkout import Checkout
from storefront_e2e.pages.frontend.product import ProductPage
from storefront_e2e.scenarios.base import PaymentGatewayScenarios


class PaymentTokenEditorScenarios(PaymentGatewayScenarios):

    @pytest.fixture(autouse=True)
    def _token_editor_setup(self, _gateway_setup) -> None:
        # tokens created in the editor during the current test
        self.new_token_count = 0

        self.tester.login_as_admin()
        self.admin_user_id = self.get_admin_user_id()
        self.tester.am_on_page(PaymentTokenEditor.route(self.admin_user_id))

    def test_adding_a_new_payment_token(
        self, token_editor: PaymentTokenEditor, product_page: ProductPage, checkout_page: Checkout
    ) -> None:
        if not self.supports_adding_payment_methods_on_the_token_editor():
            pytest.skip("This gateway does not support this feature")

        self.add_new_payment_token(token_editor, product_page, checkout_page)

    def add_new_payment_token(
        self, token_editor: PaymentTokenEditor, product_page: ProductPage, checkout_page: Checkout
    ) -> str:
        """Add a payment token and save it; returns the raw token string."""
        # the editor cannot add tokens for this gateway, so save one through checkout
        if not self.supports_adding_payment_methods_on_the_token_editor():
            return self.add_new_payment_token_by_placing_order(token_editor, product_page, checkout_page)

        token_editor.scroll_to_payment_tokens_table()
        token_editor.show_new_payment_token_fields()

        data = self.get_new_payment_token_data()
        token = self.fill_new_payment_token_fields(data, token_editor)

        self.save_payment_token_changes(token_editor)

        self.see_payment_token(token, data, token_editor)

        self.new_token_count += 1
        return token

    def add_new_payment_token_by_placing_order(
        self, token_editor: PaymentTokenEditor, product_page: ProductPage, checkout_page: Checkout
    ) -> str:
        self.add_shippable_product_to_cart_and_go_to_checkout(product_page)

        checkout_page.fill_billing_details()

        self.place_order_and_tokenize_payment_method(checkout_page)
        self.see_order_received()

        token = self.get_tokenized_payment_method_token()
        assert token, "no payment token was saved"

        self.tester.am_on_page(PaymentTokenEditor.route(self.admin_user_id))
        token_editor.scroll_to_payment_tokens_table()
        token_editor.see_payment_token(token)

        self.saved_cards_count += 1
        return token

    def get_new_payment_token_data(self) -> PaymentTokenData:
        """Token data for the next token, a different one per token added in one test when available."""
        tokens = list(self.get_payment_tokens_data().values())
        if len(tokens) > self.new_token_count:
            return tokens[self.new_token_count]
        return tokens[0]

    def get_payment_tokens_data(self) -> dict[str, PaymentTokenData]:
        return self.get_gateway().payment_tokens

    def fill_new_payment_token_fields(self, data: PaymentTokenData, token_editor: PaymentTokenEditor) -> str:
        self.tester.fill_field(token_editor.get_new_payment_token_field_selector("id"), data.token)
        self.tester.select_option(token_editor.get_new_payment_token_field_selector("card_type"), data.card_type)
        self.tester.fill_field(token_editor.get_new_payment_token_field_selector("last_four"), data.last_four)
        self.tester.fill_field(token_editor.get_new_payment_token_field_selector("expiry"), data.expiry)
        return data.token

    def save_payment_token_changes(self, token_editor: PaymentTokenEditor) -> None:
        token_editor.save_changes()

    def see_payment_token(self, token: str, data: PaymentTokenData, token_editor: PaymentTokenEditor) -> None:
        """Check the row for `token` shows every field of `data`."""
        token_editor.see_payment_token(token)

        self.tester.see_in_field(token_editor.get_payment_token_field_selector(token, "id"), data.token)
        self.tester.see_option_is_selected(token_editor.get_payment_token_field_selector(token, "card_type"), data.card_type)
        self.tester.see_in_field(token_editor.get_payment_token_field_selector(token, "last_four"), data.last_four)
        self.tester.see_in_field(token_editor.get_payment_token_field_selector(token, "expiry"), data.expiry)

    def test_marking_a_payment_token_as_default(
        self, token_editor: PaymentTokenEditor, product_page: ProductPage, checkout_page: Checkout
    ) -> None:
        first_token = self.add_new_payment_token(token_editor, product_page, checkout_page)
        second_token = self.add_new_payment_token(token_editor, product_page, checkout_page)

        token_editor.scroll_to_payment_tokens_table()
        token_editor.see_default_payment_token(self.get_gateway_id(), first_token)

        self.select_payment_token_as_default(second_token, token_editor)
        self.save_payment_token_changes(token_editor)

        token_editor.scroll_to_payment_tokens_table()
        token_editor.see_default_payment_token(self.get_gateway_id(), second_token)

    def select_payment_token_as_default(self, token: str, token_editor: PaymentTokenEditor) -> None:
        token_editor.select_payment_token_as_default(self.get_gateway_id(), token)

    def test_removing_a_payment_token(
        self, token_editor: PaymentTokenEditor, product_page: ProductPage, checkout_page: Checkout
    ) -> None:
        token = self.add_new_payment_token(token_editor, product_page, checkout_page)

        token_editor.scroll_to_payment_tokens_table()
        token_editor.delete_payment_token(token)
        token_editor.dont_see_payment_token(token)

    def supports_adding_payment_methods_on_the_token_editor(self) -> bool:
        gateway = self.get_gateway()

        # tokens refreshed from the gateway API can't be added by hand
        if gateway.supports_tokenized_payment_methods_api:
            return False

        # without a saved customer ID the editor isn't rendered until a first order creates one
        if gateway.supports_customer_id and not self._has_customer_id():
            return False

        return True

    def _has_customer_id(self) -> bool:
        key = self.get_gateway().customer_id_meta_key
        if not key:
            return False
        return bool(self.db.grab_user_meta(self.admin_user_id, key))


__all__ = ["PaymentTokenEditorScenarios"]
