# storefront_e2e/pages/admin/payment_token_editor.py
from __future__ import annotations

"""Payment Token Editor page object
-----------------------------------
The payment tokens table rendered on the admin user profile screen.
"""

from storefront_e2e.core.browser import WooCommerceBrowser
from storefront_e2e.pages.selectors import xpath_has_class, xpath_value


class PaymentTokenEditor:

    URL = "/wp-admin/user-edit.php?user_id={user_id}"

    SELECTOR_PAYMENT_TOKENS_TABLE = ".sv_wc_payment_gateway_token_editor"
    # row for the payment token whose ID input has value {token}
    SELECTOR_PAYMENT_TOKEN_ROW = f"//tr[{xpath_has_class('token')}][descendant::input[@value = {{token}}]]"
    SELECTOR_NEW_PAYMENT_TOKEN_ROW = ".sv_wc_payment_gateway_token_editor tr.new-token"

    FIELD_NAME_DEFAULT_PAYMENT_TOKEN = "wc_payment_gateway_{gateway_id}_tokens_default"

    BUTTON_ADD_NEW = '.sv_wc_payment_gateway_token_editor [data-action="add-new"]'
    BUTTON_SAVE = '.sv_wc_payment_gateway_token_editor [data-action="save"]'
    BUTTON_REMOVE = '.sv_wc_payment_gateway_token_editor [data-action="remove"][data-token-id="{token}"]'

    TEXT_PROFILE_UPDATED = "Profile updated"

    def __init__(self, tester: WooCommerceBrowser) -> None:
        self.tester = tester

    @classmethod
    def route(cls, user_id: int) -> str:
        return cls.URL.replace("{user_id}", str(user_id))

    # ---------- Selectors ----------

    def get_payment_token_selector(self, token: str) -> str:
        return f'{self.SELECTOR_PAYMENT_TOKENS_TABLE} [value="{token}"]'

    def get_payment_token_field_selector(self, token: str, name: str) -> str:
        """
        XPath for a field inside the row of `token` whose name attribute ends with [name].

        Token rows carry no identifier narrow enough for CSS.
        """
        suffix = f"[{name}]"
        field = f"//*[substring(@name, string-length(@name) - string-length('{suffix}') + 1) = '{suffix}']"
        return self.SELECTOR_PAYMENT_TOKEN_ROW.replace("{token}", xpath_value(token)) + field

    def get_new_payment_token_field_selector(self, name: str) -> str:
        return f'{self.SELECTOR_NEW_PAYMENT_TOKEN_ROW} [name$="[{name}]"]'

    def get_default_payment_token_field_name(self, gateway_id: str) -> str:
        return self.FIELD_NAME_DEFAULT_PAYMENT_TOKEN.replace("{gateway_id}", gateway_id)

    def get_default_payment_token_field_selector(self, gateway_id: str) -> str:
        return f'[name="{self.get_default_payment_token_field_name(gateway_id)}"]'

    def get_remove_payment_token_button_selector(self, token: str) -> str:
        return self.BUTTON_REMOVE.replace("{token}", token)

    # ---------- Actions ----------

    def scroll_to_payment_tokens_table(self) -> None:
        self.tester.scroll_to(self.SELECTOR_PAYMENT_TOKENS_TABLE, 0, -250)

    def show_new_payment_token_fields(self) -> None:
        self.tester.try_to_click(self.BUTTON_ADD_NEW)
        self.tester.wait_for_element_clickable(self.SELECTOR_NEW_PAYMENT_TOKEN_ROW)

    def save_changes(self) -> None:
        """Click Save and wait for the profile screen to reload."""
        self.tester.try_to_click(self.BUTTON_SAVE)
        self.tester.wait_for_text(self.TEXT_PROFILE_UPDATED)

    def select_payment_token_as_default(self, gateway_id: str, token: str) -> None:
        """Mark `token` as default without saving."""
        self.tester.try_to_select_option(self.get_default_payment_token_field_selector(gateway_id), token)

    def delete_payment_token(self, token: str) -> None:
        """Click Remove, accept the confirmation and wait for the row to go away."""
        self.tester.accept_next_popup()
        self.tester.try_to_click(self.get_remove_payment_token_button_selector(token))
        self.tester.wait_for_async_activity()
        self.tester.wait_for_element_not_visible(self.get_payment_token_selector(token))

    # ---------- Assertions ----------

    def see_payment_token(self, token: str) -> None:
        selector = self.get_payment_token_selector(token)
        self.tester.wait_for_element(selector)
        self.tester.see_element(selector)

    def dont_see_payment_token(self, token: str) -> None:
        selector = self.get_payment_token_selector(token)
        self.tester.wait_for_element_not_visible(selector)
        self.tester.dont_see_element(selector)

    def see_default_payment_token(self, gateway_id: str, token: str) -> None:
        self.see_payment_token(token)
        self.tester.see_option_is_selected(self.get_default_payment_token_field_selector(gateway_id), token)
