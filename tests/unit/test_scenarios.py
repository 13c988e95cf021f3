from unittest.mock import MagicMock

import pytest

from storefront_e2e.core.profile_loader import GatewayProfile
from storefront_e2e.fixtures.store_api import Product
from storefront_e2e.scenarios import (
    CreditCardScenarios,
    CreditCardTokenizationScenarios,
    PaymentGatewayScenarios,
    PaymentTokenEditorScenarios,
)


def make_scenario(cls, profile, **db_returns):
    sc = cls()
    sc.gateway = profile
    sc.tester = MagicMock(name="tester")
    sc.tester.settings.ADMIN_USERNAME = "admin"
    sc.db = MagicMock(name="db")
    sc.log = MagicMock(name="log")
    sc.gateway_settings = MagicMock(name="gateway_settings")
    sc.shippable_product = Product(id=31, name="Shippable 1", permalink="http://shop.test/product/shippable-1/")
    for name, value in db_returns.items():
        getattr(sc.db, name).return_value = value
    sc.saved_cards_count = 0
    sc.new_token_count = 0
    sc.admin_user_id = 1
    return sc


def test_gateway_must_be_set():
    sc = PaymentTokenEditorScenarios()
    with pytest.raises(NotImplementedError):
        sc.get_gateway_id()


@pytest.mark.parametrize(
    "fields, meta, expected",
    [
        ({}, None, True),
        ({"supports_tokenized_payment_methods_api": True}, None, False),
        ({"supports_customer_id": True, "customer_id_meta_key": "wc_acme_customer_id"}, None, False),
        ({"supports_customer_id": True, "customer_id_meta_key": "wc_acme_customer_id"}, "cus_1", True),
        ({"supports_customer_id": True}, None, False),
    ],
)
def test_supports_adding_tokens_in_editor(fields, meta, expected):
    profile = GatewayProfile(id="acme_credit_card", **fields)
    sc = make_scenario(PaymentTokenEditorScenarios, profile, grab_user_meta=meta)

    assert sc.supports_adding_payment_methods_on_the_token_editor() is expected


def test_new_token_and_card_data_advance_per_save():
    profile = GatewayProfile(id="acme_credit_card")
    sc = make_scenario(PaymentTokenEditorScenarios, profile)

    first = sc.get_new_payment_token_data()
    sc.new_token_count = 1
    assert sc.get_new_payment_token_data() != first
    sc.new_token_count = 10
    assert sc.get_new_payment_token_data() == first

    assert sc.get_new_credit_card_data().number == "4111111111111111"
    sc.saved_cards_count = 1
    assert sc.get_new_credit_card_data().number == "5100000010001004"


def test_tokenized_payment_method_token_is_latest_row():
    profile = GatewayProfile(id="acme_credit_card")
    sc = make_scenario(
        CreditCardTokenizationScenarios,
        profile,
        grab_user_id_from_database=1,
        grab_payment_token_ids=[3, 12],
        grab_payment_token="tok_b",
    )

    assert sc.get_tokenized_payment_method_token() == "tok_b"
    sc.db.grab_payment_token_ids.assert_called_once_with(1, "acme_credit_card")
    sc.db.grab_payment_token.assert_called_once_with(12)

    sc.db.grab_payment_token_ids.return_value = []
    assert sc.get_tokenized_payment_method_token() is None


def test_tokenize_field_switches_to_new_card_when_cards_are_saved():
    profile = GatewayProfile(id="acme_credit_card")
    sc = make_scenario(CreditCardTokenizationScenarios, profile)
    sc.tester.locate.return_value.count.return_value = 1

    sc.check_tokenize_payment_method_field(MagicMock())

    sc.tester.try_to_click.assert_called_once()
    sc.tester.try_to_check_option.assert_called_once_with(
        'form input[id="wc-acme-credit-card-tokenize-payment-method"]'
    )


def test_saved_payment_method_uses_dasherized_id():
    profile = GatewayProfile(id="acme_credit_card")
    sc = make_scenario(CreditCardTokenizationScenarios, profile)
    checkout = MagicMock()

    sc.place_order_using_tokenized_payment_method("tok_b", checkout)

    sc.tester.try_to_select_option.assert_called_once_with(
        'form input[id="wc-acme-credit-card-payment-token-tok_b"]', "tok_b"
    )
    checkout.place_order.assert_called_once()


def test_custom_title_goes_through_reverted_gateway_settings():
    profile = GatewayProfile(id="acme_credit_card")
    sc = make_scenario(CreditCardScenarios, profile)
    sc.api = MagicMock(name="api")
    checkout = MagicMock()

    sc.test_custom_name_is_shown(MagicMock(), checkout)

    sc.gateway_settings.apply.assert_called_once_with("acme_credit_card", {"title": "My Credit Card"})
    sc.api.update_payment_gateway_settings.assert_not_called()
    sc.tester.am_on_url.assert_called_once_with("http://shop.test/product/shippable-1/")
    checkout.see_payment_method_title.assert_called_once_with("acme_credit_card", "My Credit Card")


def test_remove_payment_tokens_clears_admin_tokens_for_gateway():
    profile = GatewayProfile(id="acme_credit_card")
    sc = make_scenario(PaymentTokenEditorScenarios, profile, grab_user_id_from_database=1, delete_payment_tokens=2)

    sc.remove_payment_tokens()

    sc.db.grab_user_id_from_database.assert_called_once_with("admin")
    sc.db.delete_payment_tokens.assert_called_once_with(1, "acme_credit_card")


@pytest.mark.parametrize(
    "cls", [PaymentGatewayScenarios, CreditCardScenarios, CreditCardTokenizationScenarios, PaymentTokenEditorScenarios]
)
def test_scenario_classes_carry_e2e_marker(cls):
    assert "e2e" in [m.name for m in cls.pytestmark]
