import base64
import json

import httpx
import pytest

from storefront_e2e.fixtures.store_api import GatewaySettingsOverrides, Product, StoreAPI
from storefront_e2e.utils.config import Settings


@pytest.fixture
def settings():
    return Settings(BASE_URL="http://shop.test/", WC_CONSUMER_KEY="ck_1", WC_CONSUMER_SECRET="cs_1")


def make_api(settings, handler):
    seen = []

    def _record(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        return handler(request)

    return StoreAPI(settings, transport=httpx.MockTransport(_record)), seen


def test_create_simple_product(settings):
    def handler(request):
        body = json.loads(request.content)
        return httpx.Response(201, json={"id": 31, "name": body["name"], "permalink": "http://shop.test/product/shippable-1/"})

    api, seen = make_api(settings, handler)
    with api:
        product = api.create_simple_product("Shippable 1")

    assert product == Product(id=31, name="Shippable 1", permalink="http://shop.test/product/shippable-1/")
    req = seen[0]
    assert req.method == "POST"
    assert str(req.url) == "http://shop.test/wp-json/wc/v3/products"
    assert json.loads(req.content) == {
        "name": "Shippable 1",
        "type": "simple",
        "regular_price": "10.00",
        "status": "publish",
    }
    expected = base64.b64encode(b"ck_1:cs_1").decode()
    assert req.headers["Authorization"] == f"Basic {expected}"


def test_delete_product_forces_removal(settings):
    api, seen = make_api(settings, lambda r: httpx.Response(200, json={"id": 31}))
    with api:
        api.delete_product(31)

    assert seen[0].method == "DELETE"
    assert seen[0].url.path == "/wp-json/wc/v3/products/31"
    assert seen[0].url.params["force"] == "true"


def test_update_gateway_title(settings):
    api, seen = make_api(settings, lambda r: httpx.Response(200, json={"id": "acme_credit_card", "title": "My Credit Card"}))
    with api:
        data = api.update_payment_gateway_settings("acme_credit_card", {"title": "My Credit Card"})

    assert data["title"] == "My Credit Card"
    assert seen[0].method == "PUT"
    assert seen[0].url.path == "/wp-json/wc/v3/payment_gateways/acme_credit_card"
    assert json.loads(seen[0].content) == {"settings": {"title": "My Credit Card"}, "title": "My Credit Card"}


def test_http_errors_propagate(settings):
    api, _ = make_api(settings, lambda r: httpx.Response(401, json={"code": "woocommerce_rest_cannot_view"}))
    with api:
        with pytest.raises(httpx.HTTPStatusError):
            api.get_payment_gateway("acme_credit_card")


def test_no_auth_without_credentials():
    api, seen = make_api(Settings(BASE_URL="http://shop.test"), lambda r: httpx.Response(200, json={}))
    with api:
        api.get_payment_gateway("bacs")

    assert "Authorization" not in seen[0].headers


GATEWAY = {
    "id": "acme_credit_card",
    "title": "Credit Card",
    "settings": {
        "title": {"id": "title", "label": "Title", "value": "Credit Card"},
        "description": {"id": "description", "label": "Description", "value": "Pay with your card"},
        "enabled": {"id": "enabled", "label": "Enable", "value": "yes"},
    },
}


def test_gateway_settings_values(settings):
    api, _ = make_api(settings, lambda r: httpx.Response(200, json=GATEWAY))
    with api:
        values = api.get_payment_gateway_settings("acme_credit_card")

    assert values == {"title": "Credit Card", "description": "Pay with your card", "enabled": "yes"}


def test_gateway_overrides_restore_changed_keys(settings):
    def handler(request):
        if request.method == "GET":
            return httpx.Response(200, json=GATEWAY)
        return httpx.Response(200, json={"id": "acme_credit_card"})

    api, seen = make_api(settings, handler)
    with api:
        overrides = GatewaySettingsOverrides(api)
        overrides.apply("acme_credit_card", {"title": "My Credit Card"})
        overrides.apply("acme_credit_card", {"description": "Card payments"})
        overrides.restore()
        overrides.restore()

    assert [r.method for r in seen] == ["GET", "PUT", "PUT", "PUT"]
    assert json.loads(seen[1].content) == {"settings": {"title": "My Credit Card"}, "title": "My Credit Card"}
    assert json.loads(seen[3].content) == {
        "settings": {"description": "Pay with your card", "title": "Credit Card"},
        "description": "Pay with your card",
        "title": "Credit Card",
    }


def test_gateway_overrides_without_changes_restore_nothing(settings):
    api, seen = make_api(settings, lambda r: httpx.Response(200, json={}))
    with api:
        GatewaySettingsOverrides(api).restore()

    assert seen == []
