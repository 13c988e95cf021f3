# storefront_e2e/fixtures/store_api.py
from __future__ import annotations

"""WooCommerce REST fixtures
----------------------------
Creates and removes the store data scenarios need (simple products, gateway
settings) through the WooCommerce REST API v3.
"""

from dataclasses import dataclass
from typing import Any, Optional

import httpx

from storefront_e2e.utils.config import Settings, get_settings
from storefront_e2e.utils.logger import get_logger


@dataclass
class Product:
    id: int
    name: str
    permalink: str


class StoreAPI:
    """Small client for the /wp-json/wc/v3 endpoints used as test fixtures."""

    API_PATH = "/wp-json/wc/v3"

    def __init__(self, settings: Optional[Settings] = None, transport: Optional[httpx.BaseTransport] = None) -> None:
        self.settings = settings or get_settings()
        self.log = get_logger(__name__)
        auth = None
        if self.settings.WC_CONSUMER_KEY and self.settings.WC_CONSUMER_SECRET:
            auth = (self.settings.WC_CONSUMER_KEY, self.settings.WC_CONSUMER_SECRET)
        self._client = httpx.Client(
            base_url=self.settings.BASE_URL + self.API_PATH,
            auth=auth,
            timeout=self.settings.API_TIMEOUT_S,
            transport=transport,
        )

    def close(self) -> None:
        self._client.close()

    def __enter__(self) -> "StoreAPI":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()

    def _request(self, method: str, path: str, **kwargs: Any) -> Any:
        resp = self._client.request(method, path, **kwargs)
        resp.raise_for_status()
        return resp.json()

    # ---------- Products ----------

    def create_simple_product(self, name: str, regular_price: str = "10.00", **fields: Any) -> Product:
        payload = {"name": name, "type": "simple", "regular_price": regular_price, "status": "publish"}
        payload.update(fields)
        data = self._request("POST", "/products", json=payload)
        product = Product(id=int(data["id"]), name=data["name"], permalink=data["permalink"])
        self.log.info(f"Created product #{product.id} {product.name!r}")
        return product

    def delete_product(self, product_id: int) -> None:
        self._request("DELETE", f"/products/{product_id}", params={"force": "true"})
        self.log.debug(f"Deleted product #{product_id}")

    # ---------- Payment gateways ----------

    def get_payment_gateway(self, gateway_id: str) -> dict:
        return self._request("GET", f"/payment_gateways/{gateway_id}")

    def get_payment_gateway_settings(self, gateway_id: str) -> dict[str, Any]:
        """Current value of every gateway setting, keyed by setting id."""
        fields = self.get_payment_gateway(gateway_id).get("settings") or {}
        return {key: field.get("value") for key, field in fields.items()}

    def update_payment_gateway_settings(self, gateway_id: str, settings: dict[str, Any]) -> dict:
        """Overwrite individual settings of a gateway (e.g. {"title": "My Credit Card"})."""
        payload: dict[str, Any] = {"settings": dict(settings)}
        # title and description are also top-level gateway fields
        for key in ("title", "description"):
            if key in settings:
                payload[key] = settings[key]
        data = self._request("PUT", f"/payment_gateways/{gateway_id}", json=payload)
        self.log.info(f"Updated gateway {gateway_id} settings: {sorted(settings)}")
        return data


class GatewaySettingsOverrides:
    """
    Gateway setting changes scoped to one test. The first change to a gateway
    snapshots its current settings; `restore()` writes back the original value
    of every key that was changed.
    """

    def __init__(self, api: StoreAPI) -> None:
        self.api = api
        self._original: dict[str, dict[str, Any]] = {}
        self._changed: dict[str, set[str]] = {}

    def apply(self, gateway_id: str, settings: dict[str, Any]) -> dict:
        if gateway_id not in self._original:
            self._original[gateway_id] = self.api.get_payment_gateway_settings(gateway_id)
            self._changed[gateway_id] = set()
        self._changed[gateway_id].update(settings)
        return self.api.update_payment_gateway_settings(gateway_id, settings)

    def restore(self) -> None:
        for gateway_id, keys in self._changed.items():
            original = self._original[gateway_id]
            values = {k: original[k] for k in sorted(keys) if k in original}
            if values:
                self.api.update_payment_gateway_settings(gateway_id, values)
        self._original.clear()
        self._changed.clear()


__all__ = ["GatewaySettingsOverrides", "Product", "StoreAPI"]
