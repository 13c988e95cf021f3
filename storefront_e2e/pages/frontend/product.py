# storefront_e2e/pages/frontend/product.py
from __future__ import annotations

from storefront_e2e.core.browser import WooCommerceBrowser
from storefront_e2e.fixtures.store_api import Product


class ProductPage:
    """Single product page."""

    BUTTON_ADD_TO_CART = 'button[name="add-to-cart"][value="{product_id}"]'

    TEXT_ADDED_TO_CART = "has been added to your cart"

    def __init__(self, tester: WooCommerceBrowser) -> None:
        self.tester = tester

    @staticmethod
    def route(product: Product) -> str:
        return product.permalink

    def get_add_to_cart_button_selector(self, product: Product) -> str:
        return self.BUTTON_ADD_TO_CART.replace("{product_id}", str(product.id))

    def add_simple_product_to_cart(self, product: Product) -> None:
        self.tester.try_to_click(self.get_add_to_cart_button_selector(product))
        self.tester.wait_for_text(self.TEXT_ADDED_TO_CART)
