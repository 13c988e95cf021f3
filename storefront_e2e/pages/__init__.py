"""
Page objects
------------
One class per storefront/admin screen, exposing semantic actions and
assertions over raw selectors.
"""

from .admin.payment_token_editor import PaymentTokenEditor
from .frontend.add_payment_method import AddPaymentMethod
from .frontend.checkout import Checkout
from .frontend.payment_methods import PaymentMethods
from .frontend.product import ProductPage

__all__ = [
    "PaymentTokenEditor",
    "AddPaymentMethod",
    "Checkout",
    "PaymentMethods",
    "ProductPage",
]
