"""
Fixtures package
----------------
Database lookups and REST-API setup helpers used by the scenarios.
"""

from .database import WooCommerceDB
from .store_api import Product, StoreAPI

__all__ = [
    "WooCommerceDB",
    "Product",
    "StoreAPI",
]
