"""
storefront_e2e
--------------
Browser acceptance scenarios for WooCommerce payment gateways.

Gateway suites subclass a scenario class from `storefront_e2e.scenarios` and
point it at a GatewayProfile; fixtures come from the bundled pytest plugin.
"""

__version__ = "0.1.0"

__all__ = ["__version__"]
