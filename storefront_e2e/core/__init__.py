"""
Core package for the storefront acceptance suite.
Lightweight package init to avoid import cycles.

Consumers should import submodules directly, e.g.:
  from storefront_e2e.core.executor import InteractionExecutor
  from storefront_e2e.core.browser import WooCommerceBrowser
  from storefront_e2e.core.profile_loader import load_profile
"""

__all__: list[str] = []
