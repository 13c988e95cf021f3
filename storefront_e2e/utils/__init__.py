"""
Utilities: settings, logging and timing helpers.
"""

__all__: list[str] = []
