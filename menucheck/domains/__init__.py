"""
Domains - Business logic, independent of transport and UI.

- review: menu corrections and menu/reference comparison
"""

__all__ = ["review"]
