"""
API Routes.
"""

from . import health, review

__all__ = ["health", "review"]
