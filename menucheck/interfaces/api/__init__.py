"""
API Interface - FastAPI service for menu review.
"""

from .main import app, create_app

__all__ = ["app", "create_app"]
