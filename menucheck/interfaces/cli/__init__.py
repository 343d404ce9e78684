"""
CLI Interface - Command-line tools for MenuCheck.

Provides commands for:
- Menu review (corrections and reference comparison)
- Running the API server
"""

from .main import app, main

__all__ = ["app", "main"]
