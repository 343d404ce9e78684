"""
MenuCheck - AI-assisted proofreading and price checking for restaurant menus.

Example:
    >>> from menucheck.adapters.gemini import GeminiClient, GeminiConfig
    >>> from menucheck.domains.review import MenuReviewer
    >>> async with GeminiClient(GeminiConfig(api_key="...")) as client:
    ...     report = await MenuReviewer(client).review(menu_text, reference_text)
"""

__version__ = "1.0.0"
__all__ = ["__version__"]
