"""
Review Contracts - Interfaces for the review domain.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol, runtime_checkable

from .models import ComparisonResult, Correction, ReviewReport

if TYPE_CHECKING:
    from menucheck.adapters.gemini import GeminiRequest, GeminiResponse


@runtime_checkable
class TextGenerator(Protocol):
    """
    Contract for the model endpoint client.

    ``GeminiClient`` satisfies it; tests may pass any object with ``generate``.
    """

    async def generate(self, request: GeminiRequest) -> GeminiResponse:
        """Send a request and return the classified response."""
        ...


@runtime_checkable
class Reviewer(Protocol):
    """
    Contract for menu review implementations.

    Example:
        >>> class MyReviewer:
        ...     async def analyze_menu(self, text: str) -> list[Correction]: ...
        ...     async def compare_menus(self, menu_text: str, reference_text: str) -> list[ComparisonResult]: ...
        ...     async def review(self, menu_text: str, reference_text: str | None = None) -> ReviewReport: ...
        >>> assert isinstance(MyReviewer(), Reviewer)
    """

    async def analyze_menu(self, text: str) -> list[Correction]:
        """
        Find spelling/grammar corrections and wording suggestions.

        Args:
            text: Plain menu text

        Returns:
            Corrections in the order the model reported them
        """
        ...

    async def compare_menus(
        self,
        menu_text: str,
        reference_text: str,
    ) -> list[ComparisonResult]:
        """
        Find price and name discrepancies between menu and reference.

        Args:
            menu_text: Plain menu text
            reference_text: Plain reference price sheet text

        Returns:
            Discrepancies in the order the model reported them
        """
        ...

    async def review(
        self,
        menu_text: str,
        reference_text: str | None = None,
    ) -> ReviewReport:
        """Run every applicable analysis and collect each outcome."""
        ...
