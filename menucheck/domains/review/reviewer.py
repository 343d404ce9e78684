"""
Menu Reviewer - Correction and comparison analyses over extracted text.

Pipeline per analysis: build prompt -> execute with retry -> decode.
The reviewer holds no state beyond the client it was given.
"""

from __future__ import annotations

import asyncio
import logging
import time
from typing import TYPE_CHECKING, TypeVar

from pydantic import BaseModel

from menucheck.adapters.gemini import GeminiRequest
from menucheck.config import InputValidationError, MenuCheckError

from .decoder import decode_findings
from .models import (
    AnalysisKind,
    AnalysisOutcome,
    ComparisonResult,
    Correction,
    ReviewReport,
)
from .prompts import (
    COMPARISON_SCHEMA,
    CORRECTION_SCHEMA,
    build_comparison_prompt,
    build_correction_prompt,
)

if TYPE_CHECKING:
    from .contracts import TextGenerator

logger = logging.getLogger(__name__)

__all__ = ["MenuReviewer"]

T = TypeVar("T", bound=BaseModel)


def _require_text(text: str | None, label: str) -> str:
    if text is None or not text.strip():
        raise InputValidationError(f"O texto do {label} está vazio.", {"field": label})
    return text


class MenuReviewer:
    """
    Menu review using the Gemini client.

    Example:
        >>> reviewer = MenuReviewer(gemini_client)
        >>> corrections = await reviewer.analyze_menu("Frango grelhdo com arroz")
        >>> report = await reviewer.review(menu_text, reference_text)
    """

    def __init__(self, client: TextGenerator) -> None:
        """
        Initialize reviewer.

        Args:
            client: Model endpoint client (normally a GeminiClient)
        """
        self._client = client

    async def _run(self, request: GeminiRequest, model: type[T], label: str) -> list[T]:
        start_time = time.perf_counter()
        response = await self._client.generate(request)
        findings = decode_findings(response.text, model)

        logger.info(
            "%s analysis complete: %d findings in %.1fs",
            label,
            len(findings),
            time.perf_counter() - start_time,
        )
        return findings

    async def analyze_menu(self, text: str) -> list[Correction]:
        """
        Find spelling/grammar corrections and wording suggestions.

        Raises:
            InputValidationError: Empty text (no request is sent)
        """
        text = _require_text(text, "cardápio")
        request = GeminiRequest(
            prompt=build_correction_prompt(text),
            response_schema=CORRECTION_SCHEMA,
        )
        return await self._run(request, Correction, "Correction")

    async def compare_menus(
        self,
        menu_text: str,
        reference_text: str,
    ) -> list[ComparisonResult]:
        """
        Find discrepancies between the menu and the reference sheet.

        Raises:
            InputValidationError: Either text is empty (no request is sent)
        """
        menu_text = _require_text(menu_text, "cardápio")
        reference_text = _require_text(reference_text, "documento de referência")
        request = GeminiRequest(
            prompt=build_comparison_prompt(menu_text, reference_text),
            response_schema=COMPARISON_SCHEMA,
        )
        return await self._run(request, ComparisonResult, "Comparison")

    async def review(
        self,
        menu_text: str,
        reference_text: str | None = None,
    ) -> ReviewReport:
        """
        Run the correction analysis and, with a reference, the comparison.

        Both calls run concurrently with their own retry budgets. A failure in
        one is recorded in its outcome and never cancels the other.

        Raises:
            InputValidationError: Menu text empty, or reference given but empty
        """
        _require_text(menu_text, "cardápio")
        if reference_text is not None:
            _require_text(reference_text, "documento de referência")

        calls = [self.analyze_menu(menu_text)]
        kinds = [AnalysisKind.CORRECTIONS]
        if reference_text is not None:
            calls.append(self.compare_menus(menu_text, reference_text))
            kinds.append(AnalysisKind.COMPARISON)

        results = await asyncio.gather(*calls, return_exceptions=True)

        outcomes = []
        for kind, result in zip(kinds, results):
            if isinstance(result, MenuCheckError):
                logger.error("%s analysis failed: %s", kind.value, result)
                outcomes.append(AnalysisOutcome(kind=kind, error=result))
            elif isinstance(result, BaseException):
                raise result
            else:
                outcomes.append(AnalysisOutcome(kind=kind, results=list(result)))

        return ReviewReport(
            corrections=outcomes[0],
            comparison=outcomes[1] if len(outcomes) > 1 else None,
        )
