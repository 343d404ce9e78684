"""
Review Domain - Menu corrections and menu/reference comparison.

This domain handles:
- Prompt and response schema construction
- Decoding model output into typed findings
- Running both analyses and collecting their outcomes
- User-facing error wording
"""

from .contracts import Reviewer, TextGenerator
from .decoder import decode_findings, strip_code_fences
from .messages import friendly_message
from .models import (
    AnalysisKind,
    AnalysisOutcome,
    ComparisonResult,
    Correction,
    DiscrepancyDetails,
    DiscrepancyType,
    FindingType,
    ReviewReport,
)
from .reviewer import MenuReviewer

__all__ = [
    # Contracts
    "Reviewer",
    "TextGenerator",
    # Models
    "AnalysisKind",
    "AnalysisOutcome",
    "ComparisonResult",
    "Correction",
    "DiscrepancyDetails",
    "DiscrepancyType",
    "FindingType",
    "ReviewReport",
    # Implementations
    "MenuReviewer",
    "decode_findings",
    "strip_code_fences",
    "friendly_message",
]
