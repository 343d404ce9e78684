"""
Review Models - Data types for the menu review domain.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Union

from pydantic import BaseModel, Field, field_validator

from menucheck.config import MenuCheckError


class FindingType(str, Enum):
    """Objective error vs. stylistic improvement."""

    CORRECTION = "correção"
    SUGGESTION = "sugestão"


_FINDING_ALIASES = {
    "correcao": FindingType.CORRECTION,
    "correction": FindingType.CORRECTION,
    "sugestao": FindingType.SUGGESTION,
    "suggestion": FindingType.SUGGESTION,
}


class DiscrepancyType(str, Enum):
    """Kind of difference between menu and reference."""

    PRICE_MISMATCH = "price_mismatch"
    MISSING_IN_MENU = "missing_in_menu"
    MISSING_IN_REFERENCE = "missing_in_reference"


class AnalysisKind(str, Enum):
    """Which analysis produced an outcome."""

    CORRECTIONS = "corrections"
    COMPARISON = "comparison"


class Correction(BaseModel):
    """One flagged span of menu text and its remedy."""

    original: str = Field(min_length=1)
    issue: str
    suggestion: str
    type: FindingType

    model_config = {"frozen": True}

    @field_validator("type", mode="before")
    @classmethod
    def normalize_type(cls, value: Any) -> Any:
        """Accept unaccented and English spellings the model sometimes emits."""
        if isinstance(value, str):
            return _FINDING_ALIASES.get(value.strip().lower(), value.strip().lower())
        return value


class DiscrepancyDetails(BaseModel):
    """Variant-dependent details; no field is guaranteed."""

    menu_price: str | None = Field(default=None, alias="menuPrice")
    reference_price: str | None = Field(default=None, alias="referencePrice")
    menu_name: str | None = Field(default=None, alias="menuName")
    reference_name: str | None = Field(default=None, alias="referenceName")

    model_config = {"frozen": True, "populate_by_name": True}


class ComparisonResult(BaseModel):
    """One discrepancy between the menu and the reference sheet."""

    item: str
    issue: DiscrepancyType
    details: DiscrepancyDetails = Field(default_factory=DiscrepancyDetails)

    model_config = {"frozen": True, "populate_by_name": True}

    @field_validator("details", mode="before")
    @classmethod
    def null_details_are_empty(cls, value: Any) -> Any:
        return {} if value is None else value


Finding = Union[Correction, ComparisonResult]


@dataclass
class AnalysisOutcome:
    """Result of one analysis: either its findings or the error that stopped it."""

    kind: AnalysisKind
    results: list[Finding] = field(default_factory=list)
    error: MenuCheckError | None = None

    @property
    def ok(self) -> bool:
        return self.error is None


@dataclass
class ReviewReport:
    """Corrections and, when a reference was given, the comparison."""

    corrections: AnalysisOutcome
    comparison: AnalysisOutcome | None = None

    @property
    def outcomes(self) -> list[AnalysisOutcome]:
        return [o for o in (self.corrections, self.comparison) if o is not None]

    @property
    def has_errors(self) -> bool:
        return any(not o.ok for o in self.outcomes)
