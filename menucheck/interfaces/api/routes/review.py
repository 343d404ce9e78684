"""
Review Routes - Menu correction and comparison endpoints.
"""

from __future__ import annotations

import asyncio
from typing import Any

from fastapi import APIRouter, Depends, File, UploadFile
from pydantic import BaseModel

from menucheck.adapters.documents import DocumentKind, detect_kind, extract_text
from menucheck.config import InputValidationError, get_settings
from menucheck.domains.review import (
    AnalysisOutcome,
    ComparisonResult,
    Correction,
    MenuReviewer,
    ReviewReport,
    friendly_message,
)

from ..deps import get_reviewer

router = APIRouter()


class CorrectionRequest(BaseModel):
    """Menu text to correct."""

    text: str


class ComparisonRequest(BaseModel):
    """Menu and reference texts to compare."""

    menu_text: str
    reference_text: str


class TextReviewRequest(BaseModel):
    """Menu text plus optional reference text."""

    menu_text: str
    reference_text: str | None = None


class ErrorBody(BaseModel):
    code: str
    message: str


class OutcomeResponse(BaseModel):
    """One analysis: its findings, or why it failed."""

    kind: str
    ok: bool
    results: list[dict[str, Any]]
    error: ErrorBody | None = None

    @classmethod
    def from_outcome(cls, outcome: AnalysisOutcome) -> OutcomeResponse:
        error = None
        if outcome.error is not None:
            error = ErrorBody(
                code=outcome.error.code.value,
                message=friendly_message(outcome.error),
            )
        return cls(
            kind=outcome.kind.value,
            ok=outcome.ok,
            results=[r.model_dump(by_alias=True, mode="json") for r in outcome.results],
            error=error,
        )


class ReviewResponse(BaseModel):
    """Review report for one menu."""

    menu_filename: str | None = None
    reference_filename: str | None = None
    corrections: OutcomeResponse
    comparison: OutcomeResponse | None = None

    @classmethod
    def from_report(cls, report: ReviewReport, **filenames: str | None) -> ReviewResponse:
        return cls(
            corrections=OutcomeResponse.from_outcome(report.corrections),
            comparison=(
                OutcomeResponse.from_outcome(report.comparison)
                if report.comparison is not None
                else None
            ),
            **filenames,
        )


async def _read_upload(upload: UploadFile, expected: DocumentKind) -> str:
    """Validate an upload and extract its text off the event loop."""
    kind = detect_kind(upload.filename, upload.content_type)
    if kind is not expected:
        raise InputValidationError(
            f"Por favor, selecione um arquivo {expected.value.upper()} válido.",
            {"filename": upload.filename},
        )

    max_bytes = get_settings().max_upload_bytes
    too_large = InputValidationError(
        "Arquivo muito grande.",
        {"filename": upload.filename, "max_bytes": max_bytes},
    )
    if upload.size is not None and upload.size > max_bytes:
        raise too_large

    data = await upload.read(max_bytes + 1)
    if len(data) > max_bytes:
        raise too_large

    return await asyncio.to_thread(extract_text, data, kind)


@router.post("/corrections", response_model=list[Correction])
async def analyze_menu(
    body: CorrectionRequest,
    reviewer: MenuReviewer = Depends(get_reviewer),
) -> list[Correction]:
    """Find spelling/grammar corrections and wording suggestions in menu text."""
    return await reviewer.analyze_menu(body.text)


@router.post("/comparison", response_model=list[ComparisonResult])
async def compare_menus(
    body: ComparisonRequest,
    reviewer: MenuReviewer = Depends(get_reviewer),
) -> list[ComparisonResult]:
    """Find price and name discrepancies between menu and reference text."""
    return await reviewer.compare_menus(body.menu_text, body.reference_text)


@router.post("/text", response_model=ReviewResponse)
async def review_text(
    body: TextReviewRequest,
    reviewer: MenuReviewer = Depends(get_reviewer),
) -> ReviewResponse:
    """Run both analyses over plain text; each reports success or failure."""
    report = await reviewer.review(body.menu_text, body.reference_text)
    return ReviewResponse.from_report(report)


@router.post("/upload", response_model=ReviewResponse)
async def review_upload(
    menu: UploadFile = File(...),
    reference: UploadFile | None = File(None),
    reviewer: MenuReviewer = Depends(get_reviewer),
) -> ReviewResponse:
    """
    Review an uploaded menu.

    Upload a menu PDF and, optionally, a Word (.docx) reference price sheet.
    The response carries the corrections and, with a reference, the
    comparison; one failing does not hide the other.
    """
    menu_text = await _read_upload(menu, DocumentKind.PDF)
    reference_text = None
    if reference is not None and reference.filename:
        reference_text = await _read_upload(reference, DocumentKind.DOCX)

    report = await reviewer.review(menu_text, reference_text)
    return ReviewResponse.from_report(
        report,
        menu_filename=menu.filename,
        reference_filename=reference.filename if reference is not None else None,
    )
