"""
Response Decoder - Turns raw model text into typed findings.

The batch is accepted whole or rejected whole: one bad element fails the
analysis rather than silently dropping a finding.
"""

from __future__ import annotations

import json
import logging
import re
from typing import TypeVar

from pydantic import BaseModel, TypeAdapter, ValidationError

from menucheck.config import MalformedResponseError, ShapeMismatchError

logger = logging.getLogger(__name__)

__all__ = ["decode_findings", "strip_code_fences"]

T = TypeVar("T", bound=BaseModel)

_OPENING_FENCE = re.compile(r"^```(?:json)?\s*", re.IGNORECASE)
_CLOSING_FENCE = re.compile(r"\s*```$")


def strip_code_fences(text: str) -> str:
    """Remove a surrounding ```json ... ``` wrapper, if any."""
    cleaned = text.strip()
    cleaned = _OPENING_FENCE.sub("", cleaned, count=1)
    cleaned = _CLOSING_FENCE.sub("", cleaned, count=1)
    return cleaned.strip()


def decode_findings(text: str | None, model: type[T]) -> list[T]:
    """
    Decode model output into a list of records.

    Args:
        text: Raw model text (may be empty or fenced)
        model: Record type each element must validate against

    Returns:
        Records in emission order; empty when the model reported nothing.

    Raises:
        MalformedResponseError: Text is not JSON
        ShapeMismatchError: JSON is not a list of conforming objects
    """
    if not text or not text.strip():
        return []

    cleaned = strip_code_fences(text)
    if not cleaned:
        return []

    try:
        data = json.loads(cleaned)
    except json.JSONDecodeError as e:
        logger.error("Model output is not valid JSON: %s\nRaw output: %s", e, text)
        raise MalformedResponseError(
            "A resposta da IA não é um JSON válido. "
            "Não foi possível processar as correções.",
            raw_text=text,
        ) from e

    if not isinstance(data, list):
        logger.error("Model output is %s, expected a list: %s", type(data).__name__, text)
        raise ShapeMismatchError(
            "A resposta da IA não está no formato esperado.",
            raw_text=text,
            details={"expected": "array", "received": type(data).__name__},
        )

    try:
        return TypeAdapter(list[model]).validate_python(data)
    except ValidationError as e:
        logger.error(
            "Model output failed %s validation (%d errors): %s",
            model.__name__,
            e.error_count(),
            text,
        )
        raise ShapeMismatchError(
            "A resposta da IA não está no formato esperado.",
            raw_text=text,
            details={"expected": model.__name__, "errors": e.error_count()},
        ) from e
