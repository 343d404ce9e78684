"""
Gemini Models - Request/Response types for the Gemini generateContent API.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from pydantic import BaseModel, Field

if TYPE_CHECKING:
    from menucheck.config import Settings

RETRYABLE_STATUS_CODES = frozenset({429, 500, 503})

HARM_CATEGORIES = (
    "HARM_CATEGORY_HARASSMENT",
    "HARM_CATEGORY_HATE_SPEECH",
    "HARM_CATEGORY_SEXUALLY_EXPLICIT",
    "HARM_CATEGORY_DANGEROUS_CONTENT",
)


class GeminiConfig(BaseModel):
    """Configuration for Gemini client."""

    api_key: str | None = Field(default=None, repr=False)
    base_url: str = Field(default="https://generativelanguage.googleapis.com/v1beta")
    model: str = Field(default="gemini-2.5-flash")
    temperature: float = Field(default=0.5, ge=0.0, le=2.0)
    timeout_seconds: float = Field(default=60.0, gt=0)
    deadline_seconds: float | None = Field(default=None, gt=0)
    max_retries: int = Field(default=3, ge=1)
    backoff_base_seconds: float = Field(default=1.0, ge=0.0)
    backoff_jitter_seconds: float = Field(default=1.0, ge=0.0)
    safety_threshold: str = Field(default="BLOCK_MEDIUM_AND_ABOVE")

    model_config = {"frozen": True}

    @classmethod
    def from_settings(cls, settings: Settings) -> GeminiConfig:
        """Build client configuration from application settings."""
        return cls(
            api_key=settings.gemini_api_key,
            base_url=settings.gemini_base_url,
            model=settings.gemini_model,
            temperature=settings.gemini_temperature,
            timeout_seconds=settings.gemini_timeout_seconds,
            deadline_seconds=settings.gemini_deadline_seconds,
            max_retries=settings.gemini_max_retries,
        )

    @property
    def endpoint(self) -> str:
        """generateContent URL for the configured model."""
        return f"{self.base_url.rstrip('/')}/models/{self.model}:generateContent"


class GeminiRequest(BaseModel):
    """One logical generateContent request."""

    prompt: str
    response_mime_type: str = Field(default="application/json")
    response_schema: dict[str, Any] | None = None
    temperature: float | None = Field(default=None, ge=0.0, le=2.0)

    model_config = {"frozen": True}

    def to_payload(self, config: GeminiConfig) -> dict[str, Any]:
        """Render the JSON body sent to the endpoint."""
        generation_config: dict[str, Any] = {
            "temperature": (
                self.temperature if self.temperature is not None else config.temperature
            ),
            "responseMimeType": self.response_mime_type,
        }
        if self.response_schema is not None:
            generation_config["responseSchema"] = self.response_schema

        return {
            "contents": [{"role": "user", "parts": [{"text": self.prompt}]}],
            "generationConfig": generation_config,
            "safetySettings": [
                {"category": category, "threshold": config.safety_threshold}
                for category in HARM_CATEGORIES
            ],
        }


class GeminiResponse(BaseModel):
    """Decoded successful generateContent response."""

    text: str = ""
    model: str
    finish_reason: str | None = None
    block_reason: str | None = None
    prompt_tokens: int = 0
    completion_tokens: int = 0
    total_tokens: int = 0

    @classmethod
    def from_body(cls, body: dict[str, Any], model: str) -> GeminiResponse:
        """Pull text, block reason and usage out of a raw response body."""
        text = ""
        finish_reason = None
        candidates = body.get("candidates") or []
        if candidates:
            candidate = candidates[0] or {}
            finish_reason = candidate.get("finishReason")
            parts = (candidate.get("content") or {}).get("parts") or []
            if parts:
                text = (parts[0] or {}).get("text") or ""

        feedback = body.get("promptFeedback") or {}
        usage = body.get("usageMetadata") or {}
        return cls(
            text=text,
            model=model,
            finish_reason=finish_reason,
            block_reason=feedback.get("blockReason"),
            prompt_tokens=usage.get("promptTokenCount", 0),
            completion_tokens=usage.get("candidatesTokenCount", 0),
            total_tokens=usage.get("totalTokenCount", 0),
        )
