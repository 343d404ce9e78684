"""
Gemini Client - Reliable access to the Gemini generateContent endpoint.

This is the SINGLE place that talks HTTP to the model endpoint.

Features:
- One explicit client object per process (holds the key and an httpx pool)
- Automatic retries with exponential backoff and jitter (tenacity)
- Status classification into the menucheck error taxonomy
- Optional overall deadline on top of the per-request timeout

Retry policy:
- Transport failures are retried; once the budget is spent, NetworkError.
- 429/500/503 are retried; the final attempt's response is returned as-is
  so ``generate`` can classify it.
- Anything else (including success) returns immediately.
- Delay before attempt k (k >= 2) is ``2^(k-2) * base + uniform(0, jitter)``.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Awaitable, Callable
from typing import Any

import httpx
from tenacity import (
    AsyncRetrying,
    RetryCallState,
    retry_if_exception_type,
    retry_if_result,
    stop_after_attempt,
    wait_exponential_jitter,
)

from menucheck.config import (
    ConfigurationError,
    ContentPolicyError,
    LLMRequestError,
    MalformedResponseError,
    NetworkError,
    TransientServiceError,
)

from .models import RETRYABLE_STATUS_CODES, GeminiConfig, GeminiRequest, GeminiResponse

logger = logging.getLogger(__name__)

__all__ = ["GeminiClient"]

SleepFunc = Callable[[float], Awaitable[None]]

RETRIES_EXHAUSTED_MESSAGE = (
    "Falha na comunicação com a API Gemini após múltiplas tentativas."
)


def _is_retryable(response: httpx.Response) -> bool:
    return response.status_code in RETRYABLE_STATUS_CODES


def _last_outcome(retry_state: RetryCallState) -> httpx.Response:
    """Hand back the final attempt: its response, or re-raise its exception."""
    return retry_state.outcome.result()


def _log_retry(retry_state: RetryCallState) -> None:
    outcome = retry_state.outcome
    delay = retry_state.next_action.sleep if retry_state.next_action else 0.0
    max_attempts = getattr(retry_state.retry_object.stop, "max_attempt_number", "?")

    if outcome is not None and outcome.failed:
        logger.warning(
            "Gemini transport error: %s. Retrying in %.1fs (attempt %d/%s)",
            outcome.exception(),
            delay,
            retry_state.attempt_number,
            max_attempts,
        )
    elif outcome is not None:
        logger.warning(
            "Gemini returned %d. Retrying in %.1fs (attempt %d/%s)",
            outcome.result().status_code,
            delay,
            retry_state.attempt_number,
            max_attempts,
        )


def _json_body(response: httpx.Response) -> dict[str, Any]:
    try:
        body = response.json()
    except ValueError:
        return {}
    # some error responses arrive wrapped in a one-element list
    if isinstance(body, list) and body and isinstance(body[0], dict):
        body = body[0]
    return body if isinstance(body, dict) else {}


class GeminiClient:
    """
    Gemini generateContent client with retry and error classification.

    Build it once at startup and pass it to whatever needs the model.

    Example:
        >>> config = GeminiConfig.from_settings(get_settings())
        >>> async with GeminiClient(config) as client:
        ...     response = await client.generate(GeminiRequest(prompt="Olá"))
        ...     print(response.text)
    """

    def __init__(
        self,
        config: GeminiConfig,
        http_client: httpx.AsyncClient | None = None,
        sleep: SleepFunc = asyncio.sleep,
    ) -> None:
        """
        Initialize the client.

        Args:
            config: Client configuration. ``api_key`` must be set.
            http_client: Shared httpx client. One is created (and owned) if None.
            sleep: Coroutine used for backoff delays.

        Raises:
            ConfigurationError: No API key configured.
        """
        if not config.api_key:
            raise ConfigurationError(
                "Chave da API não configurada. Defina GEMINI_API_KEY.",
            )

        self.config = config
        self._owns_http = http_client is None
        self._http = http_client or httpx.AsyncClient(timeout=config.timeout_seconds)
        self._sleep = sleep

        logger.info(
            "GeminiClient initialized: model=%s, max_retries=%d",
            self.config.model,
            self.config.max_retries,
        )

    async def __aenter__(self) -> GeminiClient:
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        """Close the underlying HTTP pool if this client created it."""
        if self._owns_http:
            await self._http.aclose()

    def _retrying(self) -> AsyncRetrying:
        return AsyncRetrying(
            stop=stop_after_attempt(self.config.max_retries),
            wait=wait_exponential_jitter(
                initial=self.config.backoff_base_seconds,
                exp_base=2,
                jitter=self.config.backoff_jitter_seconds,
                max=float("inf"),
            ),
            retry=(
                retry_if_exception_type(httpx.TransportError)
                | retry_if_result(_is_retryable)
            ),
            before_sleep=_log_retry,
            retry_error_callback=_last_outcome,
            sleep=self._sleep,
        )

    async def _post(self, payload: dict[str, Any]) -> httpx.Response:
        return await self._http.post(
            self.config.endpoint,
            json=payload,
            headers={
                "Content-Type": "application/json",
                "x-goog-api-key": self.config.api_key or "",
            },
            timeout=self.config.timeout_seconds,
        )

    async def execute(self, request: GeminiRequest) -> httpx.Response:
        """
        Send one logical request, retrying transient failures.

        Args:
            request: Request to send

        Returns:
            The first non-retryable response, or the last response once the
            retry budget is spent.

        Raises:
            NetworkError: Transport kept failing, or the deadline passed.
        """
        payload = request.to_payload(self.config)
        attempt = self._retrying()(self._post, payload)

        try:
            if self.config.deadline_seconds is None:
                return await attempt
            return await asyncio.wait_for(attempt, timeout=self.config.deadline_seconds)
        except httpx.TransportError as e:
            logger.error(
                "Gemini unreachable after %d attempts: %s", self.config.max_retries, e
            )
            raise NetworkError(
                RETRIES_EXHAUSTED_MESSAGE,
                {"attempts": self.config.max_retries, "cause": type(e).__name__},
            ) from e
        except asyncio.TimeoutError as e:
            logger.error(
                "Gemini request exceeded deadline of %.1fs", self.config.deadline_seconds
            )
            raise NetworkError(
                RETRIES_EXHAUSTED_MESSAGE,
                {"deadline_seconds": self.config.deadline_seconds},
            ) from e

    async def generate(self, request: GeminiRequest) -> GeminiResponse:
        """
        Execute a request and classify its outcome.

        Args:
            request: Request to send

        Returns:
            GeminiResponse; ``text`` is empty when the model produced nothing.

        Raises:
            NetworkError: Transport failure after retries
            TransientServiceError: Still 429/500/503 after retries
            ContentPolicyError: Prompt or answer blocked by safety filters
            LLMRequestError: Any other non-success status
            MalformedResponseError: Success status with a non-JSON body
        """
        response = await self.execute(request)

        if not response.is_success:
            self._raise_for_status(response)

        try:
            body = response.json()
        except ValueError as e:
            logger.error("Gemini returned a non-JSON body: %.500s", response.text)
            raise MalformedResponseError(
                "A resposta da IA não pôde ser lida.", raw_text=response.text
            ) from e

        result = GeminiResponse.from_body(
            body if isinstance(body, dict) else {}, self.config.model
        )

        if result.block_reason:
            logger.warning("Prompt blocked: %s", result.block_reason)
            raise ContentPolicyError(result.block_reason)
        if not result.text and result.finish_reason == "SAFETY":
            logger.warning("Answer blocked by safety filter")
            raise ContentPolicyError("SAFETY")

        logger.debug(
            "Gemini response: %d chars, %d tokens", len(result.text), result.total_tokens
        )
        return result

    def _raise_for_status(self, response: httpx.Response) -> None:
        """Map a non-success response to the error taxonomy."""
        body = _json_body(response)
        error = body.get("error") if isinstance(body.get("error"), dict) else {}
        provider_message = error.get("message")

        if provider_message:
            message = f"Falha ao comunicar com a IA. {provider_message}"
        else:
            message = f"Erro na API Gemini: {response.reason_phrase or response.status_code}"

        details = {"status_code": response.status_code}
        if error.get("status"):
            details["provider_status"] = error["status"]

        logger.error(
            "Gemini API error: status=%d body=%.500s", response.status_code, response.text
        )

        if response.status_code in RETRYABLE_STATUS_CODES:
            raise TransientServiceError(message, details)

        if response.status_code == 400:
            block_reason = (
                (body.get("promptFeedback") or {}).get("blockReason")
                or error.get("blockReason")
            )
            if not block_reason and provider_message and "blocked" in provider_message.lower():
                block_reason = provider_message
            if block_reason:
                raise ContentPolicyError(block_reason, details=details)

        raise LLMRequestError(message, details)
