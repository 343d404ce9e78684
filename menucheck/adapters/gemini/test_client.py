"""
Tests for Gemini Client adapter.
"""

from __future__ import annotations

import asyncio
import json
from collections.abc import Callable

import httpx
import pytest

from menucheck.config import (
    ConfigurationError,
    ContentPolicyError,
    LLMRequestError,
    MalformedResponseError,
    NetworkError,
    TransientServiceError,
)

from .client import GeminiClient
from .models import GeminiConfig, GeminiRequest, GeminiResponse

Handler = Callable[[httpx.Request], httpx.Response]


def _success_body(text: str) -> dict:
    return {
        "candidates": [
            {"content": {"parts": [{"text": text}]}, "finishReason": "STOP"}
        ],
        "usageMetadata": {
            "promptTokenCount": 12,
            "candidatesTokenCount": 8,
            "totalTokenCount": 20,
        },
    }


class Recorder:
    """Counts calls to the mock endpoint and the backoff sleeps."""

    def __init__(self) -> None:
        self.requests: list[httpx.Request] = []
        self.sleeps: list[float] = []

    async def sleep(self, delay: float) -> None:
        self.sleeps.append(delay)


@pytest.fixture
def recorder() -> Recorder:
    return Recorder()


@pytest.fixture
def make_client(recorder: Recorder) -> Callable[..., GeminiClient]:
    """Build a client whose transport is the given handler."""

    def _make(handler: Handler, **overrides: object) -> GeminiClient:
        def _record(request: httpx.Request) -> httpx.Response:
            recorder.requests.append(request)
            return handler(request)

        config = GeminiConfig(api_key="test-key", **overrides)
        http = httpx.AsyncClient(transport=httpx.MockTransport(_record))
        return GeminiClient(config, http_client=http, sleep=recorder.sleep)

    return _make


@pytest.fixture
def request_() -> GeminiRequest:
    return GeminiRequest(prompt="Analise o cardápio")


# --- Model Tests ---


def test_gemini_config_defaults() -> None:
    """Test GeminiConfig default values."""
    config = GeminiConfig()
    assert config.model == "gemini-2.5-flash"
    assert config.temperature == 0.5
    assert config.max_retries == 3
    assert config.backoff_base_seconds == 1.0
    assert config.backoff_jitter_seconds == 1.0
    assert config.deadline_seconds is None


def test_gemini_config_endpoint() -> None:
    config = GeminiConfig(base_url="https://example.test/v1beta/", model="m1")
    assert config.endpoint == "https://example.test/v1beta/models/m1:generateContent"


def test_gemini_config_hides_api_key_in_repr() -> None:
    assert "secret" not in repr(GeminiConfig(api_key="secret"))


def test_gemini_config_rejects_zero_retries() -> None:
    with pytest.raises(ValueError):
        GeminiConfig(max_retries=0)


def test_request_payload_includes_schema_and_safety() -> None:
    """Test the rendered body carries schema, temperature and safety settings."""
    schema = {"type": "ARRAY", "items": {"type": "STRING"}}
    request = GeminiRequest(prompt="Olá", response_schema=schema)

    payload = request.to_payload(GeminiConfig(temperature=0.3))

    assert payload["contents"][0]["parts"][0]["text"] == "Olá"
    assert payload["generationConfig"]["temperature"] == 0.3
    assert payload["generationConfig"]["responseMimeType"] == "application/json"
    assert payload["generationConfig"]["responseSchema"] == schema
    assert len(payload["safetySettings"]) == 4
    assert {s["threshold"] for s in payload["safetySettings"]} == {
        "BLOCK_MEDIUM_AND_ABOVE"
    }


def test_request_payload_omits_missing_schema() -> None:
    payload = GeminiRequest(prompt="x", temperature=0.9).to_payload(GeminiConfig())
    assert "responseSchema" not in payload["generationConfig"]
    assert payload["generationConfig"]["temperature"] == 0.9


def test_response_from_body_without_candidates() -> None:
    response = GeminiResponse.from_body({}, "gemini-2.5-flash")
    assert response.text == ""
    assert response.block_reason is None


# --- Client Initialization Tests ---


def test_client_requires_api_key() -> None:
    """Test that a missing credential fails before any request."""
    with pytest.raises(ConfigurationError):
        GeminiClient(GeminiConfig(api_key=None))


def test_client_rejects_empty_api_key() -> None:
    with pytest.raises(ConfigurationError):
        GeminiClient(GeminiConfig(api_key=""))


# --- Retry Policy Tests ---


async def test_execute_returns_final_503_after_retry_budget(
    make_client: Callable[..., GeminiClient],
    recorder: Recorder,
    request_: GeminiRequest,
) -> None:
    """Always-503 endpoint: exactly max_retries attempts, last response returned."""
    client = make_client(lambda r: httpx.Response(503))

    response = await client.execute(request_)

    assert response.status_code == 503
    assert len(recorder.requests) == 3
    assert len(recorder.sleeps) == 2


async def test_execute_respects_custom_retry_budget(
    make_client: Callable[..., GeminiClient],
    recorder: Recorder,
    request_: GeminiRequest,
) -> None:
    client = make_client(lambda r: httpx.Response(429), max_retries=5)

    response = await client.execute(request_)

    assert response.status_code == 429
    assert len(recorder.requests) == 5


async def test_backoff_grows_exponentially_with_jitter(
    make_client: Callable[..., GeminiClient],
    recorder: Recorder,
    request_: GeminiRequest,
) -> None:
    """Delay before attempt k lies in [2^(k-2), 2^(k-2) + 1) seconds."""
    client = make_client(lambda r: httpx.Response(500), max_retries=5)

    await client.execute(request_)

    assert len(recorder.sleeps) == 4
    assert recorder.sleeps == sorted(recorder.sleeps)
    for index, delay in enumerate(recorder.sleeps):
        base = 2**index
        assert base <= delay < base + 1


@pytest.mark.parametrize("status", [200, 400, 401, 404])
async def test_no_retry_on_success_or_permanent_failure(
    make_client: Callable[..., GeminiClient],
    recorder: Recorder,
    request_: GeminiRequest,
    status: int,
) -> None:
    client = make_client(lambda r: httpx.Response(status, json={}))

    response = await client.execute(request_)

    assert response.status_code == status
    assert len(recorder.requests) == 1
    assert recorder.sleeps == []


async def test_recovers_after_transient_failure(
    make_client: Callable[..., GeminiClient],
    recorder: Recorder,
    request_: GeminiRequest,
) -> None:
    statuses = iter([503, 429, 200])

    def handler(request: httpx.Request) -> httpx.Response:
        status = next(statuses)
        return httpx.Response(status, json=_success_body("[]") if status == 200 else {})

    client = make_client(handler)

    response = await client.generate(request_)

    assert response.text == "[]"
    assert len(recorder.requests) == 3


async def test_transport_failure_exhausts_into_network_error(
    make_client: Callable[..., GeminiClient],
    recorder: Recorder,
    request_: GeminiRequest,
) -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("connection refused", request=request)

    client = make_client(handler)

    with pytest.raises(NetworkError) as exc_info:
        await client.execute(request_)

    assert len(recorder.requests) == 3
    assert exc_info.value.details["attempts"] == 3
    assert "múltiplas tentativas" in exc_info.value.message


async def test_transport_failure_then_success(
    make_client: Callable[..., GeminiClient],
    recorder: Recorder,
    request_: GeminiRequest,
) -> None:
    calls = {"n": 0}

    def handler(request: httpx.Request) -> httpx.Response:
        calls["n"] += 1
        if calls["n"] == 1:
            raise httpx.ReadTimeout("slow", request=request)
        return httpx.Response(200, json=_success_body("ok"))

    client = make_client(handler)

    response = await client.generate(request_)

    assert response.text == "ok"
    assert len(recorder.sleeps) == 1


async def test_deadline_turns_into_network_error(request_: GeminiRequest) -> None:
    """An overall deadline stops the retry loop."""

    async def slow_sleep(delay: float) -> None:
        await asyncio.sleep(10)

    config = GeminiConfig(api_key="k", deadline_seconds=0.05)
    http = httpx.AsyncClient(transport=httpx.MockTransport(lambda r: httpx.Response(503)))
    client = GeminiClient(config, http_client=http, sleep=slow_sleep)

    with pytest.raises(NetworkError) as exc_info:
        await client.execute(request_)

    assert exc_info.value.details["deadline_seconds"] == 0.05


async def test_request_sends_key_header_and_body(
    make_client: Callable[..., GeminiClient],
    recorder: Recorder,
    request_: GeminiRequest,
) -> None:
    client = make_client(lambda r: httpx.Response(200, json=_success_body("[]")))

    await client.generate(request_)

    sent = recorder.requests[0]
    assert sent.method == "POST"
    assert sent.url.path.endswith("/models/gemini-2.5-flash:generateContent")
    assert sent.headers["x-goog-api-key"] == "test-key"
    body = json.loads(sent.content)
    assert body["contents"][0]["parts"][0]["text"] == "Analise o cardápio"


# --- Classification Tests ---


async def test_generate_returns_text_and_usage(
    make_client: Callable[..., GeminiClient], request_: GeminiRequest
) -> None:
    client = make_client(lambda r: httpx.Response(200, json=_success_body("[1]")))

    response = await client.generate(request_)

    assert response.text == "[1]"
    assert response.total_tokens == 20
    assert response.model == "gemini-2.5-flash"


async def test_generate_empty_candidates_is_empty_text(
    make_client: Callable[..., GeminiClient], request_: GeminiRequest
) -> None:
    client = make_client(lambda r: httpx.Response(200, json={"candidates": []}))

    response = await client.generate(request_)

    assert response.text == ""


async def test_generate_final_503_raises_transient_error(
    make_client: Callable[..., GeminiClient], request_: GeminiRequest
) -> None:
    client = make_client(
        lambda r: httpx.Response(
            503,
            json={"error": {"code": 503, "message": "The model is overloaded.", "status": "UNAVAILABLE"}},
        )
    )

    with pytest.raises(TransientServiceError) as exc_info:
        await client.generate(request_)

    assert "The model is overloaded." in exc_info.value.message
    assert exc_info.value.details == {"status_code": 503, "provider_status": "UNAVAILABLE"}


async def test_generate_surfaces_provider_message(
    make_client: Callable[..., GeminiClient], request_: GeminiRequest
) -> None:
    client = make_client(
        lambda r: httpx.Response(
            400,
            json={"error": {"message": "API key not valid. Please pass a valid API key."}},
        )
    )

    with pytest.raises(LLMRequestError) as exc_info:
        await client.generate(request_)

    assert exc_info.value.message == (
        "Falha ao comunicar com a IA. API key not valid. Please pass a valid API key."
    )


async def test_generate_uses_reason_phrase_without_provider_message(
    make_client: Callable[..., GeminiClient], request_: GeminiRequest
) -> None:
    client = make_client(lambda r: httpx.Response(404, text="not here"))

    with pytest.raises(LLMRequestError) as exc_info:
        await client.generate(request_)

    assert exc_info.value.message == "Erro na API Gemini: Not Found"


async def test_generate_handles_list_wrapped_error(
    make_client: Callable[..., GeminiClient], request_: GeminiRequest
) -> None:
    client = make_client(
        lambda r: httpx.Response(403, json=[{"error": {"message": "Permission denied"}}])
    )

    with pytest.raises(LLMRequestError, match="Permission denied"):
        await client.generate(request_)


async def test_generate_blocked_400_is_content_policy(
    make_client: Callable[..., GeminiClient], request_: GeminiRequest
) -> None:
    client = make_client(
        lambda r: httpx.Response(
            400, json={"promptFeedback": {"blockReason": "SAFETY"}, "error": {"message": "x"}}
        )
    )

    with pytest.raises(ContentPolicyError) as exc_info:
        await client.generate(request_)

    assert exc_info.value.reason == "SAFETY"
    assert "SAFETY" in exc_info.value.message


async def test_generate_blocked_word_in_400_message(
    make_client: Callable[..., GeminiClient], request_: GeminiRequest
) -> None:
    client = make_client(
        lambda r: httpx.Response(400, json={"error": {"message": "Request blocked: OTHER"}})
    )

    with pytest.raises(ContentPolicyError):
        await client.generate(request_)


async def test_generate_prompt_feedback_block_on_success(
    make_client: Callable[..., GeminiClient],
    recorder: Recorder,
    request_: GeminiRequest,
) -> None:
    client = make_client(
        lambda r: httpx.Response(200, json={"promptFeedback": {"blockReason": "PROHIBITED_CONTENT"}})
    )

    with pytest.raises(ContentPolicyError) as exc_info:
        await client.generate(request_)

    assert exc_info.value.reason == "PROHIBITED_CONTENT"
    assert len(recorder.requests) == 1


async def test_generate_safety_finish_without_text(
    make_client: Callable[..., GeminiClient], request_: GeminiRequest
) -> None:
    client = make_client(
        lambda r: httpx.Response(200, json={"candidates": [{"finishReason": "SAFETY"}]})
    )

    with pytest.raises(ContentPolicyError):
        await client.generate(request_)


async def test_generate_non_json_success_body(
    make_client: Callable[..., GeminiClient], request_: GeminiRequest
) -> None:
    client = make_client(lambda r: httpx.Response(200, text="<html>oops</html>"))

    with pytest.raises(MalformedResponseError) as exc_info:
        await client.generate(request_)

    assert exc_info.value.raw_text == "<html>oops</html>"


async def test_client_context_manager_closes_owned_pool() -> None:
    client = GeminiClient(GeminiConfig(api_key="k"))
    async with client:
        pass
    assert client._http.is_closed
