import asyncio
import json

import httpx
import pytest
from fastapi import HTTPException

from conftest import TEST_API_BASE, FakeGemini, gemini_reply
from report_summarizer.config import Settings
from report_summarizer.services import llm_service

SETTINGS = Settings(google_api_key="test-key", gemini_api_base=TEST_API_BASE, llm_timeout=5)


def _generate(gemini: FakeGemini, prompt: str = "Summarize this") -> str:
    async def run():
        async with httpx.AsyncClient(transport=httpx.MockTransport(gemini)) as client:
            return await llm_service.generate_summary(prompt, SETTINGS, client)
    return asyncio.run(run())


def _generate_error(gemini: FakeGemini) -> HTTPException:
    with pytest.raises(HTTPException) as err:
        _generate(gemini)
    assert err.value.status_code == 500
    return err.value


# ---------- response parsing ----------

def test_parse_joins_non_empty_fragments():
    payload = gemini_reply("  ### English", "", "- Key findings: ok  ")
    payload["candidates"][0]["content"]["parts"].append({"inlineData": {}})
    assert llm_service.parse_summary(payload) == "### English\n- Key findings: ok"


def test_parse_reads_only_first_candidate():
    payload = {"candidates": [gemini_reply("first")["candidates"][0], gemini_reply("second")["candidates"][0]]}
    assert llm_service.parse_summary(payload) == "first"


@pytest.mark.parametrize("payload", [
    {},
    {"candidates": []},
    {"candidates": [{"finishReason": "SAFETY"}]},
    {"candidates": [{"content": {"parts": []}}]},
    ["not", "a", "dict"],
])
def test_parse_returns_empty_for_unusable_payloads(payload):
    assert llm_service.parse_summary(payload) == ""


# ---------- outbound call ----------

def test_request_shape():
    gemini = FakeGemini()
    _generate(gemini, prompt="PROMPT TEXT")

    request = gemini.requests[0]
    assert request.method == "POST"
    assert str(request.url).startswith(f"{TEST_API_BASE}/v1/models/gemini-2.5-flash:generateContent")
    assert request.url.params["key"] == "test-key"

    body = json.loads(request.content)
    assert body["contents"] == [{"role": "user", "parts": [{"text": "PROMPT TEXT"}]}]
    assert body["generationConfig"] == {"maxOutputTokens": 400, "temperature": 0.3, "topP": 0.8}


def test_returns_trimmed_summary():
    gemini = FakeGemini()
    gemini.payload = gemini_reply("\n### English...\n")
    assert _generate(gemini) == "### English..."


def test_non_success_status_carries_code_and_body():
    gemini = FakeGemini()
    gemini.status = 503
    gemini.payload = "model overloaded"
    err = _generate_error(gemini)
    assert err.detail == "Gemini API error (503 Service Unavailable): model overloaded"


def test_empty_fragments_fail():
    gemini = FakeGemini()
    gemini.payload = gemini_reply("", "")
    assert _generate_error(gemini).detail == "Empty response from model."


def test_invalid_json_fails():
    gemini = FakeGemini()
    gemini.payload = "<html>not json</html>"
    assert _generate_error(gemini).detail == "Invalid JSON response from model."


def test_transport_failure_is_not_retried():
    gemini = FakeGemini()
    gemini.error = httpx.ConnectError("connection refused")
    err = _generate_error(gemini)
    assert err.detail.startswith("Gemini API request failed:")
    assert len(gemini.requests) == 1


def test_timeout_is_reported():
    gemini = FakeGemini()
    gemini.error = httpx.ReadTimeout("read timed out")
    assert _generate_error(gemini).detail == "Gemini API request timed out after 5s"


def test_slow_upstream_is_cut_off_at_the_total_timeout():
    settings = Settings(google_api_key="test-key", gemini_api_base=TEST_API_BASE, llm_timeout=0.05)

    async def stalled(request: httpx.Request) -> httpx.Response:
        await asyncio.sleep(5)
        return httpx.Response(200, json=gemini_reply("too late"))

    async def run():
        # the client itself never times out; only the overall cap can stop this
        async with httpx.AsyncClient(transport=httpx.MockTransport(stalled), timeout=None) as client:
            return await llm_service.generate_summary("Summarize this", settings, client)

    with pytest.raises(HTTPException) as err:
        asyncio.run(run())
    assert err.value.status_code == 500
    assert err.value.detail == "Gemini API request timed out after 0.05s"
