# report_summarizer/services/llm_service.py
"""
This service interfaces with the Gemini generative-language REST API to turn
a composed report prompt into a markdown summary. One call, no retries.
"""
import asyncio
import logging
from typing import Any

import httpx
from fastapi import HTTPException

from report_summarizer.config import Settings

logger = logging.getLogger(__name__)

# Generation parameters are fixed; callers cannot tune them per request.
MAX_OUTPUT_TOKENS = 400
TEMPERATURE = 0.3
TOP_P = 0.8

EMPTY_RESPONSE = "Empty response from model."


def build_request_body(prompt: str) -> dict:
    return {
        "contents": [
            {
                "role": "user",
                "parts": [{"text": prompt}],
            }
        ],
        "generationConfig": {
            "maxOutputTokens": MAX_OUTPUT_TOKENS,
            "temperature": TEMPERATURE,
            "topP": TOP_P,
        },
    }


def generate_content_url(settings: Settings) -> str:
    return f"{settings.gemini_api_base}/v1/models/{settings.gemini_model}:generateContent"


def parse_summary(payload: Any) -> str:
    """
    Pulls the text out of a generateContent reply.

    Only the first candidate is read. Empty or missing fragments are dropped,
    the rest are joined with newlines and trimmed. Returns "" when nothing
    usable is left.
    """
    if not isinstance(payload, dict):
        return ""
    candidates = payload.get("candidates") or []
    if not candidates or not isinstance(candidates[0], dict):
        return ""
    parts = (candidates[0].get("content") or {}).get("parts") or []
    texts = [p["text"] for p in parts if isinstance(p, dict) and p.get("text")]
    return "\n".join(texts).strip()


async def generate_summary(prompt: str, settings: Settings, client: httpx.AsyncClient) -> str:
    """
    Sends a prompt to Gemini and returns the generated summary.
    The whole exchange is capped at settings.llm_timeout seconds.

    Args:
        prompt: The full prompt (instructions + report text).
        settings: Process settings (API key, model, endpoint base).
        client: Shared async HTTP client.

    Returns:
        The trimmed markdown summary.

    Raises:
        HTTPException(500): transport failure, timeout, non-2xx status,
        unparsable body or an empty answer.
    """
    timed_out = f"Gemini API request timed out after {settings.llm_timeout:g}s"
    try:
        # httpx times each phase separately; wait_for caps the whole exchange
        resp = await asyncio.wait_for(
            client.post(
                generate_content_url(settings),
                params={"key": settings.google_api_key},
                json=build_request_body(prompt),
            ),
            timeout=settings.llm_timeout,
        )
    except (asyncio.TimeoutError, httpx.TimeoutException) as exc:
        raise HTTPException(500, timed_out) from exc
    except httpx.HTTPError as exc:
        raise HTTPException(500, f"Gemini API request failed: {exc}") from exc

    if not resp.is_success:
        raise HTTPException(
            500, f"Gemini API error ({resp.status_code} {resp.reason_phrase}): {resp.text}"
        )

    try:
        payload = resp.json()
    except ValueError as exc:
        raise HTTPException(500, "Invalid JSON response from model.") from exc

    summary = parse_summary(payload)
    if not summary:
        raise HTTPException(500, EMPTY_RESPONSE)

    logger.debug("Gemini response received (%d chars)", len(summary))
    return summary
