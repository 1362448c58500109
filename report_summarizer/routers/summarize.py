# report_summarizer/routers/summarize.py
"""
Summarize router
================
POST /api/summarize
-------------------
1. Validates the upload and decodes the base64 payload.
2. Extracts the text layer with `pdf_service.extract_text()`.
3. Wraps the text in the report prompt.
4. Sends it to Gemini and returns the markdown summary.

Every failure is logged here and leaves as an HTTPException, which the app
renders as `{"error": ...}`.
"""
import asyncio
import base64
import logging

import httpx
from fastapi import APIRouter, Depends, HTTPException, Request

from report_summarizer.config import Settings
from report_summarizer.models.request import SummarizeRequest
from report_summarizer.models.response import ErrorResponse, SummarizeResponse
from report_summarizer.prompts.report_summary import compose_prompt
from report_summarizer.services import llm_service, pdf_service

logger = logging.getLogger(__name__)

INVALID_UPLOAD = "Please upload a valid PDF file."
MISSING_API_KEY = "Missing GOOGLE_API_KEY in server."
NO_TEXT_FOUND = "Could not extract text from PDF. It may be a scanned image (try OCR)."
GENERIC_FAILURE = "Failed to generate summary."

router = APIRouter()


def get_settings(request: Request) -> Settings:
    return request.app.state.settings


def get_http_client(request: Request) -> httpx.AsyncClient:
    return request.app.state.http_client


def decode_pdf(file_data: str) -> bytes:
    try:
        pdf_bytes = base64.b64decode(file_data)
    except ValueError as exc:
        raise HTTPException(400, INVALID_UPLOAD) from exc
    if not pdf_bytes:
        raise HTTPException(400, INVALID_UPLOAD)
    return pdf_bytes


async def _summarize(req: SummarizeRequest, settings: Settings, client: httpx.AsyncClient) -> SummarizeResponse:
    if not req.is_pdf_upload:
        raise HTTPException(400, INVALID_UPLOAD)
    if not settings.has_api_key:
        raise HTTPException(500, MISSING_API_KEY)

    pdf_bytes = decode_pdf(req.file_data)

    # PyMuPDF is synchronous and CPU-bound: keep it off the event loop
    raw_text = await asyncio.to_thread(pdf_service.extract_text, pdf_bytes)
    pdf_text = raw_text.strip()
    if not pdf_text:
        raise HTTPException(400, NO_TEXT_FOUND)
    logger.info("Extracted %d chars from %d-byte PDF", len(pdf_text), len(pdf_bytes))

    summary = await llm_service.generate_summary(compose_prompt(pdf_text), settings, client)
    return SummarizeResponse(summary=summary)


@router.post(
    "/api/summarize",
    response_model=SummarizeResponse,
    responses={400: {"model": ErrorResponse}, 500: {"model": ErrorResponse}},
)
async def summarize(
    req: SummarizeRequest,
    settings: Settings = Depends(get_settings),
    client: httpx.AsyncClient = Depends(get_http_client),
):
    logger.info("Received request to /api/summarize")
    try:
        return await _summarize(req, settings, client)
    except HTTPException as exc:
        logger.error("Error in /api/summarize (%s): %s", exc.status_code, exc.detail)
        raise
    except Exception as exc:
        logger.exception("Unexpected error in /api/summarize")
        raise HTTPException(500, str(exc) or GENERIC_FAILURE) from exc
