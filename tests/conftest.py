import base64
import json

import fitz
import httpx
import pytest
from fastapi.testclient import TestClient

from report_summarizer.config import Settings
from report_summarizer.main import create_app

TEST_API_BASE = "https://gemini.test"


def make_pdf(*pages: str) -> bytes:
    """Builds a real PDF with one page per argument ("" gives a blank page)."""
    doc = fitz.open()
    for text in pages or ("",):
        page = doc.new_page()
        if text:
            page.insert_text((72, 72), text)
    data = doc.tobytes()
    doc.close()
    return data


def b64(data: bytes) -> str:
    return base64.b64encode(data).decode("ascii")


def gemini_reply(*texts: str) -> dict:
    return {"candidates": [{"content": {"role": "model", "parts": [{"text": t} for t in texts]}}]}


class FakeGemini:
    """httpx.MockTransport handler standing in for generateContent."""

    def __init__(self):
        self.requests: list[httpx.Request] = []
        self.status = 200
        self.payload = gemini_reply("### English\n- Key findings: Low hemoglobin")
        self.error = None

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if self.error is not None:
            raise self.error
        if isinstance(self.payload, (dict, list)):
            return httpx.Response(self.status, json=self.payload)
        return httpx.Response(self.status, text=self.payload)

    @property
    def last_prompt(self) -> str:
        body = json.loads(self.requests[-1].content)
        return body["contents"][0]["parts"][0]["text"]


@pytest.fixture
def settings():
    return Settings(google_api_key="test-key", gemini_api_base=TEST_API_BASE)


@pytest.fixture
def gemini():
    return FakeGemini()


@pytest.fixture
def client(settings, gemini):
    app = create_app(settings, transport=httpx.MockTransport(gemini))
    with TestClient(app) as c:
        yield c
