# report_summarizer/config.py
"""
Process-wide configuration.

Read once from the environment (and an optional .env file) when the app is
built, then handed to routers and services through FastAPI dependencies.
Settings are frozen: nothing mutates them after startup.
"""
import os
from dataclasses import dataclass
from typing import Optional

from dotenv import load_dotenv

load_dotenv()

DEFAULT_FRONTEND_URL = "http://localhost:5173"
DEFAULT_PORT = 4000
DEFAULT_GEMINI_MODEL = "gemini-2.5-flash"
DEFAULT_GEMINI_API_BASE = "https://generativelanguage.googleapis.com"
DEFAULT_LLM_TIMEOUT = 60.0
MAX_BODY_BYTES = 50 * 1024 * 1024   # base64 inflates PDFs by ~4/3
# names both uvicorn and the logging module accept
LOG_LEVELS = ("critical", "error", "warning", "info", "debug")


@dataclass(frozen=True)
class Settings:
    google_api_key: Optional[str] = None
    frontend_url: str = DEFAULT_FRONTEND_URL
    host: str = "0.0.0.0"
    port: int = DEFAULT_PORT
    gemini_model: str = DEFAULT_GEMINI_MODEL
    gemini_api_base: str = DEFAULT_GEMINI_API_BASE
    llm_timeout: float = DEFAULT_LLM_TIMEOUT
    max_body_bytes: int = MAX_BODY_BYTES
    log_level: str = "info"

    @property
    def has_api_key(self) -> bool:
        return bool(self.google_api_key and self.google_api_key.strip())

    @classmethod
    def from_env(cls) -> "Settings":
        # GOOGLE_API_KEY wins over GEMINI_API_KEY when both are set
        api_key = os.getenv("GOOGLE_API_KEY") or os.getenv("GEMINI_API_KEY") or None

        port = _positive(os.getenv("PORT", str(DEFAULT_PORT)), int, "PORT")
        timeout = _positive(os.getenv("LLM_TIMEOUT", str(DEFAULT_LLM_TIMEOUT)), float, "LLM_TIMEOUT")
        log_level = os.getenv("LOG_LEVEL", "info").lower()
        if log_level not in LOG_LEVELS:
            raise ValueError(f"LOG_LEVEL must be one of {', '.join(LOG_LEVELS)}, got {log_level!r}")

        return cls(
            google_api_key=api_key,
            frontend_url=os.getenv("FRONTEND_URL") or DEFAULT_FRONTEND_URL,
            host=os.getenv("HOST", "0.0.0.0"),
            port=port,
            gemini_model=os.getenv("GEMINI_MODEL") or DEFAULT_GEMINI_MODEL,
            gemini_api_base=(os.getenv("GEMINI_API_BASE") or DEFAULT_GEMINI_API_BASE).rstrip("/"),
            llm_timeout=timeout,
            log_level=log_level,
        )


def _positive(raw: str, cast, name: str):
    try:
        value = cast(raw)
    except ValueError:
        raise ValueError(f"{name} must be a number, got {raw!r}") from None
    if value <= 0:
        raise ValueError(f"{name} must be > 0, got {raw!r}")
    return value
