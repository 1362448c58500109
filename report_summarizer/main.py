import logging
from contextlib import asynccontextmanager
from typing import Optional

import httpx
import uvicorn
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from report_summarizer.config import Settings
from report_summarizer.middleware import BodySizeLimitMiddleware
from report_summarizer.models.response import HealthResponse
from report_summarizer.routers import summarize

logger = logging.getLogger(__name__)

# httpx logs full request URLs at INFO, and the Gemini key travels in the query string
_QUIET_LOGGERS = ["httpx", "httpcore"]


def setup_logging(level: str) -> None:
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format="%(asctime)s  %(levelname)-8s  %(name)s  %(message)s",
    )
    for name in _QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)


def create_app(
    settings: Optional[Settings] = None,
    transport: Optional[httpx.AsyncBaseTransport] = None,
) -> FastAPI:
    """Builds the API. `transport` replaces the outbound HTTP layer (tests)."""
    settings = settings or Settings.from_env()
    setup_logging(settings.log_level)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        if not settings.has_api_key:
            logger.warning("Missing GOOGLE_API_KEY or GEMINI_API_KEY in environment.")
        async with httpx.AsyncClient(timeout=settings.llm_timeout, transport=transport) as client:
            app.state.http_client = client
            logger.info("Backend running on port %d", settings.port)
            yield

    app = FastAPI(title="Medical Report Summarizer API", lifespan=lifespan)
    app.state.settings = settings

    app.add_middleware(BodySizeLimitMiddleware, max_bytes=settings.max_body_bytes)

    # Added last so it wraps the size check and 413s still carry CORS headers
    app.add_middleware(
        CORSMiddleware,
        allow_origins=[settings.frontend_url],
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.exception_handler(StarletteHTTPException)
    async def http_error(request: Request, exc: StarletteHTTPException):
        return JSONResponse(status_code=exc.status_code, content={"error": exc.detail}, headers=exc.headers)

    @app.exception_handler(RequestValidationError)
    async def validation_error(request: Request, exc: RequestValidationError):
        # errors() echoes the input, which can be megabytes of base64
        problems = [(".".join(map(str, e["loc"])), e["msg"]) for e in exc.errors()]
        logger.error("Malformed request to %s: %s", request.url.path, problems)
        return JSONResponse(status_code=400, content={"error": summarize.INVALID_UPLOAD})

    app.include_router(summarize.router)

    @app.get("/health", response_model=HealthResponse)
    def health_check():
        return {"status": "ok"}

    return app


def run() -> None:
    """Console entry point. Without it: `uvicorn report_summarizer.main:create_app --factory`."""
    settings = Settings.from_env()
    uvicorn.run(create_app(settings), host=settings.host, port=settings.port, log_level=settings.log_level)


if __name__ == "__main__":
    run()
