"""Conversational survey backend: FastAPI application entry point."""

import signal
import uuid
from contextlib import asynccontextmanager

# configure_structlog MUST run before the other chatsurvey imports: structlog
# caches the processor chain on first use.
from chatsurvey.core.config import get_settings as _get_settings_early
from chatsurvey.core.logging import configure_structlog

_early_settings = _get_settings_early()
configure_structlog(
    log_level="DEBUG" if _early_settings.debug else "INFO",
    json_logs=not _early_settings.debug,
)

import structlog
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from fastapi.staticfiles import StaticFiles
from starlette.exceptions import HTTPException as StarletteHTTPException

from chatsurvey.api.routes import api_router
from chatsurvey.core.config import Settings, get_settings
from chatsurvey.core.exceptions import SurveyError
from chatsurvey.middleware.correlation import REQUEST_ID_HEADER, get_correlation_id, setup_correlation_middleware
from chatsurvey.services.llm_client import AnthropicLLMClient, FakeLLMClient, LLMClient
from chatsurvey.storage.report_store import ReportStore
from chatsurvey.storage.session_registry import create_session_registry
from chatsurvey.storage.transcript_store import TranscriptStore
from chatsurvey.surveys import SURVEY_TYPES

logger = structlog.get_logger(__name__)


def build_llm_client(settings: Settings) -> LLMClient:
    """Anthropic client, or the offline fake when no API key is configured."""
    if settings.anthropic_api_key:
        return AnthropicLLMClient(api_key=settings.anthropic_api_key, model=settings.chat_model)
    logger.warning("llm_client_offline", reason="ANTHROPIC_API_KEY not set", client="FakeLLMClient")
    return FakeLLMClient(scenario="happy_path")


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Open the data directories, session registry and LLM client; close them on shutdown."""
    # SIGTERM flips this so /api/health returns 503 while draining
    app.state.shutting_down = False

    def handle_sigterm(signum, frame):
        app.state.shutting_down = True
        logger.info("sigterm_received", action="health_check_503_draining_connections")

    signal.signal(signal.SIGTERM, handle_sigterm)

    settings = get_settings()
    logger.info("startup_begin", app_name=settings.app_name, debug=settings.debug)

    TranscriptStore(settings.sessions_dir).ensure_dirs(list(SURVEY_TYPES))
    ReportStore(settings.reports_dir).ensure_dirs()

    app.state.session_registry = await create_session_registry(
        settings.session_registry_url,
        settings.session_registry_ttl_seconds,
    )
    app.state.llm_client = build_llm_client(settings)
    if settings.admin_password == "admin123":
        logger.warning("admin_password_default", hint="set ADMIN_PASSWORD")

    yield

    logger.info("shutdown_begin")
    await app.state.session_registry.close()
    close = getattr(app.state.llm_client, "close", None)
    if close is not None:
        await close()
    logger.info("shutdown_complete")


def _error_response(request: Request, status_code: int, message: str, event: str, **context) -> JSONResponse:
    debug_id = str(uuid.uuid4())
    log = logger.error if status_code >= 500 else logger.warning
    log(
        event,
        status_code=status_code,
        debug_id=debug_id,
        correlation_id=get_correlation_id(),
        path=request.url.path,
        method=request.method,
        **context,
    )
    return JSONResponse(status_code=status_code, content={"error": message, "debug_id": debug_id})


async def survey_error_handler(request: Request, exc: SurveyError) -> JSONResponse:
    """Domain errors: 4xx carry their message, 5xx only the public one."""
    message = str(exc) if exc.status_code < 500 else exc.public_message
    return _error_response(
        request,
        exc.status_code,
        message,
        "survey_error",
        error=str(exc),
        error_type=type(exc).__name__,
    )


async def http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    return _error_response(request, exc.status_code, str(exc.detail), "http_exception", detail=exc.detail)


async def validation_exception_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """Missing or malformed request fields are a 400, not FastAPI's default 422."""
    fields = sorted({".".join(str(p) for p in err["loc"][1:]) or "body" for err in exc.errors()})
    message = f"Missing or invalid field(s): {', '.join(fields)}"
    return _error_response(request, 400, message, "request_validation_failed", fields=fields)


async def generic_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Unhandled errors: full traceback in the log, generic 500 to the client."""
    return _error_response(
        request,
        500,
        "Internal server error",
        "unhandled_exception",
        error=str(exc),
        error_type=type(exc).__name__,
        exc_info=True,
    )


def create_app() -> FastAPI:
    """Create and configure the FastAPI application."""
    settings = get_settings()

    app = FastAPI(
        title=settings.app_name,
        description="Conversational surveys backed by an LLM, with per-session JSON transcripts",
        version="0.1.0",
        docs_url="/docs" if settings.debug else None,
        redoc_url="/redoc" if settings.debug else None,
        lifespan=lifespan,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=False,
        expose_headers=[REQUEST_ID_HEADER],
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # Added last so it wraps CORS: every request gets an id, even rejected ones
    setup_correlation_middleware(app)

    app.exception_handler(SurveyError)(survey_error_handler)
    app.exception_handler(StarletteHTTPException)(http_exception_handler)
    app.exception_handler(RequestValidationError)(validation_exception_handler)
    app.exception_handler(Exception)(generic_exception_handler)

    app.include_router(api_router, prefix="/api")

    # Survey front ends, when deployed alongside
    if settings.static_dir.is_dir():
        app.mount("/", StaticFiles(directory=settings.static_dir, html=True), name="static")

    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "chatsurvey.main:app",
        host="0.0.0.0",
        port=3000,
        reload=_early_settings.debug,
    )
