import structlog
from fastapi import APIRouter, Depends, Request
from fastapi.responses import JSONResponse

from chatsurvey.api.deps import get_session_registry
from chatsurvey.core.config import Settings, get_settings
from chatsurvey.storage.session_registry import SessionRegistry

logger = structlog.get_logger(__name__)

router = APIRouter()


@router.get("/health")
async def health_check(request: Request):
    """Liveness check.

    Returns 503 during graceful shutdown so the proxy stops routing traffic.
    """
    if getattr(request.app.state, "shutting_down", False):
        return JSONResponse(
            status_code=503,
            content={"status": "shutting_down", "service": "chatsurvey"},
        )
    return {"status": "healthy", "service": "chatsurvey"}


@router.get("/ready")
async def readiness_check(
    settings: Settings = Depends(get_settings),
    registry: SessionRegistry = Depends(get_session_registry),
):
    """Readiness check: data directory present and session registry reachable."""
    checks = {"data_dir": False, "session_registry": False}

    checks["data_dir"] = settings.sessions_dir.is_dir()
    if not checks["data_dir"]:
        logger.error("readiness_data_dir_missing", path=str(settings.sessions_dir))

    try:
        await registry.lookup("readiness-probe")
        checks["session_registry"] = True
    except Exception as e:
        logger.error("readiness_registry_failed", error=str(e), error_type=type(e).__name__)

    all_healthy = all(checks.values())
    return JSONResponse(
        status_code=200 if all_healthy else 503,
        content={"status": "ready" if all_healthy else "degraded", "checks": checks},
    )
