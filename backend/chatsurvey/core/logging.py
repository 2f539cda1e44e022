"""structlog setup for the survey service.

Application events and stdlib records (uvicorn, anthropic, httpx, redis) go
through one processor chain and one stdout handler, so every line has the same
shape: JSON in production, coloured console output with ``DEBUG=true``.

Each entry carries the request's correlation id. Participant secrets
(passwords, hashes, bearer tokens) are masked before rendering.
"""

import logging
import logging.config

import structlog
from asgi_correlation_id.context import correlation_id

REDACTED = "[redacted]"

# Event keys whose values never reach the log
SENSITIVE_KEYS = frozenset({"password", "password_hash", "authorization", "admin_password", "api_key"})

# Third-party loggers that are too chatty at INFO
QUIET_LOGGERS = ("uvicorn.access", "httpx", "httpcore", "anthropic", "redis")


def add_correlation_id(logger, method, event_dict):
    cid = correlation_id.get(None)
    if cid:
        event_dict.setdefault("correlation_id", cid)
    return event_dict


def redact_secrets(logger, method, event_dict):
    for key in SENSITIVE_KEYS.intersection(event_dict):
        event_dict[key] = REDACTED
    return event_dict


def _shared_processors() -> list:
    return [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        add_correlation_id,
        redact_secrets,
        structlog.processors.TimeStamper(fmt="iso", utc=True),
        structlog.processors.StackInfoRenderer(),
    ]


def configure_structlog(log_level: str = "INFO", json_logs: bool = True) -> None:
    """Route structlog and stdlib logging through the same renderer.

    Must run before other ``chatsurvey`` modules create their loggers, since
    loggers are cached on first use.

    Args:
        log_level: Root level name, e.g. ``"INFO"``
        json_logs: JSON lines when True, ``ConsoleRenderer`` otherwise
    """
    shared = _shared_processors()
    renderer = structlog.processors.JSONRenderer() if json_logs else structlog.dev.ConsoleRenderer()
    if json_logs:
        # Tracebacks as a string field instead of a multi-line dump
        shared.append(structlog.processors.format_exc_info)

    logging.config.dictConfig({
        "version": 1,
        "disable_existing_loggers": False,
        "formatters": {
            "structured": {
                "()": structlog.stdlib.ProcessorFormatter,
                "foreign_pre_chain": shared,
                "processors": [structlog.stdlib.ProcessorFormatter.remove_processors_meta, renderer],
            },
        },
        "handlers": {
            "stdout": {
                "class": "logging.StreamHandler",
                "formatter": "structured",
                "stream": "ext://sys.stdout",
            },
        },
        "root": {"handlers": ["stdout"], "level": log_level},
        "loggers": {name: {"level": "WARNING"} for name in QUIET_LOGGERS},
    })

    structlog.configure(
        processors=[*shared, structlog.stdlib.ProcessorFormatter.wrap_for_formatter],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )
