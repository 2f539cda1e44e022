"""Request ids for tracing a participant's turn through the logs.

The id arrives in (or is added as) the ``X-Request-ID`` header, is echoed on
the response, and is merged into every log entry by
``chatsurvey.core.logging.add_correlation_id``. Error bodies carry their own
``debug_id``; both are logged together.
"""

import uuid

from asgi_correlation_id import CorrelationIdMiddleware
from asgi_correlation_id.context import correlation_id
from fastapi import FastAPI

REQUEST_ID_HEADER = "X-Request-ID"


def setup_correlation_middleware(app: FastAPI) -> None:
    # Front ends may send their own ids (not necessarily UUIDs); keep them as-is
    app.add_middleware(
        CorrelationIdMiddleware,
        header_name=REQUEST_ID_HEADER,
        generator=lambda: str(uuid.uuid4()),
        validator=None,
    )


def get_correlation_id() -> str | None:
    return correlation_id.get(None)
