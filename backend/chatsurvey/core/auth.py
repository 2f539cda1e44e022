"""Shared-secret bearer authentication for the admin namespace."""

import secrets

from fastapi import Depends, HTTPException, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from chatsurvey.core.config import Settings, get_settings

_bearer_scheme = HTTPBearer(auto_error=False)


async def require_admin(
    request: Request,
    credentials: HTTPAuthorizationCredentials | None = Depends(_bearer_scheme),
    settings: Settings = Depends(get_settings),
) -> None:
    """FastAPI dependency that checks ``Authorization: Bearer <ADMIN_PASSWORD>``.

    Attach it at router level so every admin sub-route is covered::

        router = APIRouter(prefix="/admin", dependencies=[Depends(require_admin)])
    """
    if credentials is None or credentials.scheme.lower() != "bearer":
        raise HTTPException(status_code=401, detail="Unauthorized")

    if not secrets.compare_digest(
        credentials.credentials.encode("utf-8"),
        settings.admin_password.encode("utf-8"),
    ):
        raise HTTPException(status_code=401, detail="Invalid password")

    request.state.admin = True
