from __future__ import annotations

import logging
from typing import Optional

from fastapi import Request, Security
from fastapi.security import APIKeyHeader

from .errors import Unauthorized
from .settings import Settings

logger = logging.getLogger(__name__)

API_KEY_HEADER = "x-api-key"

_security = APIKeyHeader(name=API_KEY_HEADER, auto_error=False)


# PUBLIC_INTERFACE
def require_api_key(
    request: Request,
    api_key: Optional[str] = Security(_security),
) -> None:
    """
    Enforce the shared-secret API key on protected routes.

    The expected value comes from the application's Settings (API_KEY env var,
    'demo-key-12345' by default).

    Usage:
        router = APIRouter(dependencies=[Depends(require_api_key)])

    Raises:
        Unauthorized if the x-api-key header is missing or does not match.
    """
    settings: Settings = request.app.state.settings
    if api_key is None or api_key != settings.api_key:
        logger.warning(
            "Rejected %s %s: %s API key",
            request.method,
            request.url.path,
            "missing" if api_key is None else "invalid",
        )
        raise Unauthorized(
            f"Invalid or missing API key. Use {API_KEY_HEADER}: {settings.api_key}"
        )
