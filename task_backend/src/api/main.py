from __future__ import annotations

import logging
import time
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse, Response
from starlette.exceptions import HTTPException as StarletteHTTPException

from .errors import ApiError, RouteNotFound
from .middleware import PathNormalizerMiddleware
from .repositories import InMemoryRepository, Repository
from .routers import meta as meta_router
from .routers import protected as protected_router
from .routers import tasks as tasks_router
from .settings import API_NAME, API_VERSION, Settings, get_settings

logger = logging.getLogger(__name__)

openapi_tags = [
    {"name": "meta", "description": "Service info, health, echo and canned-response endpoints."},
    {"name": "tasks", "description": "CRUD operations for Task records with filtering and search."},
    {"name": "protected", "description": "Endpoints requiring the x-api-key header."},
]

ALL_METHODS = ["GET", "HEAD", "POST", "PUT", "PATCH", "DELETE"]


def original_path(request: Request) -> str:
    """Path as sent by the client, before PathNormalizerMiddleware rewrote it."""
    return getattr(request.state, "original_path", request.url.path)


async def api_error_handler(request: Request, exc: ApiError) -> JSONResponse:
    """
    Render every ApiError as {"error": ..., "message": ...} with its status code.
    """
    logger.debug("%s %s -> %s %s", request.method, request.url.path, exc.status_code, exc.message)
    return JSONResponse(status_code=exc.status_code, content=exc.to_body())


async def validation_exception_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """
    Return a consistent JSON structure for request validation errors.

    Response format:
        {
            "error": "Bad Request",
            "message": "Request validation failed",
            "detail": [... pydantic/fastapi error details ...]
        }
    """
    return JSONResponse(
        status_code=400,
        content={
            "error": "Bad Request",
            "message": "Request validation failed",
            "detail": jsonable_encoder(exc.errors()),
        },
    )


async def http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    """
    Routing failures (404/405) become the RouteNotFound body; anything else keeps
    its status with an {"error", "message"} body.
    """
    if exc.status_code in (404, 405):
        return await api_error_handler(request, RouteNotFound(request.method, original_path(request)))
    return JSONResponse(
        status_code=exc.status_code,
        content={"error": "HTTP Error", "message": str(exc.detail)},
        headers=getattr(exc, "headers", None),
    )


# PUBLIC_INTERFACE
def create_app(
    settings: Optional[Settings] = None,
    repository: Optional[Repository] = None,
) -> FastAPI:
    """
    Build a FastAPI application owning its own task store.

    Args:
        settings: Settings to use; loaded from the environment when omitted.
        repository: Task store to serve; a freshly seeded InMemoryRepository when omitted.

    Returns:
        The configured FastAPI app. Routes are matched in registration order and
        end with a catch-all that answers 404 for any unmatched method/path.
    """
    settings = settings or get_settings()

    app = FastAPI(
        title=API_NAME,
        description="A demo REST API for testing with Bruno or Postman.",
        version=API_VERSION,
        openapi_tags=openapi_tags,
    )
    app.state.settings = settings
    app.state.repository = repository if repository is not None else InMemoryRepository()
    app.state.started_at = time.monotonic()

    # Configure CORS based on settings (.env -> CORS_ALLOW_ORIGINS), with '*' fallback
    allow_all = (settings.cors_allow_origins == ["*"]) or (len(settings.cors_allow_origins) == 0)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"] if allow_all else settings.cors_allow_origins,
        allow_credentials=not allow_all,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    # matching ignores one trailing slash and the case of route literals
    app.add_middleware(PathNormalizerMiddleware)

    app.add_exception_handler(ApiError, api_error_handler)  # type: ignore[arg-type]
    app.add_exception_handler(RequestValidationError, validation_exception_handler)  # type: ignore[arg-type]
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)  # type: ignore[arg-type]

    app.include_router(meta_router.router)
    app.include_router(tasks_router.router)
    app.include_router(protected_router.router)

    # OPTIONS without a CORS preflight still gets 204 with the allowed methods
    @app.options("/{path:path}", include_in_schema=False)
    def options_any(path: str) -> Response:
        return Response(
            status_code=204,
            headers={"Access-Control-Allow-Methods": ",".join(ALL_METHODS), "Allow": ",".join(ALL_METHODS)},
        )

    @app.api_route("/{path:path}", methods=ALL_METHODS, include_in_schema=False)
    def route_not_found(request: Request, path: str) -> None:
        raise RouteNotFound(request.method, original_path(request))

    return app


app = create_app()
