from __future__ import annotations

import time
from typing import Any, Dict, List, Union

from fastapi import APIRouter, Depends, Request
from fastapi.responses import JSONResponse

from ..auth import API_KEY_HEADER
from ..errors import InvalidInput
from ..settings import API_NAME, API_VERSION, Settings
from ..utils import isoformat_z, parse_int_prefix, read_json_body, utcnow

router = APIRouter(
    prefix="/api",
    tags=["meta"],
)

CANNED_RESPONSES: Dict[int, Dict[str, str]] = {
    200: {"status": "OK", "message": "Request successful"},
    201: {"status": "Created", "message": "Resource created"},
    400: {"error": "Bad Request", "message": "Invalid request data"},
    401: {"error": "Unauthorized", "message": "Authentication required"},
    403: {"error": "Forbidden", "message": "Access denied"},
    404: {"error": "Not Found", "message": "Resource not found"},
    500: {"error": "Internal Server Error", "message": "Something went wrong"},
}

ENDPOINTS: Dict[str, List[str]] = {
    "public": [
        "GET /api - This info",
        "GET /api/health - Health check",
        "GET /api/echo?message=hello - Echo service",
        "POST /api/echo - Echo the request body",
    ],
    "tasks": [
        "GET /api/tasks - List all tasks (supports ?completed=true/false&priority=high/medium/low&search=text)",
        "GET /api/tasks/:id - Get single task",
        "POST /api/tasks - Create task",
        "PUT /api/tasks/:id - Update task",
        "PATCH /api/tasks/:id/toggle - Toggle completion",
        "DELETE /api/tasks/:id - Delete task",
    ],
    "protected": [
        "GET /api/protected/stats - Task statistics (requires x-api-key header)",
    ],
    "testing": [
        "POST /api/test/response/:code - Respond with the given status code (200, 201, 400, 401, 403, 404, 500)",
    ],
}


def _query_params(request: Request) -> Dict[str, Union[str, List[str]]]:
    # repeated keys collapse to a list of values
    params: Dict[str, Union[str, List[str]]] = {}
    for key in request.query_params.keys():
        if key in params:
            continue
        values = request.query_params.getlist(key)
        params[key] = values[0] if len(values) == 1 else values
    return params


# PUBLIC_INTERFACE
@router.get("", summary="API Info")
def api_info(request: Request) -> Dict[str, Any]:
    """
    Service description, endpoint directory and the demo authentication scheme.
    """
    settings: Settings = request.app.state.settings
    return {
        "name": API_NAME,
        "version": API_VERSION,
        "description": "A demo REST API for testing with Bruno or Postman",
        "endpoints": ENDPOINTS,
        "authentication": {
            "type": "API Key",
            "header": API_KEY_HEADER,
            "demoKey": settings.api_key,
        },
    }


# PUBLIC_INTERFACE
@router.get("/health", summary="Health Check")
def health_check(request: Request) -> Dict[str, Any]:
    """
    Health check endpoint.

    Returns:
        status, current timestamp, seconds since the app was created and API version.
    """
    return {
        "status": "healthy",
        "timestamp": isoformat_z(utcnow()),
        "uptime": time.monotonic() - request.app.state.started_at,
        "version": API_VERSION,
    }


# PUBLIC_INTERFACE
@router.get("/echo", summary="Echo Query")
def echo_query(request: Request) -> Dict[str, Any]:
    """
    Reflect the message query parameter, every query parameter and a selection
    of request headers. Only the names of x- headers are returned.
    """
    headers = request.headers
    return {
        "message": request.query_params.get("message") or "No message provided",
        "queryParams": _query_params(request),
        "headers": {
            "userAgent": headers.get("user-agent"),
            "contentType": headers.get("content-type"),
            "customHeaders": [name for name in headers.keys() if name.startswith("x-")],
        },
        "timestamp": isoformat_z(utcnow()),
    }


# PUBLIC_INTERFACE
@router.post("/echo", summary="Echo Body")
def echo_body(request: Request, body: Any = Depends(read_json_body)) -> Dict[str, Any]:
    """
    Reflect the parsed JSON body and its content type.
    """
    return {
        "received": body,
        "contentType": request.headers.get("content-type"),
        "timestamp": isoformat_z(utcnow()),
    }


# PUBLIC_INTERFACE
@router.post("/test/response/{code}", summary="Canned Response")
def canned_response(code: str) -> JSONResponse:
    """
    Respond with a fixed body and the requested status code.

    Raises:
        InvalidInput if the code is not one of 200, 201, 400, 401, 403, 404, 500.
    """
    parsed = parse_int_prefix(code)
    if parsed is None or parsed not in CANNED_RESPONSES:
        supported = ", ".join(str(c) for c in CANNED_RESPONSES)
        raise InvalidInput(f"Supported codes: {supported}", error="Invalid code")
    return JSONResponse(status_code=parsed, content=CANNED_RESPONSES[parsed])
