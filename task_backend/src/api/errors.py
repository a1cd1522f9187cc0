from __future__ import annotations

from typing import Any, Dict, Optional

from fastapi import status


class ApiError(Exception):
    """
    Base class for errors rendered as a JSON body of the form
    {"error": <category>, "message": <human readable text>}.
    """

    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR
    error: str = "Internal Server Error"

    def __init__(self, message: str, *, error: Optional[str] = None) -> None:
        super().__init__(message)
        self.message = message
        if error is not None:
            self.error = error

    def to_body(self) -> Dict[str, Any]:
        return {"error": self.error, "message": self.message}


class NotFound(ApiError):
    """Referenced task id is not present in the store."""

    status_code = status.HTTP_404_NOT_FOUND
    error = "Not Found"


class InvalidInput(ApiError):
    """Missing/empty title, invalid priority, or unsupported canned response code."""

    status_code = status.HTTP_400_BAD_REQUEST
    error = "Bad Request"


class Unauthorized(ApiError):
    """Missing or incorrect API key."""

    status_code = status.HTTP_401_UNAUTHORIZED
    error = "Unauthorized"


class RouteNotFound(NotFound):
    """No route matches the request method and path."""

    hint = "Visit GET /api for available endpoints"

    def __init__(self, method: str, path: str) -> None:
        super().__init__(f"Route {method} {path} not found")

    def to_body(self) -> Dict[str, Any]:
        body = super().to_body()
        body["hint"] = self.hint
        return body
