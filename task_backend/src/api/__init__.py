"""
FastAPI Demo Task Manager package.

Exposes the application factory and the default app instance
(import path: src.api.app) for ASGI servers such as uvicorn.
"""

from .main import app, create_app  # noqa: F401
