"""
Application package initializer.

This package contains the FastAPI entrypoint (``main``), the
in-memory data store (``core``), the service layer and the versioned
API routers.
"""

from .main import app  # noqa: F401
