"""
Main entrypoint for the LY loyalty API.

This module assembles the FastAPI application: logging, CORS, the
error envelope, the access log, the in-memory store and the versioned
routers.  ``create_app`` builds a fresh application (with a fresh
store) on every call; the module-level ``app`` is what ASGI servers
import, e.g.::

    uvicorn loyalty_api.app.main:app --reload
"""

import logging
import time
from datetime import datetime, timezone
from typing import Optional

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from .api.v1.router import router as v1_router
from .core.config import Settings, settings as default_settings
from .core.db import check_connection, init_db
from .core.logging_config import log_request, setup_logging

logger = logging.getLogger(__name__)


def create_app(config: Optional[Settings] = None) -> FastAPI:
    """Create and configure a FastAPI application.

    Parameters
    ----------
    config : Optional[Settings]
        Settings to use instead of the environment-derived defaults.

    Returns
    -------
    FastAPI
        A configured application whose ``state.db`` holds its store.
    """
    config = config or default_settings
    # Logging first so that store initialisation below can log.
    setup_logging(config.log_level, config.log_file or None)

    app = FastAPI(title=config.project_name, version=config.api_version)
    app.state.db = init_db(config)

    origins = [origin.strip() for origin in config.cors_origins.split(",") if origin.strip()]
    app.add_middleware(CORSMiddleware, allow_origins=origins, allow_methods=["*"], allow_headers=["*"])

    @app.middleware("http")
    async def access_log(request: Request, call_next):
        started = time.perf_counter()
        response = await call_next(request)
        log_request(request.method, request.url.path, response.status_code, (time.perf_counter() - started) * 1000)
        return response

    @app.exception_handler(StarletteHTTPException)
    async def http_error(request: Request, exc: StarletteHTTPException) -> JSONResponse:
        error = exc.detail if exc.status_code != status.HTTP_404_NOT_FOUND or exc.detail != "Not Found" else "Route not found"
        return JSONResponse(status_code=exc.status_code, content={"success": False, "error": error})

    @app.exception_handler(RequestValidationError)
    async def validation_error(request: Request, exc: RequestValidationError) -> JSONResponse:
        details = [
            {"field": ".".join(str(part) for part in err["loc"][1:]), "message": err["msg"]}
            for err in exc.errors()
        ]
        return JSONResponse(
            status_code=status.HTTP_400_BAD_REQUEST,
            content={"success": False, "error": "Validation failed", "details": details},
        )

    @app.exception_handler(Exception)
    async def unhandled_error(request: Request, exc: Exception) -> JSONResponse:
        logger.exception("Unhandled error on %s %s", request.method, request.url.path)
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={
                "success": False,
                "error": "Something went wrong!",
                "message": str(exc) if config.debug else "Internal server error",
            },
        )

    @app.get("/health", tags=["health"])
    async def health() -> dict:
        return {
            "status": "OK",
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "environment": config.environment,
        }

    app.include_router(v1_router, prefix="/api/v1")

    @app.on_event("startup")
    async def startup_event() -> None:
        await check_connection(app.state.db, config)
        logger.info("%s %s ready", config.project_name, config.api_version)

    return app


# Create the application instance at import time so that tools such as
# uvicorn can discover it without calling create_app manually.
app = create_app()
