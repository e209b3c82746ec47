"""
Main entrypoint for the Developer Profile API.

This module assembles the FastAPI application: logging, exception
handlers and the versioned routers.  The app is instantiated at import
time as ``app`` so it can be served directly::

    uvicorn profile_api.app.main:app --reload
"""

from fastapi import FastAPI

from .api.v1.router import router as v1_router
from .core.config import settings
from .core.db import init_db
from .core.error_handlers import register_exception_handlers
from .core.logging_config import setup_logging


def create_app() -> FastAPI:
    """Create and configure a FastAPI application.

    Returns
    -------
    FastAPI
        A configured FastAPI instance with all v1 routes mounted under
        ``/api/v1``.  Migrations are applied on startup.
    """
    # Logging first so that everything below can log.
    setup_logging()

    app = FastAPI(title=settings.project_name, version=settings.api_version, debug=settings.debug)
    register_exception_handlers(app)
    app.include_router(v1_router, prefix="/api/v1")

    @app.on_event("startup")
    async def startup_event() -> None:
        init_db()

    return app


app = create_app()
