"""
Main entrypoint for the Library API.

This module assembles the FastAPI application, sets up logging and
includes versioned routers.  The ``create_app`` function builds and
configures the app, which is then instantiated at module import time
as ``app``.  Importing the app here makes it easy to run with uvicorn
or another ASGI server, e.g.::

    uvicorn library_api.app.main:app --reload

The process owns one ``LibraryRepository``; it is created here and
stored on ``app.state`` for the request dependencies to pick up.
"""

from contextlib import asynccontextmanager
from typing import AsyncIterator, Optional

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from .api.v1.router import router as v1_router
from .core.config import Settings, settings as default_settings
from .core.db import get_database_path
from .core.errors import register_exception_handlers
from .core.logging_config import setup_logging
from .core.middleware import register_middleware
from .core.repository import LibraryRepository


def create_app(settings: Optional[Settings] = None) -> FastAPI:
    """Create and configure a FastAPI application.

    Parameters
    ----------
    settings : Optional[Settings]
        Settings to build the app from.  Defaults to the module level
        settings read from the environment.

    Returns
    -------
    FastAPI
        A configured FastAPI application instance.  Migrations run
        when the application starts up.
    """
    settings = settings or default_settings
    # Logging first so everything below can log.
    setup_logging(settings.log_level, settings.log_file, settings.access_log_level)

    repository = LibraryRepository(get_database_path(settings.database_url))

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        repository.init_schema()
        yield

    app = FastAPI(
        title=settings.project_name,
        version=settings.api_version,
        debug=settings.debug,
        docs_url="/api-docs",
        lifespan=lifespan,
    )
    app.state.settings = settings
    app.state.repository = repository

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.allowed_origins(),
        allow_methods=["*"],
        allow_headers=["*"],
    )
    register_middleware(app)
    register_exception_handlers(app)

    app.include_router(v1_router, prefix="/api/v1")

    @app.get("/health", tags=["health"])
    def health() -> dict:
        return {"ok": True}

    return app


# Create the application instance at import time so that tools such as
# uvicorn can discover it without calling create_app manually.
app = create_app()
