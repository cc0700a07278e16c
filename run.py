"""Entry point for the Library API.

Starts the FastAPI application with Uvicorn.  Host, port and the rest
of the configuration are read from environment variables (see
``library_api.app.core.config``).

Usage:
    python run.py
"""
import asyncio
import logging

from uvicorn import Config, Server

from library_api.app.core.config import settings
from library_api.app.main import create_app


async def main() -> None:
    """Serve the API until interrupted."""
    app = create_app(settings)
    config = Config(
        app=app,
        host=settings.host,
        port=settings.port,
        reload=False,
        log_level=settings.log_level.lower(),
    )
    server = Server(config)
    try:
        await server.serve()
    except Exception:
        logging.getLogger(__name__).exception("Server stopped with an error")
        raise


if __name__ == "__main__":
    try:
        asyncio.run(main())
    except (KeyboardInterrupt, SystemExit):
        pass
