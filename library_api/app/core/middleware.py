"""
HTTP middleware for access logging and security headers.

``log_requests`` writes one line per request with method, path,
status code and duration.  ``add_security_headers`` sets a small set of
conservative response headers on every response.
"""

import logging
import time
from typing import Awaitable, Callable, Dict

from fastapi import FastAPI, Request, Response

from .logging_config import ACCESS_LOGGER

access_logger = logging.getLogger(ACCESS_LOGGER)

SECURITY_HEADERS: Dict[str, str] = {
    "X-Content-Type-Options": "nosniff",
    "X-Frame-Options": "DENY",
    "Referrer-Policy": "no-referrer",
}

CallNext = Callable[[Request], Awaitable[Response]]


async def log_requests(request: Request, call_next: CallNext) -> Response:
    start = time.perf_counter()
    response = await call_next(request)
    elapsed_ms = (time.perf_counter() - start) * 1000
    access_logger.info(
        "%s %s %s %.1fms",
        request.method, request.url.path, response.status_code, elapsed_ms,
    )
    return response


async def add_security_headers(request: Request, call_next: CallNext) -> Response:
    response = await call_next(request)
    for name, value in SECURITY_HEADERS.items():
        response.headers.setdefault(name, value)
    return response


def register_middleware(app: FastAPI) -> None:
    app.middleware("http")(add_security_headers)
    app.middleware("http")(log_requests)
