"""
Domain errors and their HTTP mapping.

Every failure raised by the services is a ``LibraryError`` carrying
one of a closed set of ``ErrorKind`` values.  Handlers never inspect
exception subclasses; the kind alone decides the HTTP status code.
Error bodies use the shape ``{"message": "..."}``.
"""

import enum
import logging
from typing import Any, Dict, List

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from .middleware import SECURITY_HEADERS


class ErrorKind(str, enum.Enum):
    NOT_FOUND = "not_found"
    CONFLICT = "conflict"
    VALIDATION = "validation"
    STORAGE_UNAVAILABLE = "storage_unavailable"


STATUS_BY_KIND: Dict[ErrorKind, int] = {
    ErrorKind.NOT_FOUND: status.HTTP_404_NOT_FOUND,
    ErrorKind.CONFLICT: status.HTTP_400_BAD_REQUEST,
    ErrorKind.VALIDATION: status.HTTP_400_BAD_REQUEST,
    ErrorKind.STORAGE_UNAVAILABLE: status.HTTP_503_SERVICE_UNAVAILABLE,
}


class LibraryError(Exception):
    """A domain failure with a kind and a human readable message."""

    def __init__(self, kind: ErrorKind, message: str) -> None:
        super().__init__(message)
        self.kind = kind
        self.message = message

    @property
    def status_code(self) -> int:
        return STATUS_BY_KIND[self.kind]

    def __repr__(self) -> str:
        return f"LibraryError({self.kind.value!r}, {self.message!r})"

    @classmethod
    def not_found(cls, message: str = "Resource not found") -> "LibraryError":
        return cls(ErrorKind.NOT_FOUND, message)

    @classmethod
    def conflict(cls, message: str) -> "LibraryError":
        return cls(ErrorKind.CONFLICT, message)

    @classmethod
    def validation(cls, message: str = "Validation error") -> "LibraryError":
        return cls(ErrorKind.VALIDATION, message)

    @classmethod
    def storage_unavailable(cls, message: str = "Storage unavailable") -> "LibraryError":
        return cls(ErrorKind.STORAGE_UNAVAILABLE, message)


logger = logging.getLogger(__name__)


async def library_error_handler(request: Request, exc: LibraryError) -> JSONResponse:
    if exc.kind is ErrorKind.STORAGE_UNAVAILABLE:
        logger.error("Storage failure on %s %s: %s", request.method, request.url.path, exc.message)
    return JSONResponse(status_code=exc.status_code, content={"message": exc.message})


async def validation_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """Report request validation failures as HTTP 400 with an error list."""
    errors: List[Dict[str, Any]] = [
        {"loc": list(err.get("loc", ())), "msg": err.get("msg"), "type": err.get("type")}
        for err in exc.errors()
    ]
    return JSONResponse(status_code=status.HTTP_400_BAD_REQUEST, content={"errors": errors})


async def http_error_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    # Covers unknown routes (404) and wrong methods (405).
    return JSONResponse(
        status_code=exc.status_code,
        content={"message": exc.detail},
        headers=getattr(exc, "headers", None),
    )


async def unhandled_error_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.exception("Unhandled error on %s %s", request.method, request.url.path)
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"message": "Internal Server Error"},
        # Raised past the http middleware stack, so add the headers here.
        headers=SECURITY_HEADERS,
    )


def register_exception_handlers(app: FastAPI) -> None:
    """Attach the error handlers above to ``app``."""
    app.add_exception_handler(LibraryError, library_error_handler)
    app.add_exception_handler(RequestValidationError, validation_error_handler)
    app.add_exception_handler(StarletteHTTPException, http_error_handler)
    app.add_exception_handler(Exception, unhandled_error_handler)
