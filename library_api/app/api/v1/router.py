"""
Top‑level router for version 1 of the API.

This router aggregates the domain routers under a unified prefix.
The borrow routes live below ``/users`` next to the user routes.
"""

from fastapi import APIRouter

from .endpoints import books, borrows, users

router = APIRouter()

router.include_router(users.router, prefix="/users", tags=["users"])
router.include_router(borrows.router, prefix="/users", tags=["borrowing"])
router.include_router(books.router, prefix="/books", tags=["books"])
