"""
FastAPI dependencies handing services to the endpoints.

The application owns a single ``LibraryRepository`` stored on
``app.state`` by ``create_app``.  Services are cheap wrappers around
it and are built per request.
"""

from fastapi import Depends, Request

from ..core.repository import LibraryRepository
from ..services import BookService, BorrowService, UserService


def get_repository(request: Request) -> LibraryRepository:
    return request.app.state.repository


def get_borrow_service(repository: LibraryRepository = Depends(get_repository)) -> BorrowService:
    return BorrowService(repository)


def get_user_service(
    repository: LibraryRepository = Depends(get_repository),
    borrows: BorrowService = Depends(get_borrow_service),
) -> UserService:
    return UserService(repository, borrows)


def get_book_service(
    repository: LibraryRepository = Depends(get_repository),
    borrows: BorrowService = Depends(get_borrow_service),
) -> BookService:
    return BookService(repository, borrows)


# Largest value SQLite stores in an INTEGER column.  Ids outside
# 1..MAX_ID are rejected as validation errors before reaching sqlite3.
MAX_ID = 2**63 - 1
