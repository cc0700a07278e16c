"""
Book endpoints for API v1.

The list view returns ``id`` and ``title`` only.  The single book view
adds the average score over the book's borrows.
"""

from typing import List

from fastapi import APIRouter, Depends, Path, status

from library_api.app.api.deps import MAX_ID, get_book_service
from library_api.app.schemas.book import BookCreate, BookDetail, BookRead
from library_api.app.services.book_service import BookService

router = APIRouter()


@router.get("/", response_model=List[BookRead], summary="List books")
def list_books(service: BookService = Depends(get_book_service)) -> List[BookRead]:
    return service.list_books()


@router.get(
    "/{book_id}",
    response_model=BookDetail,
    summary="Get a book with its average score",
    responses={404: {"description": "Book not found"}},
)
def get_book(
    book_id: int = Path(..., ge=1, le=MAX_ID, description="Numeric ID of the book"),
    service: BookService = Depends(get_book_service),
) -> BookDetail:
    """Return a book and its average score.

    ``score`` is ``null`` when the book was never borrowed.  Borrows
    that carry no score yet count as 0.
    """
    return service.get_book(book_id)


@router.post(
    "/",
    response_model=BookRead,
    status_code=status.HTTP_201_CREATED,
    summary="Create a book",
    responses={400: {"description": "Invalid input"}},
)
def create_book(
    data: BookCreate,
    service: BookService = Depends(get_book_service),
) -> BookRead:
    return service.create_book(data)
