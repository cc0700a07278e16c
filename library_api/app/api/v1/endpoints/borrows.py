"""
Borrow and return endpoints for API v1.

Both routes act on a (user, book) pair taken from the path.  Domain
errors raised by ``BorrowService`` are turned into HTTP responses by
the application's exception handlers.
"""

from fastapi import APIRouter, Depends, Path, status

from library_api.app.api.deps import MAX_ID, get_borrow_service
from library_api.app.schemas.borrow import BorrowRead, ReturnRequest
from library_api.app.services.borrow_service import BorrowService

router = APIRouter()


@router.post(
    "/{user_id}/borrow/{book_id}",
    response_model=BorrowRead,
    status_code=status.HTTP_201_CREATED,
    summary="Borrow a book for a user",
    responses={
        400: {"description": "Invalid input or book already borrowed"},
        404: {"description": "User or book not found"},
    },
)
def borrow_book(
    user_id: int = Path(..., ge=1, le=MAX_ID, description="Numeric ID of the user"),
    book_id: int = Path(..., ge=1, le=MAX_ID, description="Numeric ID of the book to borrow"),
    service: BorrowService = Depends(get_borrow_service),
) -> BorrowRead:
    return service.borrow_book(user_id, book_id)


@router.post(
    "/{user_id}/return/{book_id}",
    response_model=BorrowRead,
    summary="Return a book and provide a rating",
    responses={400: {"description": "Invalid input or book not currently borrowed"}},
)
def return_book(
    data: ReturnRequest,
    user_id: int = Path(..., ge=1, le=MAX_ID, description="Numeric ID of the user"),
    book_id: int = Path(..., ge=1, le=MAX_ID, description="Numeric ID of the book to return"),
    service: BorrowService = Depends(get_borrow_service),
) -> BorrowRead:
    return service.return_book(user_id, book_id, data.score)
