"""
Business logic for books.

Books are added to the catalogue once and never changed.  The single
book view reports the average score computed by ``BorrowService``.
"""

import logging
from typing import List

from ..core.errors import LibraryError
from ..core.repository import LibraryRepository
from ..schemas.book import BookCreate, BookDetail, BookRead
from .borrow_service import BorrowService

logger = logging.getLogger(__name__)


class BookService:
    """Service for the book catalogue."""

    def __init__(self, repository: LibraryRepository, borrows: BorrowService) -> None:
        self.repository = repository
        self.borrows = borrows

    def create_book(self, data: BookCreate) -> BookRead:
        book = self.repository.create_book(data.title)
        logger.info("Added book %s (%s)", book.id, book.title)
        return book

    def list_books(self) -> List[BookRead]:
        return self.repository.list_books()

    def get_book(self, book_id: int) -> BookDetail:
        book = self.repository.find_book(book_id)
        if book is None:
            raise LibraryError.not_found("Book not found")
        return BookDetail(id=book.id, title=book.title, score=self.borrows.book_score(book.id))
