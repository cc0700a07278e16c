"""
Business logic for borrowing and returning books.

``BorrowService`` enforces the borrow lifecycle: a borrow is created
open, and the only transition is OPEN -> RETURNED when the borrowing
user returns the book with a score.  A book may have at most one open
borrow at any time.

The same module hosts the score aggregation and borrow history used
by the user and book views.

Score aggregation policy
------------------------
The average score of a book is the mean of ``user_score or 0`` over
*every* borrow of the book, open borrows included, and ``None`` when
the book was never borrowed.  A book with borrows ``[None, 0]`` thus
scores ``0``.  A stricter variant that averages only truthy scores and
returns ``-1`` for an empty set has been used historically; it is not
implemented here.
"""

import logging
import sqlite3
from datetime import datetime, timezone
from typing import Callable, Iterable, Optional

from ..core.errors import ErrorKind, LibraryError
from ..core.repository import LibraryRepository
from ..schemas.borrow import MAX_SCORE, MIN_SCORE, BorrowRead
from ..schemas.user import BorrowHistory, PastBorrow, PresentBorrow

logger = logging.getLogger(__name__)

ALREADY_BORROWED = "Book is already borrowed by another user"
NO_OPEN_BORROW = "No record of this book being borrowed by this user"
INVALID_SCORE = f"Score must be an integer between {MIN_SCORE} and {MAX_SCORE}"


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def compute_book_score(borrows: Iterable[BorrowRead]) -> Optional[float]:
    """Average ``user_score`` over all borrows, counting unset scores as 0.

    Returns ``None`` when ``borrows`` is empty.
    """
    scores = [b.user_score or 0 for b in borrows]
    if not scores:
        return None
    return sum(scores) / len(scores)


def validate_score(score: object) -> int:
    # bool is an int subclass; True must not pass as a score of 1.
    if isinstance(score, bool) or not isinstance(score, int):
        raise LibraryError.validation(INVALID_SCORE)
    if not MIN_SCORE <= score <= MAX_SCORE:
        raise LibraryError.validation(INVALID_SCORE)
    return score


class BorrowService:
    """Borrow lifecycle operations on top of a ``LibraryRepository``."""

    def __init__(
        self,
        repository: LibraryRepository,
        clock: Callable[[], datetime] = utcnow,
    ) -> None:
        self.repository = repository
        self.clock = clock

    def borrow_book(self, user_id: int, book_id: int) -> BorrowRead:
        """Open a borrow of ``book_id`` for ``user_id``.

        Raises a ``NOT_FOUND`` error if the user or the book does not
        exist and a ``CONFLICT`` error if the book is currently out,
        whoever holds it.  The conflict is also raised when a
        concurrent request opened a borrow between the check and the
        insert, which the unique index on open borrows detects.
        """
        if self.repository.find_user(user_id) is None:
            raise LibraryError.not_found("User not found")
        if self.repository.find_book(book_id) is None:
            raise LibraryError.not_found("Book not found")
        if self.repository.find_open_borrow_for_book(book_id) is not None:
            raise LibraryError.conflict(ALREADY_BORROWED)
        try:
            borrow = self.repository.create_borrow(user_id, book_id, self.clock())
        except sqlite3.IntegrityError as e:
            logger.warning("Concurrent borrow of book %s rejected: %s", book_id, e)
            raise LibraryError.conflict(ALREADY_BORROWED) from e
        logger.info("User %s borrowed book %s (borrow %s)", user_id, book_id, borrow.id)
        return borrow

    def return_book(self, user_id: int, book_id: int, score: int) -> BorrowRead:
        """Close the user's open borrow of ``book_id`` with ``score``.

        The score is checked here even though the HTTP layer already
        validates it, so non‑HTTP callers get the same guarantee.
        """
        score = validate_score(score)
        borrow = self.repository.find_open_borrow_for_user_and_book(user_id, book_id)
        if borrow is None:
            raise LibraryError.conflict(NO_OPEN_BORROW)
        try:
            returned = self.repository.update_borrow_on_return(borrow.id, self.clock(), score)
        except LibraryError as e:
            # Closed by a concurrent return after our lookup.
            if e.kind is not ErrorKind.CONFLICT:
                raise
            raise LibraryError.conflict(NO_OPEN_BORROW) from e
        logger.info(
            "User %s returned book %s with score %s (borrow %s)",
            user_id, book_id, score, returned.id,
        )
        return returned

    def book_score(self, book_id: int) -> Optional[float]:
        return compute_book_score(self.repository.list_borrows_for_book(book_id))

    def user_history(self, user_id: int) -> BorrowHistory:
        """Split the user's borrows into returned (past) and open (present)."""
        history = BorrowHistory()
        for borrow in self.repository.list_borrows_for_user(user_id, include_book_title=True):
            if borrow.returned_at is not None:
                history.past.append(PastBorrow(name=borrow.book_title, user_score=borrow.user_score))
            else:
                history.present.append(PresentBorrow(name=borrow.book_title))
        return history
