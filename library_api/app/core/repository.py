"""
Data access layer for users, books and borrows.

``LibraryRepository`` is the only component that issues SQL.  It is
constructed once by the application entry point with the path of the
SQLite database and handed to the services, so tests can point it at
a throwaway file.

Each method opens its own connection and commits before returning,
which keeps every write a single atomic statement.  Low level
``sqlite3`` failures are reported as ``STORAGE_UNAVAILABLE`` errors.
Integrity violations are re‑raised untouched so callers can decide
what a broken constraint means for them.
"""

import logging
import sqlite3
from contextlib import contextmanager
from datetime import datetime
from typing import Iterator, List, Optional

from .db import get_connection, init_db
from .errors import LibraryError
from ..schemas.book import BookRead
from ..schemas.borrow import BorrowRead, BorrowWithBook
from ..schemas.user import UserRead

logger = logging.getLogger(__name__)

BORROW_COLUMNS = "id, user_id, book_id, borrowed_at, returned_at, user_score"


def _borrow_from_row(row: sqlite3.Row) -> BorrowRead:
    return BorrowRead(
        id=row["id"],
        user_id=row["user_id"],
        book_id=row["book_id"],
        borrowed_at=row["borrowed_at"],
        returned_at=row["returned_at"],
        user_score=row["user_score"],
    )


class LibraryRepository:
    """SQLite backed store for the library records."""

    def __init__(self, db_path: str) -> None:
        self.db_path = db_path

    def __repr__(self) -> str:
        return f"LibraryRepository({self.db_path!r})"

    @contextmanager
    def _cursor(self) -> Iterator[sqlite3.Cursor]:
        conn = None
        try:
            conn = get_connection(self.db_path)
            yield conn.cursor()
            conn.commit()
        except sqlite3.IntegrityError:
            if conn is not None:
                conn.rollback()
            raise
        except sqlite3.Error as e:
            if conn is not None:
                conn.rollback()
            logger.error("Database error on %s: %s", self.db_path, e)
            raise LibraryError.storage_unavailable(f"Storage unavailable: {e}") from e
        finally:
            if conn is not None:
                conn.close()

    def init_schema(self) -> int:
        """Apply pending migrations and return the schema version."""
        try:
            version = init_db(self.db_path)
        except sqlite3.Error as e:
            raise LibraryError.storage_unavailable(f"Storage unavailable: {e}") from e
        logger.info("Database %s at schema version %s", self.db_path, version)
        return version

    # -- users ---------------------------------------------------------

    def create_user(self, name: str) -> UserRead:
        with self._cursor() as cursor:
            cursor.execute("INSERT INTO users (name) VALUES (?)", (name,))
            return UserRead(id=cursor.lastrowid, name=name)

    def find_user(self, user_id: int) -> Optional[UserRead]:
        with self._cursor() as cursor:
            row = cursor.execute(
                "SELECT id, name FROM users WHERE id = ?", (user_id,)
            ).fetchone()
        if not row:
            return None
        return UserRead(id=row["id"], name=row["name"])

    def list_users(self) -> List[UserRead]:
        with self._cursor() as cursor:
            rows = cursor.execute("SELECT id, name FROM users ORDER BY id").fetchall()
        return [UserRead(id=row["id"], name=row["name"]) for row in rows]

    # -- books ---------------------------------------------------------

    def create_book(self, title: str) -> BookRead:
        with self._cursor() as cursor:
            cursor.execute("INSERT INTO books (title) VALUES (?)", (title,))
            return BookRead(id=cursor.lastrowid, title=title)

    def find_book(self, book_id: int) -> Optional[BookRead]:
        with self._cursor() as cursor:
            row = cursor.execute(
                "SELECT id, title FROM books WHERE id = ?", (book_id,)
            ).fetchone()
        if not row:
            return None
        return BookRead(id=row["id"], title=row["title"])

    def list_books(self) -> List[BookRead]:
        with self._cursor() as cursor:
            rows = cursor.execute("SELECT id, title FROM books ORDER BY id").fetchall()
        return [BookRead(id=row["id"], title=row["title"]) for row in rows]

    # -- borrows -------------------------------------------------------

    def find_open_borrow_for_book(self, book_id: int) -> Optional[BorrowRead]:
        with self._cursor() as cursor:
            row = cursor.execute(
                f"SELECT {BORROW_COLUMNS} FROM borrows "
                "WHERE book_id = ? AND returned_at IS NULL",
                (book_id,),
            ).fetchone()
        return _borrow_from_row(row) if row else None

    def find_open_borrow_for_user_and_book(
        self, user_id: int, book_id: int
    ) -> Optional[BorrowRead]:
        with self._cursor() as cursor:
            row = cursor.execute(
                f"SELECT {BORROW_COLUMNS} FROM borrows "
                "WHERE user_id = ? AND book_id = ? AND returned_at IS NULL",
                (user_id, book_id),
            ).fetchone()
        return _borrow_from_row(row) if row else None

    def create_borrow(self, user_id: int, book_id: int, borrowed_at: datetime) -> BorrowRead:
        """Insert an open borrow.

        Raises ``sqlite3.IntegrityError`` when the book already has an
        open borrow or either foreign key does not resolve.
        """
        with self._cursor() as cursor:
            cursor.execute(
                "INSERT INTO borrows (user_id, book_id, borrowed_at) VALUES (?, ?, ?)",
                (user_id, book_id, borrowed_at.isoformat()),
            )
            row = cursor.execute(
                f"SELECT {BORROW_COLUMNS} FROM borrows WHERE id = ?",
                (cursor.lastrowid,),
            ).fetchone()
        return _borrow_from_row(row)

    def update_borrow_on_return(
        self, borrow_id: int, returned_at: datetime, score: int
    ) -> BorrowRead:
        """Close an open borrow and record the score.

        The ``returned_at IS NULL`` guard makes the update a no‑op on a
        borrow that was closed in the meantime; that case is reported as
        a conflict.
        """
        with self._cursor() as cursor:
            cursor.execute(
                "UPDATE borrows SET returned_at = ?, user_score = ? "
                "WHERE id = ? AND returned_at IS NULL",
                (returned_at.isoformat(), score, borrow_id),
            )
            if cursor.rowcount == 0:
                raise LibraryError.conflict(f"Borrow {borrow_id} is not open")
            row = cursor.execute(
                f"SELECT {BORROW_COLUMNS} FROM borrows WHERE id = ?", (borrow_id,)
            ).fetchone()
        return _borrow_from_row(row)

    def list_borrows_for_book(self, book_id: int) -> List[BorrowRead]:
        with self._cursor() as cursor:
            rows = cursor.execute(
                f"SELECT {BORROW_COLUMNS} FROM borrows WHERE book_id = ? ORDER BY id",
                (book_id,),
            ).fetchall()
        return [_borrow_from_row(row) for row in rows]

    def list_borrows_for_user(
        self, user_id: int, include_book_title: bool = False
    ) -> List[BorrowRead]:
        """Return the user's borrows in insertion order.

        With ``include_book_title`` the items are ``BorrowWithBook``
        instances carrying the title of the borrowed book.
        """
        with self._cursor() as cursor:
            if not include_book_title:
                rows = cursor.execute(
                    f"SELECT {BORROW_COLUMNS} FROM borrows WHERE user_id = ? ORDER BY id",
                    (user_id,),
                ).fetchall()
                return [_borrow_from_row(row) for row in rows]
            rows = cursor.execute(
                "SELECT b.id, b.user_id, b.book_id, b.borrowed_at, b.returned_at, "
                "b.user_score, k.title AS book_title "
                "FROM borrows b JOIN books k ON k.id = b.book_id "
                "WHERE b.user_id = ? ORDER BY b.id",
                (user_id,),
            ).fetchall()
        return [
            BorrowWithBook(**_borrow_from_row(row).model_dump(), book_title=row["book_title"])
            for row in rows
        ]
