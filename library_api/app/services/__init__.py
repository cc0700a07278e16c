"""
Service layer.

Each service encapsulates business logic for a domain and receives
the ``LibraryRepository`` it works on from the caller, so API handlers
never touch the database directly.
"""

from .book_service import BookService
from .borrow_service import BorrowService, compute_book_score
from .user_service import UserService

__all__ = ["BookService", "BorrowService", "UserService", "compute_book_score"]
