"""
Business logic for users.

Users are created once and never changed.  The detail view combines a
user with their borrow history as computed by ``BorrowService``.
"""

import logging
from typing import List

from ..core.errors import LibraryError
from ..core.repository import LibraryRepository
from ..schemas.user import UserCreate, UserDetail, UserRead
from .borrow_service import BorrowService

logger = logging.getLogger(__name__)


class UserService:
    """Service for registering and looking up users."""

    def __init__(self, repository: LibraryRepository, borrows: BorrowService) -> None:
        self.repository = repository
        self.borrows = borrows

    def create_user(self, data: UserCreate) -> UserRead:
        user = self.repository.create_user(data.name)
        logger.info("Registered user %s (%s)", user.id, user.name)
        return user

    def list_users(self) -> List[UserRead]:
        return self.repository.list_users()

    def get_user(self, user_id: int) -> UserDetail:
        """Return the user with past and present borrows.

        Raises a ``NOT_FOUND`` error for an unknown ``user_id``.
        """
        user = self.repository.find_user(user_id)
        if user is None:
            raise LibraryError.not_found("User not found")
        return UserDetail(id=user.id, name=user.name, books=self.borrows.user_history(user.id))
