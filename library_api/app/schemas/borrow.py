"""
Pydantic models for borrow records.

A borrow is open while ``returned_at`` is ``None``.  Returning a book
sets ``returned_at`` and ``user_score`` exactly once.
"""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field, StrictInt

MIN_SCORE = 1
MAX_SCORE = 5


class ReturnRequest(BaseModel):
    """Body of a return call."""

    # StrictInt rejects "5", 4.0 and booleans instead of coercing them.
    score: StrictInt = Field(
        ..., ge=MIN_SCORE, le=MAX_SCORE, description="Rating from 1 to 5", examples=[5]
    )


class BorrowRead(BaseModel):
    id: int
    user_id: int
    book_id: int
    borrowed_at: datetime
    returned_at: Optional[datetime] = None
    user_score: Optional[int] = None

    model_config = {
        "from_attributes": True,
    }

    @property
    def is_open(self) -> bool:
        return self.returned_at is None


class BorrowWithBook(BorrowRead):
    """Borrow record joined with the title of its book."""

    book_title: str
