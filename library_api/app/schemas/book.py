"""
Pydantic models for books.

The book list returns ``BookRead`` items (``id`` and ``title``); the
single book view adds the average ``score`` computed from borrows.
"""

from typing import Optional

from pydantic import BaseModel, Field, field_validator


class BookCreate(BaseModel):
    """Schema for adding a book to the catalogue."""

    title: str = Field(..., min_length=1, max_length=255, examples=["Brave New World"])

    @field_validator("title")
    @classmethod
    def strip_title(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("Title must not be blank")
        return v


class BookRead(BaseModel):
    id: int
    title: str

    model_config = {
        "from_attributes": True,
    }


class BookDetail(BookRead):
    """A book with its average score, ``None`` when never borrowed."""

    score: Optional[float] = Field(None, description="Average user score")
