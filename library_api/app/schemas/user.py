"""
Pydantic models for user data.

Users carry only a display name.  They are created once and never
modified or deleted through the API.
"""

from typing import List, Optional

from pydantic import BaseModel, Field, field_validator


class UserCreate(BaseModel):
    """Schema for registering a user."""

    name: str = Field(..., min_length=1, max_length=255, examples=["Enes Faruk Meniz"])

    @field_validator("name")
    @classmethod
    def strip_name(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("Name must not be blank")
        return v


class UserRead(BaseModel):
    """Schema for reading a user from the API."""

    id: int
    name: str

    model_config = {
        "from_attributes": True,
    }


class PastBorrow(BaseModel):
    """A returned book in a user's history."""

    name: str = Field(..., description="Title of the returned book")
    user_score: Optional[int] = Field(None, description="Score given on return")


class PresentBorrow(BaseModel):
    """A book the user currently holds."""

    name: str = Field(..., description="Title of the borrowed book")


class BorrowHistory(BaseModel):
    past: List[PastBorrow] = Field(default_factory=list)
    present: List[PresentBorrow] = Field(default_factory=list)


class UserDetail(UserRead):
    """A user together with their past and present borrows."""

    books: BorrowHistory
