"""
User endpoints for API v1.

Create and list users, and show a single user together with the books
they returned (with their score) and the books they currently hold.
"""

from typing import List

from fastapi import APIRouter, Depends, Path, status

from library_api.app.api.deps import MAX_ID, get_user_service
from library_api.app.schemas.user import UserCreate, UserDetail, UserRead
from library_api.app.services.user_service import UserService

router = APIRouter()


@router.get("/", response_model=List[UserRead], summary="List users")
def list_users(service: UserService = Depends(get_user_service)) -> List[UserRead]:
    return service.list_users()


@router.get(
    "/{user_id}",
    response_model=UserDetail,
    summary="Get a user with borrowed books",
    responses={404: {"description": "User not found"}},
)
def get_user(
    user_id: int = Path(..., ge=1, le=MAX_ID, description="Numeric ID of the user"),
    service: UserService = Depends(get_user_service),
) -> UserDetail:
    """Return a user along with their past and present borrowed books."""
    return service.get_user(user_id)


@router.post(
    "/",
    response_model=UserRead,
    status_code=status.HTTP_201_CREATED,
    summary="Create a user",
    responses={400: {"description": "Invalid input"}},
)
def create_user(
    data: UserCreate,
    service: UserService = Depends(get_user_service),
) -> UserRead:
    return service.create_user(data)
