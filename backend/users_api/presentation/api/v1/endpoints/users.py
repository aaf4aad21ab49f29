"""User CRUD endpoints."""

import logging
from http import HTTPStatus
from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException, status

from users_api.application.schemas import UserCreate, UserResponse, UserUpdatePayload
from users_api.application.services import UserService
from users_api.domain.exceptions import (
    ResourceNotFoundError,
    StorageError,
    UsersApiError,
    ValidationError,
)
from users_api.domain.value_objects import UserId
from users_api.infrastructure.dependencies import get_user_service

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/users", tags=["Users"])


def _to_http_error(exc: UsersApiError) -> HTTPException:
    """Map a domain error onto the HTTP status and the message clients may see."""
    if isinstance(exc, ValidationError):
        return HTTPException(status_code=HTTPStatus.UNPROCESSABLE_ENTITY, detail=exc.message)
    if isinstance(exc, ResourceNotFoundError):
        return HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(exc))
    if isinstance(exc, StorageError):
        logger.error("Storage failure: %s", exc.cause)
    else:
        logger.error("Unclassified error: %s", exc)
    return HTTPException(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail="Internal server error"
    )


@router.post("", response_model=UserResponse, status_code=status.HTTP_201_CREATED)
async def create_user(
    data: UserCreate,
    service: UserService = Depends(get_user_service),
) -> UserResponse:
    """Create a new user."""
    try:
        user = await service.create(data.to_entity())
    except UsersApiError as e:
        raise _to_http_error(e) from e
    return UserResponse.from_entity(user)


@router.get("/{user_id}", response_model=UserResponse)
async def get_user(
    user_id: UUID,
    service: UserService = Depends(get_user_service),
) -> UserResponse:
    """Retrieve a single user by ID."""
    try:
        user = await service.get_by_id(UserId(user_id))
    except UsersApiError as e:
        raise _to_http_error(e) from e
    return UserResponse.from_entity(user)


@router.patch("/{user_id}", response_model=UserResponse)
async def update_user(
    user_id: UUID,
    data: UserUpdatePayload,
    service: UserService = Depends(get_user_service),
) -> UserResponse:
    """Apply an ordered list of field updates to a user."""
    try:
        user = await service.update(UserId(user_id), data.to_updates())
    except UsersApiError as e:
        raise _to_http_error(e) from e
    return UserResponse.from_entity(user)


@router.delete("/{user_id}", status_code=status.HTTP_200_OK)
async def delete_user(
    user_id: UUID,
    service: UserService = Depends(get_user_service),
) -> None:
    """Delete a user by ID. Deleting an unknown ID also succeeds."""
    try:
        await service.delete(UserId(user_id))
    except UsersApiError as e:
        raise _to_http_error(e) from e
