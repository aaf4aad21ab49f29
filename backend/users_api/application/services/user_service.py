"""Application service (use case) for User operations."""

from collections.abc import Sequence

from users_api.application.interfaces import UserRepository
from users_api.domain.entities import User, UserUpdate
from users_api.domain.value_objects import UserId


class UserService:
    """Forwards user operations to the repository port (DI).

    Results and errors pass through untouched; this class is the seam where
    a different repository can be plugged in without touching the endpoints.
    """

    def __init__(self, repository: UserRepository):
        self._repository = repository

    async def create(self, user: User) -> User:
        return await self._repository.create(user)

    async def get_by_id(self, user_id: UserId) -> User:
        return await self._repository.get_by_id(user_id)

    async def update(self, user_id: UserId, updates: Sequence[UserUpdate]) -> User:
        return await self._repository.update(user_id, updates)

    async def delete(self, user_id: UserId) -> None:
        await self._repository.delete(user_id)
