"""Abstract repository interface (port) for User persistence."""

from abc import ABC, abstractmethod
from collections.abc import Sequence

from users_api.domain.entities import User, UserUpdate
from users_api.domain.value_objects import UserId


class UserRepository(ABC):
    """Port for user persistence — implemented in the infrastructure layer.

    Every method is a single storage statement. Implementations raise the
    domain exceptions only: ValidationError, ResourceNotFoundError and
    StorageError for anything else the backend reports.
    """

    @abstractmethod
    async def create(self, user: User) -> User:
        """Persist a new user and return it unchanged."""
        ...

    @abstractmethod
    async def get_by_id(self, user_id: UserId) -> User:
        """Retrieve a user. Raises ResourceNotFoundError when absent."""
        ...

    @abstractmethod
    async def update(self, user_id: UserId, updates: Sequence[UserUpdate]) -> User:
        """Apply ordered field updates atomically and return the stored result.

        Raises ValidationError for an empty list and ResourceNotFoundError
        when no user has the given id.
        """
        ...

    @abstractmethod
    async def delete(self, user_id: UserId) -> None:
        """Delete a user. Deleting an absent id is not an error."""
        ...
