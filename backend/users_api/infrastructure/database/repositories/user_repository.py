"""Concrete repository implementation for User backed by SQLAlchemy."""

import logging
from collections.abc import Sequence
from datetime import datetime, timezone
from typing import Any

from sqlalchemy import delete, insert, select, update
from sqlalchemy.engine import Row
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from users_api.application.interfaces import UserRepository
from users_api.domain.entities import User, UserRaw, UserUpdate, fold_updates
from users_api.domain.exceptions import ResourceNotFoundError, StorageError
from users_api.domain.secret import Secret
from users_api.domain.value_objects import UserId
from users_api.infrastructure.database.models import UserModel

logger = logging.getLogger(__name__)

_COLUMNS = (
    UserModel.id,
    UserModel.name,
    UserModel.email_address,
    UserModel.created_at,
    UserModel.updated_at,
)


def _as_utc(value: datetime | None) -> datetime | None:
    """SQLite hands back naive datetimes; everything stored is UTC."""
    if value is None or value.tzinfo is not None:
        return value
    return value.replace(tzinfo=timezone.utc)


def _bind_value(value: Any) -> str:
    """Unwrap a validated update value into the plain column value."""
    if isinstance(value, Secret):
        value = value.expose()
    return value.value


class SQLAlchemyUserRepository(UserRepository):
    """Implements the UserRepository port using SQLAlchemy async sessions.

    Each operation issues exactly one statement. Driver errors are wrapped
    in StorageError; nothing above this class inspects them.
    """

    def __init__(self, session: AsyncSession):
        self._session = session

    def _to_raw(self, row: Row) -> UserRaw:
        """Map a result row → unchecked storage shape."""
        return UserRaw(
            id=row.id,
            name=row.name,
            email_address=row.email_address,
            created_at=_as_utc(row.created_at),
            updated_at=_as_utc(row.updated_at),
        )

    async def create(self, user: User) -> User:
        raw = user.to_raw()
        stmt = insert(UserModel).values(
            id=raw.id,
            name=raw.name,
            email_address=raw.email_address,
            created_at=raw.created_at,
        )
        try:
            await self._session.execute(stmt)
        except SQLAlchemyError as exc:
            raise StorageError(exc) from exc
        logger.debug("Created user %s", user.id)
        return user

    async def get_by_id(self, user_id: UserId) -> User:
        stmt = select(*_COLUMNS).where(UserModel.id == user_id.value)
        try:
            result = await self._session.execute(stmt)
            row = result.one_or_none()
        except SQLAlchemyError as exc:
            raise StorageError(exc) from exc

        if row is None:
            raise ResourceNotFoundError("User", user_id)
        return User.from_raw(self._to_raw(row))

    async def update(self, user_id: UserId, updates: Sequence[UserUpdate]) -> User:
        changes = fold_updates(updates)
        assignments = {name: _bind_value(value) for name, value in changes.items()}

        stmt = (
            update(UserModel)
            .where(UserModel.id == user_id.value)
            .values(updated_at=datetime.now(timezone.utc), **assignments)
            .returning(*_COLUMNS)
            .execution_options(synchronize_session=False)
        )
        try:
            result = await self._session.execute(stmt)
            row = result.one_or_none()
        except SQLAlchemyError as exc:
            raise StorageError(exc) from exc

        if row is None:
            raise ResourceNotFoundError("User", user_id)
        logger.debug("Updated user %s (%s)", user_id, ", ".join(assignments))
        return User.from_raw(self._to_raw(row))

    async def delete(self, user_id: UserId) -> None:
        stmt = (
            delete(UserModel)
            .where(UserModel.id == user_id.value)
            .execution_options(synchronize_session=False)
        )
        try:
            result = await self._session.execute(stmt)
        except SQLAlchemyError as exc:
            raise StorageError(exc) from exc
        logger.debug("Deleted user %s (rows=%d)", user_id, result.rowcount)
