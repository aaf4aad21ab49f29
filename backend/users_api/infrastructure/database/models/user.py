"""SQLAlchemy ORM model for the User entity."""

from datetime import datetime
from uuid import UUID

from sqlalchemy import DateTime, String, Uuid
from sqlalchemy.orm import Mapped, mapped_column

from users_api.domain.value_objects import MAX_EMAIL_ADDRESS_LENGTH, MAX_USER_NAME_LENGTH
from users_api.infrastructure.database.base import Base


class UserModel(Base):
    """ORM model — maps to the 'users' table."""

    __tablename__ = "users"

    id: Mapped[UUID] = mapped_column(Uuid, primary_key=True)
    # Grapheme limits can exceed code-point counts, so leave headroom.
    name: Mapped[str] = mapped_column(String(MAX_USER_NAME_LENGTH * 4), nullable=False)
    email_address: Mapped[str] = mapped_column(
        String(MAX_EMAIL_ADDRESS_LENGTH * 4), nullable=False
    )
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
    updated_at: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True), nullable=True
    )

    def __repr__(self) -> str:
        return f"<UserModel(id={self.id}, name='{self.name}')>"
