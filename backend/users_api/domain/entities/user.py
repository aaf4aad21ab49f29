"""User entity, its storage-shaped counterpart and the field-update protocol."""

from collections.abc import Sequence
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import ClassVar
from uuid import UUID

from users_api.domain.exceptions import ValidationError
from users_api.domain.secret import Secret
from users_api.domain.value_objects import EmailAddress, UserId, UserName


@dataclass(frozen=True)
class SetName:
    """Replace the user's name."""

    value: UserName
    target: ClassVar[str] = "name"


@dataclass(frozen=True)
class SetEmailAddress:
    """Replace the user's email address."""

    value: Secret[EmailAddress]
    target: ClassVar[str] = "email_address"


UserUpdate = SetName | SetEmailAddress


def fold_updates(
    updates: Sequence[UserUpdate],
) -> dict[str, UserName | Secret[EmailAddress]]:
    """Collapse an ordered list of updates into field → value, last write wins.

    Raises ValidationError for an empty list: a no-op update is an error.
    """
    if not updates:
        raise ValidationError("List of updates was empty")

    changes: dict[str, UserName | Secret[EmailAddress]] = {}
    for update in updates:
        if not isinstance(update, (SetName, SetEmailAddress)):
            raise ValidationError(f"Unsupported update operation: {type(update).__name__}")
        changes[update.target] = update.value
    return changes


@dataclass
class UserRaw:
    """Unchecked row shape as read from storage. Never leaves the repository."""

    id: UUID
    name: str
    email_address: str = field(repr=False)
    created_at: datetime
    updated_at: datetime | None = None


@dataclass
class User:
    """Core domain entity.

    ``id`` and ``created_at`` are fixed at creation. ``updated_at`` stays
    ``None`` until the first successful update.
    """

    name: UserName
    email_address: Secret[EmailAddress]
    id: UserId = field(default_factory=UserId)
    created_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    updated_at: datetime | None = None

    @classmethod
    def new(
        cls,
        name: UserName | None = None,
        email_address: Secret[EmailAddress] | None = None,
    ) -> "User":
        """Create a fresh user, falling back to the default name and address."""
        return cls(
            name=name if name is not None else UserName.default(),
            email_address=(
                email_address if email_address is not None else Secret(EmailAddress.default())
            ),
        )

    @classmethod
    def from_raw(cls, raw: UserRaw) -> "User":
        """Re-validate a stored row. Storage is never trusted to hold valid data."""
        return cls(
            id=UserId(raw.id),
            name=UserName(raw.name),
            email_address=Secret(EmailAddress(raw.email_address)),
            created_at=raw.created_at,
            updated_at=raw.updated_at,
        )

    def to_raw(self) -> UserRaw:
        """Flatten to the storage shape. Exposes the email deliberately."""
        return UserRaw(
            id=self.id.value,
            name=self.name.value,
            email_address=self.email_address.expose().value,
            created_at=self.created_at,
            updated_at=self.updated_at,
        )

    def apply_updates(
        self, updates: Sequence[UserUpdate], at: datetime | None = None
    ) -> None:
        """Apply updates in order and refresh ``updated_at``."""
        for field_name, value in fold_updates(updates).items():
            if isinstance(value, Secret):
                value = value.clone()
            setattr(self, field_name, value)
        self.updated_at = at or datetime.now(timezone.utc)
