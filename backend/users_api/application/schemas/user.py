"""Pydantic DTOs (Data Transfer Objects) for the User feature.

Request bodies carry plain strings; domain validation happens when they are
converted with ``to_entity()`` / ``to_updates()``, so the rule messages come
from the value objects themselves.
"""

from datetime import datetime
from typing import Annotated, Literal
from uuid import UUID

from pydantic import AliasChoices, BaseModel, Field, SecretStr

from users_api.domain.entities import SetEmailAddress, SetName, User, UserUpdate
from users_api.domain.secret import Secret
from users_api.domain.value_objects import EmailAddress, UserName


class UserCreate(BaseModel):
    """Schema for creating a new user."""

    name: str = Field(..., examples=["Jon Jonsson"])
    email_address: SecretStr = Field(
        ...,
        validation_alias=AliasChoices("email_address", "email"),
        examples=["some@email.com"],
    )

    def to_entity(self) -> User:
        return User.new(
            name=UserName(self.name),
            email_address=Secret(EmailAddress(self.email_address.get_secret_value())),
        )


class NameUpdate(BaseModel):
    type: Literal["Name"]
    value: str

    def to_update(self) -> SetName:
        return SetName(UserName(self.value))


class EmailAddressUpdate(BaseModel):
    type: Literal["EmailAddress"]
    value: SecretStr

    def to_update(self) -> SetEmailAddress:
        return SetEmailAddress(Secret(EmailAddress(self.value.get_secret_value())))


class UserUpdatePayload(BaseModel):
    """Schema for a partial update: an ordered list of field operations."""

    updates: list[Annotated[NameUpdate | EmailAddressUpdate, Field(discriminator="type")]] = Field(
        ..., examples=[[{"type": "Name", "value": "Totally new name"}]],
    )

    def to_updates(self) -> list[UserUpdate]:
        return [item.to_update() for item in self.updates]


class UserResponse(BaseModel):
    """Schema returned to the client. The only place the email is exposed."""

    id: UUID
    name: str
    email_address: str
    created_at: datetime
    updated_at: datetime | None

    @classmethod
    def from_entity(cls, user: User) -> "UserResponse":
        return cls(
            id=user.id.value,
            name=user.name.value,
            email_address=user.email_address.expose().value,
            created_at=user.created_at,
            updated_at=user.updated_at,
        )
