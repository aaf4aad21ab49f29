"""Validated value objects: the only way to turn untrusted strings into domain values."""

import logging
from dataclasses import dataclass, field
from uuid import UUID

import regex
from uuid6 import uuid7

from users_api.domain.exceptions import ValidationError

logger = logging.getLogger(__name__)

MAX_USER_NAME_LENGTH = 100
MAX_EMAIL_ADDRESS_LENGTH = 100
FORBIDDEN_EMAIL_CHARACTERS = ("/", "(", ")", '"', "<", ">", "\\", "{", "}")

_GRAPHEME = regex.compile(r"\X")
_EDGE_WHITESPACE = regex.compile(r"^\p{White_Space}+|\p{White_Space}+\Z")


def grapheme_length(value: str) -> int:
    """Count user-perceived characters (extended grapheme clusters)."""
    return len(_GRAPHEME.findall(value))


def trim(value: str) -> str:
    """Strip leading and trailing Unicode White_Space, nothing else."""
    return _EDGE_WHITESPACE.sub("", value)


def _reject(message: str) -> ValidationError:
    logger.debug(message)
    return ValidationError(message)


@dataclass(frozen=True, order=True)
class UserId:
    """Opaque user identifier wrapping a time-ordered (v7) UUID."""

    value: UUID = field(default_factory=uuid7)

    def __post_init__(self) -> None:
        if not isinstance(self.value, UUID):
            raise _reject("User id must be a UUID")

    @classmethod
    def parse(cls, text: str) -> "UserId":
        try:
            return cls(UUID(text))
        except (TypeError, ValueError, AttributeError):
            raise _reject(f"'{text}' is not a valid user id") from None

    def __str__(self) -> str:
        return str(self.value)


@dataclass(frozen=True, order=True)
class UserName:
    """Display name: trimmed, 1..=100 graphemes."""

    value: str

    def __post_init__(self) -> None:
        if not isinstance(self.value, str):
            raise _reject("User name must be a string")

        trimmed = trim(self.value)
        if not trimmed:
            raise _reject("User name cannot be empty")
        if grapheme_length(trimmed) > MAX_USER_NAME_LENGTH:
            raise _reject(
                f"User name is too long. Maximum valid length is {MAX_USER_NAME_LENGTH}"
            )
        object.__setattr__(self, "value", trimmed)

    @classmethod
    def default(cls) -> "UserName":
        return cls("John Doe")

    def __str__(self) -> str:
        return self.value


@dataclass(frozen=True, order=True)
class EmailAddress:
    """Email-like value.

    Rules are checked in a fixed order so the reported message is
    deterministic: missing ``@``, empty, too long, forbidden character.
    Anything passing those checks is accepted, even if it is not a
    deliverable address.
    """

    value: str

    def __post_init__(self) -> None:
        if not isinstance(self.value, str):
            raise _reject("Email address must be a string")

        trimmed = trim(self.value)
        if "@" not in trimmed:
            raise _reject("Email address must have the @ symbol")
        if not trimmed:
            raise _reject("Email address cannot be empty")
        if grapheme_length(trimmed) > MAX_EMAIL_ADDRESS_LENGTH:
            raise _reject(
                f"Email address is too long. Maximum valid length is {MAX_EMAIL_ADDRESS_LENGTH}"
            )
        if any(char in trimmed for char in FORBIDDEN_EMAIL_CHARACTERS):
            raise _reject(
                "Email address is not valid. It should not contain any of the "
                f"following characters: {', '.join(FORBIDDEN_EMAIL_CHARACTERS)}"
            )
        object.__setattr__(self, "value", trimmed)

    @classmethod
    def default(cls) -> "EmailAddress":
        return cls("me@mail.com")

    def _zeroize(self) -> None:
        """Drop the held string. Only Secret.wipe calls this, on its private copy."""
        object.__setattr__(self, "value", "")

    def __str__(self) -> str:
        return self.value
