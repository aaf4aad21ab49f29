from .user import (
    EmailAddressUpdate,
    NameUpdate,
    UserCreate,
    UserResponse,
    UserUpdatePayload,
)

__all__ = [
    "EmailAddressUpdate",
    "NameUpdate",
    "UserCreate",
    "UserResponse",
    "UserUpdatePayload",
]
