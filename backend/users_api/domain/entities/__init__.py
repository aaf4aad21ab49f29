from .user import (
    SetEmailAddress,
    SetName,
    User,
    UserRaw,
    UserUpdate,
    fold_updates,
)

__all__ = [
    "SetEmailAddress",
    "SetName",
    "User",
    "UserRaw",
    "UserUpdate",
    "fold_updates",
]
