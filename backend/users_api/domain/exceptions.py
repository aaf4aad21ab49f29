"""Domain-specific exceptions — framework-independent."""


class UsersApiError(Exception):
    """Base class for every error the core surfaces to its callers."""


class ValidationError(UsersApiError):
    """Raised when untrusted input breaks a domain rule.

    Always client-caused. The message names the rule that failed and is safe
    to return verbatim.
    """

    def __init__(self, message: str):
        self.message = message
        super().__init__(message)


class ResourceNotFoundError(UsersApiError):
    """Raised when no stored row matches the requested id."""

    def __init__(self, entity_type: str = "Resource", entity_id: object | None = None):
        self.entity_type = entity_type
        self.entity_id = entity_id
        super().__init__("Resource not found")


class StorageError(UsersApiError):
    """Opaque wrapper around a storage backend failure.

    The cause is kept for logging only and is never shown to clients.
    """

    def __init__(self, cause: BaseException | str):
        self.cause = cause
        super().__init__(str(cause))
