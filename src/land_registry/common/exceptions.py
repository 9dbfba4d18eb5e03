"""Land registry exception hierarchy.

Every error carries the HTTP status it maps to; the app-level handler turns
them into ``{"message": ...}`` responses.
"""


class RegistryError(Exception):
    """Base exception for all registry errors."""

    status_code = 500

    def __init__(self, message: str = "", code: str = "REGISTRY_ERROR"):
        self.message = message
        self.code = code
        super().__init__(message)


class UnauthorizedError(RegistryError):
    """Raised when the caller has no valid session."""

    status_code = 401

    def __init__(self, message: str = "Unauthorized"):
        super().__init__(message, code="UNAUTHORIZED")


class ForbiddenError(RegistryError):
    """Raised when the caller's role or ownership does not permit the operation."""

    status_code = 403

    def __init__(self, message: str = "Forbidden"):
        super().__init__(message, code="FORBIDDEN")


class ValidationError(RegistryError):
    """Raised for malformed input or a price that does not match the listing."""

    status_code = 400

    def __init__(self, message: str = "Validation error"):
        super().__init__(message, code="VALIDATION_ERROR")


class NotFoundError(RegistryError):
    """Raised when a user, land or transaction id is unknown."""

    status_code = 404

    def __init__(self, message: str = "Not found"):
        super().__init__(message, code="NOT_FOUND")


class InvalidStateError(RegistryError):
    """Raised when an operation is not legal from the entity's current status."""

    status_code = 400

    def __init__(self, message: str = "Operation not allowed in the current state"):
        super().__init__(message, code="INVALID_STATE")
