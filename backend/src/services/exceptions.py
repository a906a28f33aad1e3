"""
Shared exceptions for service layer operations.

Every expected, recoverable outcome of a folder or resource operation is a
ServiceError subclass with a stable human-readable message. Storage failures are
not wrapped; they propagate as-is.
"""


class ServiceError(Exception):
    """Base class for expected service-level failures."""

    error_code: str = "service_error"

    def __init__(self, message: str) -> None:
        self.message = message
        super().__init__(message)


class NotFoundError(ServiceError):
    """
    Raised when a folder or resource does not exist for the requesting user.

    An entity owned by another user is reported exactly like a missing one.
    """

    error_code = "not_found"

    def __init__(self, entity_name: str) -> None:
        self.entity_name = entity_name
        super().__init__(f"{entity_name} not found")


class ConflictError(ServiceError):
    """Raised when a folder name is already used by a sibling."""

    error_code = "conflict"

    def __init__(
        self,
        message: str = "A folder with this name already exists in the same location",
    ) -> None:
        super().__init__(message)


class InvalidOperationError(ServiceError):
    """Raised for structurally forbidden mutations (self-parenting, cycles, type changes)."""

    error_code = "invalid_operation"


class FolderNotEmptyError(ServiceError):
    """Raised when deleting a folder that still holds resources or subfolders without force."""

    error_code = "not_empty"

    def __init__(self) -> None:
        super().__init__(
            "Folder is not empty. Use force=true to move contents to parent folder and delete.",
        )


class ResourceValidationError(ServiceError):
    """
    Raised when field constraints are violated.

    Carries one message per violated constraint so callers can correct all of
    them in one round trip.
    """

    error_code = "validation_error"

    def __init__(self, errors: list[str]) -> None:
        self.errors = errors
        super().__init__("Validation failed")
