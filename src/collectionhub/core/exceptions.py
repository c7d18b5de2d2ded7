"""Exception hierarchy for collection operations.

Authorization and validation errors are raised before any mutation begins.
Infrastructure errors abort the enclosing transaction.
"""

from dataclasses import dataclass


class CollectionHubError(Exception):
    """Base class for all CollectionHub errors."""

    pass


class UnauthenticatedError(CollectionHubError):
    """Raised when a credential is missing or invalid."""

    def __init__(self, message: str = "Authentication required") -> None:
        super().__init__(message)


class ForbiddenError(CollectionHubError):
    """Raised when an authenticated actor lacks a scope, ownership or role."""

    def __init__(self, message: str = "You don't have permission to do this") -> None:
        super().__init__(message)


class NotFoundError(CollectionHubError):
    """Raised for unknown ids and for collections hidden from the viewer."""

    def __init__(self, collection_id: str) -> None:
        self.collection_id = collection_id
        super().__init__(f"Collection '{collection_id}' not found")


@dataclass
class FieldError:
    """A single field validation error."""

    field: str
    message: str
    code: str


class ValidationFailedError(CollectionHubError):
    """Raised when input fails field, extension or size validation."""

    def __init__(self, errors: list[FieldError]) -> None:
        self.errors = errors
        super().__init__("; ".join(f"{e.field}: {e.message}" for e in errors))

    @classmethod
    def single(cls, field: str, message: str, code: str) -> "ValidationFailedError":
        return cls([FieldError(field=field, message=message, code=code)])


class ReferencedEntityMissingError(CollectionHubError):
    """Raised when a membership edit names a project that does not exist."""

    def __init__(self, project_id: str) -> None:
        self.project_id = project_id
        super().__init__(f"The specified project {project_id} does not exist!")


class StorageFailureError(CollectionHubError):
    """Raised when the asset store fails to upload or delete a blob."""

    pass


class PersistenceFailureError(CollectionHubError):
    """Raised when the relational store fails mid-transaction."""

    pass
