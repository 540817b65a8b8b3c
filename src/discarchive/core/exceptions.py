"""Exception hierarchy for Disc Archive.

Every error carries the HTTP status code the API layer answers with, so the
services can raise them without knowing about FastAPI.
"""


class DiscArchiveError(Exception):
    """Base exception for all Disc Archive errors."""

    status_code: int = 500

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ValidationError(DiscArchiveError):
    """Raised when a request is missing a field or carries a bad value."""

    status_code = 400


class FormatError(ValidationError):
    """Raised when a size string does not match ``<number><unit>``."""


class NotFoundError(DiscArchiveError):
    """Raised when a referenced disc or resource does not exist."""

    status_code = 404

    def __init__(self, kind: str, id: int):
        super().__init__(f"{kind.capitalize()} {id} not found")
        self.kind = kind
        self.id = id


class ConflictError(DiscArchiveError):
    """Raised when a uniqueness rule would be violated."""

    status_code = 409


class UnauthorizedError(DiscArchiveError):
    """Raised when a request carries no valid credentials."""

    status_code = 401


class StoreError(DiscArchiveError):
    """Raised when the database fails underneath an operation."""

    status_code = 500


class ExhaustedRetriesError(StoreError):
    """Raised when no unused disc code was found within the retry cap."""

    status_code = 503
