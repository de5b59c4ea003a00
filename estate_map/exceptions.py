"""Custom exception hierarchy for estate-map."""


class EstateMapError(Exception):
    """Base exception for all estate-map errors."""


class EntityNotFoundError(EstateMapError):
    """Raised when a referenced entity does not exist."""


class PropertyNotFoundError(EntityNotFoundError):
    """Raised when a property does not exist (or was eliminated)."""


class VoteNotFoundError(EntityNotFoundError):
    """Raised when a voter has no vote on a property."""


class UserNotFoundError(EntityNotFoundError):
    """Raised when a user does not exist."""


class DuplicateVoteError(EstateMapError):
    """Raised when a voter already has a vote on a property."""


class ValidationError(EstateMapError):
    """Raised when input is malformed.

    ``errors`` holds every individual problem found, so callers can report
    them all at once.
    """

    def __init__(self, message: str, errors: list[str] | None = None) -> None:
        super().__init__(message)
        self.errors = list(errors) if errors else [message]


class TransactionConflictError(EstateMapError):
    """Raised when a concurrent write invalidated a transaction."""


class ConfigurationError(EstateMapError):
    """Raised when configuration is invalid or missing."""


class SinkError(EstateMapError):
    """Raised when a sink operation fails."""


_HTTP_STATUS = (
    (EntityNotFoundError, 404),
    (DuplicateVoteError, 409),
    (ValidationError, 400),
    (TransactionConflictError, 503),
)


def http_status_for(exc: BaseException) -> int:
    """Map an exception to the status code an API layer should answer with."""
    for exc_type, status in _HTTP_STATUS:
        if isinstance(exc, exc_type):
            return status
    return 500
