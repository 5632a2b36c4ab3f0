from typing import Optional, Dict, Any


class WrappedException(Exception):
    """Base exception for the wrapped backend."""

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        self.message = message
        self.details = details or {}
        super().__init__(message)


class InvalidInputError(WrappedException):
    """Raised when a profile id or year is missing or not numeric."""

    pass


class ResourceNotFoundError(WrappedException):
    """Raised when a requested resource is not found."""

    pass


class WrappedComputationError(WrappedException):
    """Raised when the wrapped computation cannot complete."""

    pass


class FetchFailureError(WrappedComputationError):
    """Raised when a read against the backing store fails."""

    pass
