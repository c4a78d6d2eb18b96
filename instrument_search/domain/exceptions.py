"""
Custom exceptions for the instrument search domain.

These exceptions represent domain-level errors and are independent
of infrastructure concerns (Redis, loaders, etc.).
"""

from typing import Optional


class SearchServiceException(Exception):
    """Base exception for all instrument search errors."""

    def __init__(self, message: str, details: Optional[dict] = None):
        self.message = message
        self.details = details or {}
        super().__init__(self.message)


class HistoryPersistenceException(SearchServiceException):
    """
    Raised when the query history cannot be written to its store.

    The in-memory history is already updated when this is raised, so
    callers may treat it as a recoverable warning.
    """

    def __init__(self, operation: str, reason: Optional[str] = None):
        message = f"History {operation} failed"
        if reason:
            message += f": {reason}"
        super().__init__(
            message=message, details={"operation": operation, "reason": reason}
        )


class CorpusValidationException(SearchServiceException):
    """Raised when loader-provided corpus data is malformed."""

    def __init__(self, collection: str, reason: str):
        message = f"Invalid corpus data in {collection}: {reason}"
        super().__init__(
            message=message, details={"collection": collection, "reason": reason}
        )
