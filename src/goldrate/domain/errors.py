"""
Domain Errors - Business Logic Exceptions

This module defines domain-specific exceptions raised while fetching,
extracting and persisting prices.
"""
from typing import Optional

EMPTY_EXTRACTION_MESSAGE = "Could not parse gold prices. The website structure may have changed."


class DomainError(Exception):
    """Base exception for domain errors."""
    pass


class FetchFailure(DomainError):
    """Raised when a page body could not be fetched."""
    pass


class ProxyExhaustedError(FetchFailure):
    """
    Raised when every proxy in the chain failed.

    The message is the text of the last underlying error, or
    "All proxies failed" when none was captured.
    """

    def __init__(self, last_error: Optional[BaseException] = None):
        self.last_error = last_error
        message = str(last_error) if last_error is not None else ""
        super().__init__(message or "All proxies failed")


class EmptyExtractionError(DomainError):
    """Raised when a fetched page yielded no gram prices."""

    def __init__(self, message: str = EMPTY_EXTRACTION_MESSAGE):
        super().__init__(message)


class PersistenceError(DomainError):
    """Raised when writing prices to the backing store fails."""
    pass


class UnknownSourceError(DomainError, KeyError):
    """Raised when a price source slug is not registered."""

    def __init__(self, slug: str):
        self.slug = slug
        super().__init__(f"Unknown price source: {slug}")

    def __str__(self) -> str:
        return self.args[0]
