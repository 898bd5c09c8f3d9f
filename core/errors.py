"""
Error Handling Module
---------------------
Typed errors for the Airtable client with category-based logging.
Errors surface immediately to the caller. Nothing is retried.
"""

from enum import Enum, auto
from typing import Any, Dict, Optional
import logging


class ErrorCategory(Enum):
    """Categories of errors for handling decisions."""
    CONFIGURATION = auto()     # Missing required environment variable
    INVALID_REQUEST = auto()   # Request object absent
    TRANSPORT = auto()         # Encoding, network or timeout failure
    SERVER = auto()            # Remote returned status >= 300
    UNKNOWN = auto()           # Raised directly as AirtableError


class AirtableError(Exception):
    """Base class for every error raised by the client."""

    category: ErrorCategory = ErrorCategory.UNKNOWN

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        super().__init__(message)
        self.message = message
        self.details = details or {}

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.category.name}: {self.message})"


class ConfigurationError(AirtableError):
    """A required environment variable is missing or empty."""

    category = ErrorCategory.CONFIGURATION


class InvalidRequestError(AirtableError):
    """send() was called without a request."""

    category = ErrorCategory.INVALID_REQUEST


class TransportError(AirtableError):
    """The request could not be encoded, sent, or its response read."""

    category = ErrorCategory.TRANSPORT

    def __init__(
        self,
        message: str,
        details: Optional[Dict[str, Any]] = None,
        timed_out: bool = False
    ):
        super().__init__(message, details)
        self.timed_out = timed_out


class ServerError(AirtableError):
    """Airtable answered with an error status (>= 300)."""

    category = ErrorCategory.SERVER

    def __init__(
        self,
        status_code: int,
        body: bytes = b"",
        details: Optional[Dict[str, Any]] = None
    ):
        super().__init__(f"Airtable returned an error status {status_code}", details)
        self.status_code = status_code
        self.body = body


# Log level per category
LOG_LEVELS: Dict[ErrorCategory, int] = {
    ErrorCategory.CONFIGURATION: logging.ERROR,
    ErrorCategory.INVALID_REQUEST: logging.WARNING,
    ErrorCategory.TRANSPORT: logging.ERROR,
    ErrorCategory.SERVER: logging.ERROR,
    ErrorCategory.UNKNOWN: logging.ERROR,
}


def log_error(logger: logging.Logger, error: AirtableError, **context: Any) -> None:
    """
    Log an error with its contextual detail before it is raised.

    Context keys (method, url, status...) are merged into the error's
    details so the caller sees the same information that was logged.
    """
    error.details.update({k: v for k, v in context.items() if v is not None})

    level = LOG_LEVELS.get(error.category, logging.ERROR)
    detail_str = ", ".join(f"{k}={v}" for k, v in error.details.items())
    suffix = f" [{detail_str}]" if detail_str else ""

    logger.log(
        level,
        f"{error.category.name}: {error.message}{suffix}",
        extra={"details": dict(error.details)}
    )
