# Core module - error taxonomy
# Every client failure is one of these, raised immediately, never retried

from .errors import (
    AirtableError, ConfigurationError, InvalidRequestError,
    TransportError, ServerError, ErrorCategory, log_error
)

__all__ = [
    "AirtableError", "ConfigurationError", "InvalidRequestError",
    "TransportError", "ServerError", "ErrorCategory", "log_error"
]
