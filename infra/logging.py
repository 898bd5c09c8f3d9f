"""
Centralized Logging
-------------------
Process-wide logging for the Airtable client with request_id propagation.

Design:
- Configured once at process startup by the entry point, never by the client
- Every send() runs inside a RequestContext with a unique request_id
- Console output with colored level tags, optional JSON file output
- Verbose request tracing is DEBUG; failures are ERROR

Usage:
    from infra.logging import configure_logging, get_logger, RequestContext

    configure_logging(level=logging.DEBUG, file=False)
    logger = get_logger("client")

    with RequestContext() as request_id:
        logger.info("Sending request")
"""

import contextvars
import json
import logging
from logging.handlers import RotatingFileHandler
import sys
import uuid
from datetime import datetime, timezone
from pathlib import Path
from typing import Optional

ROOT_LOGGER_NAME = "airtable"

_request_id_var: contextvars.ContextVar[Optional[str]] = contextvars.ContextVar(
    "request_id", default=None
)


def generate_request_id() -> str:
    """Generate a unique request ID."""
    return f"req_{uuid.uuid4().hex[:12]}"


def get_request_id() -> Optional[str]:
    """Get the current request ID from context."""
    return _request_id_var.get()


class RequestContext:
    """
    Context manager for request scoping.

    Usage:
        with RequestContext() as request_id:
            # All logs within this block carry request_id
            logger.info("Sending...")
    """

    def __init__(self, request_id: Optional[str] = None):
        self._request_id = request_id or generate_request_id()
        self._token: Optional[contextvars.Token] = None

    def __enter__(self) -> str:
        self._token = _request_id_var.set(self._request_id)
        return self._request_id

    def __exit__(self, *args) -> None:
        if self._token is not None:
            _request_id_var.reset(self._token)
            self._token = None


class RequestIdFilter(logging.Filter):
    """Logging filter that adds request_id to every log record."""

    def filter(self, record: logging.LogRecord) -> bool:
        if getattr(record, "request_id", None) is None:
            record.request_id = get_request_id() or "-"
        return True


class JSONFormatter(logging.Formatter):
    """JSON formatter for structured file logging."""

    def format(self, record: logging.LogRecord) -> str:
        log_entry = {
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            "request_id": getattr(record, "request_id", "-"),
        }

        if record.exc_info:
            log_entry["exception"] = self.formatException(record.exc_info)

        details = getattr(record, "details", None)
        if details:
            log_entry["details"] = details

        return json.dumps(log_entry, default=str)


class ConsoleHandler(logging.StreamHandler):
    """Console handler with colored level tags."""

    LEVEL_COLORS = {
        "DEBUG": "\033[36m",    # Cyan
        "INFO": "\033[32m",     # Green
        "WARNING": "\033[33m",  # Yellow
        "ERROR": "\033[31m",    # Red
        "CRITICAL": "\033[35m", # Magenta
    }
    RESET = "\033[0m"

    def __init__(self, stream=None):
        super().__init__(stream or sys.stderr)

    def format(self, record: logging.LogRecord) -> str:
        request_id = getattr(record, "request_id", "-")
        color = self.LEVEL_COLORS.get(record.levelname, "")

        # Format: [LEVEL] [request_id] logger: message
        request_str = f" [{request_id}]" if request_id != "-" else ""
        return (
            f"{color}[{record.levelname:7}]{self.RESET}{request_str} "
            f"{record.name}: {record.getMessage()}"
        )


_logging_initialized = False
_log_file_path: Optional[Path] = None


def configure_logging(
    level: int = logging.INFO,
    log_dir: Optional[str] = None,
    console: bool = True,
    file: bool = True,
    log_file: str = "airtable.log",
    force: bool = False,
) -> None:
    """
    Configure the client logging system.

    Args:
        level: Logging level (default INFO)
        log_dir: Directory for log files (default: ./logs)
        console: Enable console output
        file: Enable rotating JSON file output
        log_file: File name inside log_dir
        force: Reconfigure even if already initialized
    """
    global _logging_initialized, _log_file_path

    if _logging_initialized and not force:
        return

    root_logger = logging.getLogger(ROOT_LOGGER_NAME)
    root_logger.setLevel(level)
    for handler in list(root_logger.handlers):
        root_logger.removeHandler(handler)
        handler.close()

    request_filter = RequestIdFilter()

    if console:
        console_handler = ConsoleHandler()
        console_handler.setLevel(level)
        console_handler.addFilter(request_filter)
        root_logger.addHandler(console_handler)

    if file:
        log_path = Path(log_dir) if log_dir else Path("logs")
        log_path.mkdir(parents=True, exist_ok=True)
        _log_file_path = log_path / log_file

        file_handler = RotatingFileHandler(
            str(_log_file_path),
            maxBytes=10 * 1024 * 1024,  # 10 MB
            backupCount=3,
            encoding="utf-8",
        )
        file_handler.setLevel(logging.DEBUG)  # File gets everything
        file_handler.setFormatter(JSONFormatter())
        file_handler.addFilter(request_filter)
        root_logger.addHandler(file_handler)

    _logging_initialized = True


def get_log_file_path() -> Optional[Path]:
    """Path of the active JSON log file, if file logging is on."""
    return _log_file_path


def get_logger(name: str) -> logging.Logger:
    """
    Get a logger inside the client namespace.

    Args:
        name: Logger name (prefixed with 'airtable.' if not already)
    """
    if name != ROOT_LOGGER_NAME and not name.startswith(f"{ROOT_LOGGER_NAME}."):
        name = f"{ROOT_LOGGER_NAME}.{name}"

    return logging.getLogger(name)
