# Infrastructure module - Logging and Configuration
# Logging is configured once by the entry point, not by the client

from .logging import (
    get_logger, configure_logging, RequestContext,
    get_request_id, generate_request_id
)
from .config import (
    ClientConfig, LoggingSettings, load_client_config, load_logging_settings,
    generate_url_template
)

__all__ = [
    # Logging
    "get_logger",
    "configure_logging",
    "RequestContext",
    "get_request_id",
    "generate_request_id",
    # Config
    "ClientConfig",
    "LoggingSettings",
    "load_client_config",
    "load_logging_settings",
    "generate_url_template",
]
