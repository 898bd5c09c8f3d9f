"""
Configuration
-------------
Client configuration resolved from the environment, plus optional
logging settings from a YAML file.

Rules:
- The API key comes from the environment only
- The key never appears in logs or repr()
- Resolved configuration is immutable
"""

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Mapping, Optional
import os

import yaml

from core.errors import ConfigurationError, log_error
from infra.logging import get_logger

logger = get_logger("infra.config")

AIRTABLE_KEY_VARIABLE = "AIRTABLE_KEY"
AIRTABLE_BASE_VARIABLE = "AIRTABLE_BASE"
AIRTABLE_HOST_VARIABLE = "AIRTABLE_HOST"
DEFAULT_AIRTABLE_HOST = "https://api.airtable.com/v0/"

REQUEST_TIMEOUT_SECONDS = 15.0

LOG_LEVEL_VARIABLE = "AIRTABLE_LOG_LEVEL"
LOG_DIR_VARIABLE = "AIRTABLE_LOG_DIR"
LOG_FILE_VARIABLE = "AIRTABLE_LOG_FILE"


@dataclass(frozen=True)
class ClientConfig:
    """Resolved client configuration."""
    api_key: str = field(repr=False)
    url_template: str  # "<host><base>/%s"
    timeout: float = REQUEST_TIMEOUT_SECONDS

    def format_url(self, table: str) -> str:
        """Resolve the table URL from the template."""
        return self.url_template % (table,)


def generate_url_template(environ: Optional[Mapping[str, str]] = None) -> str:
    """
    Build the base URL template from AIRTABLE_BASE and AIRTABLE_HOST.

    The host falls back to the public Airtable endpoint. Any literal '%'
    in host or base is escaped so the template always formats cleanly.
    """
    env = os.environ if environ is None else environ

    base_id = env.get(AIRTABLE_BASE_VARIABLE)
    if base_id is None:
        error = ConfigurationError(
            f"The {AIRTABLE_BASE_VARIABLE} environment variable is not set",
            details={"variable": AIRTABLE_BASE_VARIABLE}
        )
        log_error(logger, error)
        raise error

    host = env.get(AIRTABLE_HOST_VARIABLE)
    if host is None:
        host = DEFAULT_AIRTABLE_HOST

    template = host.replace("%", "%%") + base_id.replace("%", "%%") + "/%s"
    logger.info(f"Initialized Airtable URL: {template}")
    return template


def load_client_config(environ: Optional[Mapping[str, str]] = None) -> ClientConfig:
    """
    Resolve client configuration from the environment.

    Raises:
        ConfigurationError: AIRTABLE_KEY unset or empty, or AIRTABLE_BASE unset
    """
    env = os.environ if environ is None else environ

    url_template = generate_url_template(env)

    api_key = env.get(AIRTABLE_KEY_VARIABLE)
    if not api_key:
        error = ConfigurationError(
            f"The {AIRTABLE_KEY_VARIABLE} environment variable is not set",
            details={"variable": AIRTABLE_KEY_VARIABLE}
        )
        log_error(logger, error)
        raise error

    return ClientConfig(api_key=api_key, url_template=url_template)


@dataclass(frozen=True)
class LoggingSettings:
    """Process logging options, read once by the entry point."""
    level: str = "INFO"
    log_dir: Optional[str] = None
    to_file: bool = True


def _as_bool(value: Any) -> bool:
    return str(value).strip().lower() not in ("0", "false", "no", "off", "")


def load_logging_settings(
    config_path: str = "airtable.yaml",
    environ: Optional[Mapping[str, str]] = None
) -> LoggingSettings:
    """
    Read the `logging` section of an optional YAML file.

    AIRTABLE_LOG_LEVEL, AIRTABLE_LOG_DIR and AIRTABLE_LOG_FILE override
    the file. A missing file yields the defaults.
    """
    env = os.environ if environ is None else environ
    path = Path(config_path)

    section: Dict[str, Any] = {}
    if path.exists():
        with open(path, "r", encoding="utf-8") as f:
            document = yaml.safe_load(f) or {}
        section = document.get("logging") or {}
        logger.info(f"Loaded logging settings from {path}")
    else:
        logger.debug(f"Config file not found: {path}")

    level = env.get(LOG_LEVEL_VARIABLE, section.get("level", "INFO"))
    log_dir = env.get(LOG_DIR_VARIABLE, section.get("dir"))
    to_file = env.get(LOG_FILE_VARIABLE, section.get("file", True))

    return LoggingSettings(
        level=str(level),
        log_dir=str(log_dir) if log_dir is not None else None,
        to_file=_as_bool(to_file),
    )
