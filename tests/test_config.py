"""
Configuration Tests
-------------------
Tests for client configuration resolution and the YAML settings manager.

Tests cover:
- Required AIRTABLE_KEY / AIRTABLE_BASE
- Default and overridden host
- URL template shape and formatting
- Logging settings file loading and env overrides
"""

import dataclasses
from pathlib import Path
import sys

import pytest

sys.path.insert(0, str(Path(__file__).parent.parent))

from airtable import AirtableClient
from core.errors import ConfigurationError, ErrorCategory
from infra.config import (
    ClientConfig,
    LoggingSettings,
    DEFAULT_AIRTABLE_HOST,
    REQUEST_TIMEOUT_SECONDS,
    generate_url_template,
    load_client_config,
    load_logging_settings,
)


TEST_KEY = "keyvariable"
TEST_BASE = "basevariable"


class TestClientInitialization:
    """Tests mirroring client start-up from the process environment."""

    def test_fails_without_key_env_var(self, monkeypatch):
        """AIRTABLE_KEY is required to initialize the client."""
        monkeypatch.setenv("AIRTABLE_BASE", TEST_BASE)

        with pytest.raises(ConfigurationError) as exc_info:
            AirtableClient.from_env()

        assert exc_info.value.category == ErrorCategory.CONFIGURATION
        assert "AIRTABLE_KEY" in str(exc_info.value)

    def test_fails_without_base_env_var(self, monkeypatch):
        """AIRTABLE_BASE is required to initialize the client."""
        monkeypatch.setenv("AIRTABLE_KEY", TEST_KEY)

        with pytest.raises(ConfigurationError) as exc_info:
            AirtableClient.from_env()

        assert "AIRTABLE_BASE" in str(exc_info.value)

    def test_happy_path(self, monkeypatch):
        """Key and URL template come straight from the environment."""
        monkeypatch.setenv("AIRTABLE_KEY", TEST_KEY)
        monkeypatch.setenv("AIRTABLE_BASE", TEST_BASE)

        with AirtableClient.from_env() as client:
            assert client.key == TEST_KEY
            assert client.url == DEFAULT_AIRTABLE_HOST + TEST_BASE + "/%s"


class TestLoadClientConfig:
    """Tests for load_client_config with an explicit environment."""

    def test_empty_key_rejected(self):
        with pytest.raises(ConfigurationError):
            load_client_config({"AIRTABLE_KEY": "", "AIRTABLE_BASE": TEST_BASE})

    def test_default_host(self):
        config = load_client_config({"AIRTABLE_KEY": TEST_KEY, "AIRTABLE_BASE": TEST_BASE})

        assert config.url_template == "https://api.airtable.com/v0/basevariable/%s"
        assert config.timeout == REQUEST_TIMEOUT_SECONDS == 15.0

    def test_host_override(self):
        config = load_client_config({
            "AIRTABLE_KEY": TEST_KEY,
            "AIRTABLE_BASE": TEST_BASE,
            "AIRTABLE_HOST": "https://api.example.com/v0/",
        })

        assert config.url_template == "https://api.example.com/v0/basevariable/%s"

    def test_empty_base_is_accepted(self):
        """Only an unset base is an error; an empty one is passed through."""
        config = load_client_config({"AIRTABLE_KEY": TEST_KEY, "AIRTABLE_BASE": ""})

        assert config.url_template == DEFAULT_AIRTABLE_HOST + "/%s"

    def test_base_checked_before_key(self):
        with pytest.raises(ConfigurationError) as exc_info:
            load_client_config({})

        assert exc_info.value.details["variable"] == "AIRTABLE_BASE"

    def test_percent_in_base_is_preserved(self):
        config = load_client_config({"AIRTABLE_KEY": TEST_KEY, "AIRTABLE_BASE": "app%20x"})

        assert config.format_url("Users") == "https://api.airtable.com/v0/app%20x/Users"

    def test_generate_url_template(self):
        template = generate_url_template({
            "AIRTABLE_BASE": "appXYZ",
            "AIRTABLE_HOST": "http://localhost:8080/",
        })

        assert template == "http://localhost:8080/appXYZ/%s"


class TestClientConfig:
    """Tests for the immutable ClientConfig."""

    def test_format_url(self):
        config = ClientConfig(
            api_key=TEST_KEY,
            url_template="https://api.example.com/v0/basevariable/%s"
        )

        assert config.format_url("Users") == "https://api.example.com/v0/basevariable/Users"

    def test_is_frozen(self):
        config = ClientConfig(api_key=TEST_KEY, url_template="https://x/%s")

        with pytest.raises(dataclasses.FrozenInstanceError):
            config.api_key = "other"

    def test_repr_hides_key(self):
        config = ClientConfig(api_key="super-secret", url_template="https://x/%s")

        assert "super-secret" not in repr(config)


class TestLoggingSettings:
    """Tests for the logging section of the YAML file."""

    def test_missing_file_uses_defaults(self, tmp_path):
        settings = load_logging_settings(str(tmp_path / "missing.yaml"), environ={})

        assert settings == LoggingSettings(level="INFO", log_dir=None, to_file=True)

    def test_reads_logging_section(self, tmp_path):
        path = tmp_path / "airtable.yaml"
        path.write_text("logging:\n  level: DEBUG\n  dir: /tmp/airtable-logs\n  file: false\n")

        settings = load_logging_settings(str(path), environ={})

        assert settings.level == "DEBUG"
        assert settings.log_dir == "/tmp/airtable-logs"
        assert settings.to_file is False

    def test_env_overrides_file(self, tmp_path):
        path = tmp_path / "airtable.yaml"
        path.write_text("logging:\n  level: DEBUG\n  file: true\n")

        settings = load_logging_settings(str(path), environ={
            "AIRTABLE_LOG_LEVEL": "ERROR",
            "AIRTABLE_LOG_FILE": "off",
        })

        assert settings.level == "ERROR"
        assert settings.to_file is False

    def test_empty_file(self, tmp_path):
        path = tmp_path / "airtable.yaml"
        path.write_text("")

        assert load_logging_settings(str(path), environ={}) == LoggingSettings()
