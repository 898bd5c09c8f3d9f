"""
Airtable Client Test Configuration
----------------------------------
Shared fixtures and configuration for all tests.

Real network access is blocked: every HTTP exchange goes through
httpx.MockTransport.
"""

import logging
import sys
from pathlib import Path
from typing import Callable, List

import httpx
import pytest

# Add project root to path
PROJECT_ROOT = Path(__file__).parent.parent
sys.path.insert(0, str(PROJECT_ROOT))

from airtable import AirtableClient
from infra.config import ClientConfig


TEST_KEY = "keyvariable"
TEST_BASE = "basevariable"
TEST_URL_TEMPLATE = "https://api.example.com/v0/basevariable/%s"


# =============================================================================
# Test Isolation: Block Side Effects
# =============================================================================

@pytest.fixture(autouse=True)
def clean_airtable_env(monkeypatch):
    """Start every test without any AIRTABLE_* variable set."""
    for name in ("AIRTABLE_KEY", "AIRTABLE_BASE", "AIRTABLE_HOST"):
        monkeypatch.delenv(name, raising=False)


@pytest.fixture(autouse=True)
def block_real_network(monkeypatch):
    """
    Block the default httpx transport during tests.

    If something tries to reach a real host, it raises RuntimeError.
    """
    def _blocked(self, request):
        raise RuntimeError(
            f"Network access is forbidden during tests: {request.url}. "
            "Pass a transport built with httpx.MockTransport."
        )

    monkeypatch.setattr(httpx.HTTPTransport, "handle_request", _blocked)


@pytest.fixture
def reset_logging():
    """Run the test with logging unconfigured, and drop handlers it installs."""
    import infra.logging as client_logging

    def _reset():
        root = logging.getLogger(client_logging.ROOT_LOGGER_NAME)
        for handler in list(root.handlers):
            root.removeHandler(handler)
            handler.close()
        root.setLevel(logging.NOTSET)
        client_logging._logging_initialized = False
        client_logging._log_file_path = None

    _reset()
    yield
    _reset()


# =============================================================================
# Client Fixtures
# =============================================================================

@pytest.fixture
def client_config() -> ClientConfig:
    return ClientConfig(api_key=TEST_KEY, url_template=TEST_URL_TEMPLATE)


@pytest.fixture
def sent_requests() -> List[httpx.Request]:
    """Requests seen by the mock transport, in order."""
    return []


@pytest.fixture
def make_client(client_config, sent_requests):
    """
    Build a client whose transport answers with `handler`.

    The handler receives the httpx.Request and returns an httpx.Response
    (or raises an httpx exception to simulate transport failures).
    """
    clients = []

    def _make(handler: Callable[[httpx.Request], httpx.Response]) -> AirtableClient:
        def _recording(request: httpx.Request) -> httpx.Response:
            sent_requests.append(request)
            return handler(request)

        client = AirtableClient(client_config, transport=httpx.MockTransport(_recording))
        clients.append(client)
        return client

    yield _make

    for client in clients:
        client.close()


@pytest.fixture
def client(make_client) -> AirtableClient:
    """Client answering 200 with an empty record envelope."""
    return make_client(lambda request: httpx.Response(200, content=b'{"records":[]}'))
