"""
Airtable Client
---------------
Builds authenticated requests against one Airtable base and sends them.

Rules:
- The API key is loaded from the environment only and never logged
- One request in flight per send(), no retries
- Response bodies are read fully and always released
- Success returns raw bytes; decoding is the caller's job
"""

from dataclasses import dataclass, field
from typing import Any, Dict, Mapping, Optional
from urllib.parse import quote

import httpx

from airtable.constants import (
    AUTHORIZATION_HEADER,
    BEARER_FORMAT,
    CONTENT_TYPE_HEADER,
    ERROR_STATUS_THRESHOLD,
    FILTER_QUERY_STRING,
    JSON_UTF8,
)
from airtable.models import AirtablePayload, AirtableRecord
from core.errors import (
    InvalidRequestError,
    ServerError,
    TransportError,
    log_error,
)
from infra.config import ClientConfig, load_client_config
from infra.logging import RequestContext, get_logger

logger = get_logger("client")


def filter_by_formula(formula: str) -> str:
    """Encode a formula as a filterByFormula query fragment."""
    return FILTER_QUERY_STRING + quote(formula, safe="")


@dataclass
class AirtableRequest:
    """A single request against one table. Built per call, not reused."""
    method: str
    table: str
    url: str
    payload: AirtablePayload = field(default_factory=AirtablePayload)

    def new_record(self, fields: Any) -> AirtableRecord:
        """Wrap a field map into a record with no id or timestamp. Fields are not validated."""
        record = AirtableRecord.from_fields(fields)
        logger.debug(f"Created record {record.to_wire()}")
        return record

    def add_record(self, record: AirtableRecord) -> None:
        """Append a record to the payload, keeping insertion order."""
        self.payload.records.append(record)
        logger.debug(f"Request records after append: {len(self.payload.records)}")

    def encode_body(self) -> bytes:
        return self.payload.encode()


class AirtableClient:
    """
    Client for one Airtable base.

    Usage:
        with AirtableClient.from_env() as client:
            request = client.get_record_request("Users", "rec123")
            body = client.send(request)
    """

    def __init__(
        self,
        config: ClientConfig,
        transport: Optional[httpx.BaseTransport] = None
    ):
        self.config = config
        self._http = httpx.Client(timeout=config.timeout, transport=transport)

    @classmethod
    def from_env(
        cls,
        environ: Optional[Mapping[str, str]] = None,
        transport: Optional[httpx.BaseTransport] = None
    ) -> "AirtableClient":
        """
        Resolve configuration from the environment and build a client.

        Raises:
            ConfigurationError: AIRTABLE_KEY or AIRTABLE_BASE missing
        """
        logger.info("Starting airtable client")
        return cls(load_client_config(environ), transport=transport)

    @property
    def key(self) -> str:
        return self.config.api_key

    @property
    def url(self) -> str:
        return self.config.url_template

    def _get_headers(self) -> Dict[str, str]:
        """Build request headers with authentication."""
        return {
            CONTENT_TYPE_HEADER: JSON_UTF8,
            AUTHORIZATION_HEADER: BEARER_FORMAT.format(self.config.api_key),
        }

    # -- Request builders ----------------------------------------------------

    def create_request(self, method: str, table: str) -> AirtableRequest:
        """Request with an empty payload against the table URL."""
        request = AirtableRequest(
            method=method.upper(),
            table=table,
            url=self.config.format_url(table),
        )
        logger.debug(f"Created request {request.method} {request.url}")
        return request

    def get_record_request(self, table: str, record_id: str) -> AirtableRequest:
        """GET a single record by id."""
        request = self.create_request("GET", table)
        request.url = f"{request.url}/{record_id}"
        logger.debug(f"Updated request URL {request.url}")
        return request

    def filter_record_request(self, table: str, filter_query: str) -> AirtableRequest:
        """
        GET records matching a query fragment, e.g. "?filterByFormula=...".

        The fragment is appended verbatim; encoding it is the caller's job
        (see filter_by_formula).
        """
        request = self.create_request("GET", table)
        request.url = f"{request.url}{filter_query}"
        logger.debug(f"Updated request URL for filter {request.url}")
        return request

    # -- Execution -----------------------------------------------------------

    def send(self, request: Optional[AirtableRequest]) -> bytes:
        """
        Send a request and return the raw response body.

        Raises:
            InvalidRequestError: request is None
            TransportError: body encoding, request construction, network
                failure, timeout, or failure reading the response body
            ServerError: response status >= 300
        """
        if request is None:
            error = InvalidRequestError("The request in send is None")
            log_error(logger, error)
            raise error

        with RequestContext():
            context = {"method": request.method, "url": request.url}

            try:
                body = request.encode_body()
                http_request = self._http.build_request(
                    request.method,
                    request.url,
                    content=body,
                    headers=self._get_headers(),
                )
            except (TypeError, ValueError, httpx.InvalidURL) as e:
                error = TransportError(f"Unable to build HTTP request: {e}")
                log_error(logger, error, **context)
                raise error from e

            if self._http.is_closed:
                error = TransportError("Cannot send a request, the client has been closed")
                log_error(logger, error, **context)
                raise error

            logger.info(f"Sending {request.method} request to {request.url}")

            try:
                response = self._http.send(http_request, stream=True)
            except httpx.TimeoutException as e:
                error = TransportError(
                    f"Request timed out after {self.config.timeout}s",
                    timed_out=True
                )
                log_error(logger, error, **context)
                raise error from e
            except httpx.HTTPError as e:
                error = TransportError(f"Error sending request to airtable: {e}")
                log_error(logger, error, **context)
                raise error from e

            try:
                content = response.read()
            except (httpx.HTTPError, httpx.StreamError) as e:
                error = TransportError(f"Error reading the response body: {e}")
                log_error(logger, error, status=response.status_code, **context)
                raise error from e
            finally:
                response.close()

            logger.debug(f"Got response body {content.decode('utf-8', errors='replace')}")

            if response.status_code >= ERROR_STATUS_THRESHOLD:
                error = ServerError(response.status_code, content)
                log_error(logger, error, status=response.status_code, **context)
                raise error

            logger.info(f"Airtable answered {response.status_code} for {request.url}")
            return content

    def close(self) -> None:
        """Close the underlying HTTP client."""
        self._http.close()

    def __enter__(self) -> "AirtableClient":
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.close()
