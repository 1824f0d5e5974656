"""Intercom REST API request handler.

Provides the HTTP layer shared by every resource client: bearer-token
authentication, thread safety, and mapping of responses onto typed results.
Transport failures and error responses are returned as
:class:`~intercom_client.restapi.types.ErrorList` values, never raised.
"""

import threading
import time
from collections.abc import Mapping
from pathlib import Path
from typing import Any

import httpx
import pydantic
import structlog

from .types import ErrorList, Result, parse_resource

logger = structlog.get_logger(__name__)

DEFAULT_BASE_URL = "https://api.intercom.io"

# Resource clients are written against the v1.x user endpoints.
DEFAULT_API_VERSION = "1.1"

DEFAULT_TIMEOUT = 30.0


class RequestHandler:
    """HTTP request handler for the Intercom REST API.

    Issues a single request per call and returns either a parsed resource or
    an error list. Retries, rate limiting and pagination are left to callers.

    Thread-safe through thread-local storage of httpx.Client instances.
    Can be used as a context manager for automatic cleanup.
    """

    def __init__(
        self,
        base_url: str = DEFAULT_BASE_URL,
        access_token: str | None = None,
        token_file: str | Path | None = None,
        api_version: str = DEFAULT_API_VERSION,
        timeout: float = DEFAULT_TIMEOUT,
        transport: httpx.BaseTransport | None = None,
    ):
        """Initialize the request handler.

        Args:
            base_url: Base URL for the Intercom API.
            access_token: Access token sent as a bearer token.
            token_file: Path to a file containing the access token. Used only
                when access_token is not given.
            api_version: Value of the Intercom-Version header (default: 1.1).
            timeout: Request timeout in seconds (default: 30.0).
            transport: Optional httpx transport, mainly for tests.

        Raises:
            ValueError: If base_url is empty or timeout is not positive.
            FileNotFoundError: If token_file is specified but doesn't exist.
        """
        if not base_url:
            msg = "base_url cannot be empty"
            raise ValueError(msg)
        if timeout <= 0:
            msg = "timeout must be positive"
            raise ValueError(msg)

        self.base_url = base_url.rstrip("/")
        self.api_version = api_version
        self._timeout = timeout
        self._transport = transport

        self._headers = {
            "Accept": "application/json",
            "Content-Type": "application/json",
            "Intercom-Version": api_version,
        }

        if not access_token and token_file:
            token_path = Path(token_file)
            if not token_path.exists():
                msg = f"Token file not found: {token_file}"
                raise FileNotFoundError(msg)
            access_token = token_path.read_text().strip()
        if access_token:
            self._headers["Authorization"] = f"Bearer {access_token}"
        else:
            logger.warning("No access token configured, requests will be anonymous")

        self._local = threading.local()

    @property
    def client(self) -> httpx.Client:
        """Get or create the thread-local httpx client."""
        if not hasattr(self._local, "client") or self._local.client.is_closed:
            self._local.client = httpx.Client(
                base_url=self.base_url,
                headers=self._headers,
                timeout=self._timeout,
                transport=self._transport,
            )
        return self._local.client

    def __enter__(self):
        """Enter context manager."""
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        """Exit context manager and cleanup resources."""
        self.close()

    def close(self):
        """Close the thread-local HTTP client if open."""
        if hasattr(self._local, "client") and not self._local.client.is_closed:
            self._local.client.close()

    def get(self, uri: str) -> Result:
        """GET a path (with optional query string) relative to the base URL."""
        return self._request("GET", uri)

    def post(self, uri: str, body: Mapping[str, Any]) -> Result:
        """POST a JSON body to a path relative to the base URL."""
        return self._request("POST", uri, body=body)

    def delete(self, uri: str) -> Result:
        """DELETE a path (with optional query string) relative to the base URL."""
        return self._request("DELETE", uri)

    def get_url(self, url: str) -> Result:
        """GET an absolute URL such as a pagination ``next`` link.

        The URL must point at the configured API origin; anything else is
        refused without a request so the access token stays on that host.
        """
        target = httpx.URL(url)
        base = httpx.URL(self.base_url)
        if target.is_absolute_url and (
            target.scheme != base.scheme or target.netloc != base.netloc
        ):
            logger.warning(
                "Refusing to follow foreign URL",
                url=url,
                base_url=self.base_url,
            )
            return ErrorList.single(
                "invalid_url",
                f"URL is not on the API host {base.host}: {url}",
            )
        return self._request("GET", url)

    def _request(
        self,
        method: str,
        uri: str,
        body: Mapping[str, Any] | None = None,
    ) -> Result:
        """Make an HTTP request to the Intercom API.

        Args:
            method: HTTP verb.
            uri: Path and query, or an absolute URL.
            body: Optional JSON body.

        Returns:
            Parsed resource, raw dict for untyped bodies, or an ErrorList.
        """
        start_time = time.time()
        logger.debug("Making API request", method=method, uri=uri)
        try:
            response = self.client.request(
                method,
                uri,
                json=dict(body) if body is not None else None,
            )
        except httpx.HTTPError as exc:
            duration = time.time() - start_time
            logger.exception(
                "API request failed",
                method=method,
                uri=uri,
                duration_seconds=round(duration, 3),
            )
            return ErrorList.single("connection_error", str(exc))

        duration = time.time() - start_time
        logger.debug(
            "API request completed",
            method=method,
            uri=uri,
            status=response.status_code,
            duration_seconds=round(duration, 3),
        )
        return self._parse_response(response)

    def _parse_response(self, response: httpx.Response) -> Result:
        """Map an HTTP response onto a typed result."""
        if not response.content:
            if response.is_success:
                return {}
            return self._status_error(response)

        try:
            data = response.json()
        except ValueError:
            if not response.is_success:
                return self._status_error(response)
            logger.error("API returned invalid JSON", status=response.status_code)
            return ErrorList.single("invalid_json", "Response body is not valid JSON")

        try:
            result = parse_resource(data)
        except pydantic.ValidationError as exc:
            logger.error("API response failed validation", error_count=exc.error_count())
            return ErrorList.single("invalid_response", str(exc))

        if response.is_success:
            return result
        if isinstance(result, ErrorList):
            for error in result.errors:
                logger.warning(
                    "API error response",
                    status=response.status_code,
                    code=error.code,
                    error_message=error.message,
                )
            return result
        return self._status_error(response)

    @staticmethod
    def _status_error(response: httpx.Response) -> ErrorList:
        logger.warning("API error response", status=response.status_code)
        return ErrorList.single(
            f"http_{response.status_code}",
            response.reason_phrase or f"HTTP {response.status_code}",
        )
