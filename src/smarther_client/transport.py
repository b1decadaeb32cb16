"""HTTP transport used by the Smarther client."""

import json
import logging
from http.cookiejar import DefaultCookiePolicy
from typing import Any, Mapping, Optional

import requests

from .exceptions import DecodeError, TransportError

logger = logging.getLogger(__name__)


class HttpTransport:
    """Thin wrapper around a ``requests.Session`` for the vendor API.

    Every request closes its connection once the response has been read, and
    cookies set by the server are rejected. Response bodies are returned as text.
    """

    def __init__(self, verify_tls: bool = True, timeout: Optional[float] = None) -> None:
        """Initialize the transport.

        Args:
            verify_tls: Whether to verify the server's TLS certificate chain.
            timeout: Optional per-request timeout in seconds. ``None`` waits indefinitely.
        """
        self._verify_tls = verify_tls
        self._timeout = timeout
        self._session = requests.Session()
        self._session.headers["Connection"] = "close"
        self._session.cookies.set_policy(DefaultCookiePolicy(allowed_domains=[]))

        if not verify_tls:
            logger.warning("TLS certificate verification is disabled for Smarther API requests")

    def set_headers(self, headers: Mapping[str, str]) -> None:
        """Set default headers sent with all subsequent requests."""
        self._session.headers.update(headers)

    def request(self, url: str, data: Optional[Mapping[str, Any]] = None, headers: Optional[Mapping[str, str]] = None) -> str:
        """Send a request and return the response body.

        A GET is sent when ``data`` is empty, otherwise a POST with ``data``
        as a form-encoded body. HTTP error statuses are not raised here: the
        vendor reports failures inside the JSON body.

        Args:
            url: The URL to request.
            data: Optional form fields to POST.
            headers: Optional headers for this request, taking precedence over the defaults.

        Returns:
            The response body as text, which may be empty.

        Raises:
            TransportError: If the request fails due to network or TLS issues.
        """
        method = "POST" if data else "GET"
        logger.debug(f"{method} {url}")
        try:
            response = self._session.request(method, url, data=dict(data) if data else None, headers=dict(headers) if headers else None, verify=self._verify_tls, timeout=self._timeout)
        except requests.RequestException as e:
            raise TransportError(f"{method} request to {url} failed: {e}") from e

        logger.debug(f"{method} {url} returned HTTP {response.status_code}")
        body: str = response.text
        return body

    def close(self) -> None:
        """Close the underlying session and its connection pool."""
        self._session.close()


def decode_json(body: str, url: str) -> Any:
    """Decode a response body as JSON.

    Raises:
        DecodeError: If the body is empty or not valid JSON.
    """
    try:
        return json.loads(body)
    except json.JSONDecodeError as e:
        raise DecodeError(f"Response from {url} is not valid JSON: {e}") from e
