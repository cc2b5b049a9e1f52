"""Low-level HTTP client for the legacy user API.

Handles request authentication, dispatch and response normalization.
"""
from __future__ import annotations
import logging
from dataclasses import dataclass
from typing import Callable, Optional

import requests

from .exceptions import HttpRequestError
from .strategies import DefaultHttpClientStrategy, HttpClientStrategy

logger = logging.getLogger(__name__)

REQUEST_TIMEOUT = 5
JSON_MIME_TYPE = "application/json"
DEFAULT_CHARSET = "utf-8"


@dataclass(frozen=True)
class HttpResponse:
    """Status code plus body. The body is only read for 200 responses."""

    status_code: int
    body: Optional[str] = None


def _charset_from_content_type(content_type: Optional[str]) -> Optional[str]:
    """Return the charset parameter of a Content-Type header, if any."""
    if not content_type:
        return None
    for param in content_type.split(";")[1:]:
        key, _, value = param.partition("=")
        if key.strip().lower() == "charset":
            charset = value.strip().strip("\"'")
            return charset or None
    return None


def _decode_body(content: bytes, content_type: Optional[str]) -> str:
    charset = _charset_from_content_type(content_type) or DEFAULT_CHARSET
    try:
        return content.decode(charset, errors="replace")
    except LookupError:
        logger.debug(f"Unknown response charset {charset!r}, falling back to {DEFAULT_CHARSET}")
        return content.decode(DEFAULT_CHARSET, errors="replace")


class HttpClient:
    """Synchronous HTTP client with pluggable request authentication.

    Each call opens its own session, sends one request (following
    redirects) and closes everything before returning, including on failure.

    Usage:
        client = HttpClient()
        response = client.get("https://legacy/api/users/alice", BearerTokenHttpClientStrategy("t0k3n"))
        if response.status_code == 200:
            payload = response.body
    """

    def __init__(
        self,
        timeout: float = REQUEST_TIMEOUT,
        session_factory: Callable[[], requests.Session] = requests.Session,
    ):
        """Initialize the client.

        Args:
            timeout: Connect/read timeout in seconds for every request
            session_factory: Callable returning a fresh ``requests.Session``
        """
        self.timeout = timeout
        self._session_factory = session_factory

    def get(self, url: str, strategy: Optional[HttpClientStrategy] = None) -> HttpResponse:
        """Execute a GET request.

        Args:
            url: Absolute request URL
            strategy: Authentication strategy (unauthenticated when omitted)

        Returns:
            HttpResponse with the body only for status 200

        Raises:
            HttpRequestError: On any transport failure
        """
        request = requests.Request("GET", url)
        return self._execute(request, strategy)

    def post(self, url: str, body_as_json: str, strategy: Optional[HttpClientStrategy] = None) -> HttpResponse:
        """Execute a POST request with a JSON body.

        Args:
            url: Absolute request URL
            body_as_json: Already serialized JSON document
            strategy: Authentication strategy (unauthenticated when omitted)

        Returns:
            HttpResponse with the body only for status 200

        Raises:
            HttpRequestError: On any transport failure
        """
        request = requests.Request(
            "POST",
            url,
            data=body_as_json.encode("utf-8"),
            headers={"Content-Type": f"{JSON_MIME_TYPE}; charset=UTF-8"},
        )
        return self._execute(request, strategy)

    def _execute(self, request: requests.Request, strategy: Optional[HttpClientStrategy]) -> HttpResponse:
        request.headers["Accept"] = JSON_MIME_TYPE
        (strategy or DefaultHttpClientStrategy()).configure(request)

        try:
            with self._session_factory() as session:
                prepared = session.prepare_request(request)
                with session.send(prepared, stream=True, timeout=self.timeout, allow_redirects=True) as response:
                    result = self._to_http_response(response)
        except requests.RequestException as e:
            raise HttpRequestError(request, str(e)) from e

        logger.debug(f"{request.method} {request.url} -> {result.status_code}")
        return result

    @staticmethod
    def _to_http_response(response: requests.Response) -> HttpResponse:
        if response.status_code != 200:
            return HttpResponse(response.status_code)
        body = _decode_body(response.content, response.headers.get("Content-Type"))
        return HttpResponse(response.status_code, body)
