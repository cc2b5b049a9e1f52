"""Legacy user lookup and password validation over the legacy REST API."""
from __future__ import annotations
import json
import logging
from abc import ABC, abstractmethod
from typing import Any, Callable, Optional
from urllib.parse import quote

from ..config.settings import ProviderConfig, load_settings
from .exceptions import LegacyUserDecodeError, LegacyUserEncodeError, RestUserProviderError
from .http.client import HttpClient, HttpResponse
from .http.strategies import HttpClientStrategy
from .legacy_user import LegacyUser
from .strategy_factory import build_http_client_strategy

logger = logging.getLogger(__name__)

HTTP_OK = 200

# Kept literal when identifiers are percent-encoded
IDENTIFIER_SAFE_CHARS = "@+"


def equals_case_insensitive(a: Optional[str], b: Optional[str]) -> bool:
    """Compare two identities ignoring case; a missing side never matches."""
    if a is None or b is None:
        return False
    return a.upper() == b.upper()


class LegacyUserService(ABC):
    """Operations the host identity system calls on the legacy directory."""

    @abstractmethod
    def find_by_username(self, username: str) -> Optional[LegacyUser]:
        """Return the user whose username matches, ignoring case."""

    @abstractmethod
    def find_by_email(self, email: str) -> Optional[LegacyUser]:
        """Return the user whose email matches, ignoring case."""

    @abstractmethod
    def is_password_valid(self, username: str, password: str) -> bool:
        """Return True when the legacy directory accepts the password."""


class RestUserService(LegacyUserService):
    """Legacy user service backed by the legacy REST API.

    Lookups only accept a user whose returned username (or email) is the
    requested one, ignoring case. A backend that answers with some other
    user, for instance on a fuzzy match, yields no user at all.

    Usage:
        service = RestUserService(load_settings())
        user = service.find_by_username("alice")
        if user and service.is_password_valid("alice", password):
            ...
    """

    def __init__(
        self,
        config: ProviderConfig,
        http_client: Optional[HttpClient] = None,
        json_codec: Any = json,
        strategy: Optional[HttpClientStrategy] = None,
    ):
        """Initialize the service.

        Args:
            config: Provider configuration
            http_client: HTTP client (defaults to one using the configured timeout)
            json_codec: Object with ``loads``/``dumps`` (defaults to the json module)
            strategy: Authentication strategy (defaults to the one the configuration selects)
        """
        self.uri = config.uri.rstrip("/")
        self.encode_identifier = config.encode_identifier
        self.http_client = http_client or HttpClient(timeout=config.request_timeout)
        self.json_codec = json_codec
        self.strategy = strategy or build_http_client_strategy(config)
        logger.info(f"Legacy user service for {self.uri} using '{self.strategy.name}' authentication")

    def find_by_username(self, username: str) -> Optional[LegacyUser]:
        """Find a legacy user by username.

        Args:
            username: Username to look up

        Returns:
            The user, or None if not found or the returned username differs

        Raises:
            RestUserProviderError: If the legacy API cannot be reached or answers garbage
        """
        user = self._find_legacy_user(username)
        if user is not None and equals_case_insensitive(username, user.username):
            return user
        return None

    def find_by_email(self, email: str) -> Optional[LegacyUser]:
        """Find a legacy user by email.

        Args:
            email: Email address to look up

        Returns:
            The user, or None if not found or the returned email differs

        Raises:
            RestUserProviderError: If the legacy API cannot be reached or answers garbage
        """
        user = self._find_legacy_user(email)
        if user is not None and equals_case_insensitive(email, user.email):
            return user
        return None

    def is_password_valid(self, username: str, password: str) -> bool:
        """Ask the legacy API whether the password is valid for the user.

        Args:
            username: Username the password belongs to
            password: Cleartext password, sent in the request body only

        Returns:
            True only if the legacy API answers 200

        Raises:
            RestUserProviderError: If the payload cannot be encoded or the request fails
        """
        url = self._user_url(username)
        try:
            body = self.json_codec.dumps({"password": password})
        except (TypeError, ValueError) as e:
            raise LegacyUserEncodeError("Could not encode password validation payload") from e

        response = self._send(lambda strategy: self.http_client.post(url, body, strategy), username)
        return response.status_code == HTTP_OK

    def _find_legacy_user(self, username_or_email: str) -> Optional[LegacyUser]:
        url = self._user_url(username_or_email)
        response = self._send(lambda strategy: self.http_client.get(url, strategy), username_or_email)
        if response.status_code != HTTP_OK:
            logger.debug(f"Legacy API returned {response.status_code} for lookup")
            return None

        try:
            payload = self.json_codec.loads(response.body)
            if payload is None:
                return None
            user = LegacyUser.from_dict(payload)
        except (TypeError, ValueError) as e:
            raise LegacyUserDecodeError(f"Malformed legacy user returned by {url}") from e

        logger.debug(f"Legacy API returned user '{user.username}'")
        return user

    def _send(self, call: Callable[[HttpClientStrategy], HttpResponse], subject: str) -> HttpResponse:
        strategy = self.strategy.for_subject(subject)
        try:
            return call(strategy)
        except RestUserProviderError:
            raise
        except Exception as e:
            raise RestUserProviderError(f"Legacy API request failed: {e}") from e

    def _user_url(self, identifier: str) -> str:
        if self.encode_identifier:
            identifier = quote(identifier, safe=IDENTIFIER_SAFE_CHARS)
        return f"{self.uri}/{identifier}"


def create_user_service(config: Optional[ProviderConfig] = None) -> RestUserService:
    """Create a service with the default HTTP client and JSON codec.

    Args:
        config: Provider configuration (defaults to ``load_settings()``)
    """
    if config is None:
        config = load_settings()
    return RestUserService(config)
