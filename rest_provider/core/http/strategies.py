"""Authentication strategies for outgoing legacy API requests.

Each strategy knows how to attach authentication material to a
``requests.Request`` before it is sent. Strategies are immutable so one
configured instance can be shared by concurrent lookups; the per-call JWT
subject is bound with ``for_subject``, which returns a new value.

Usage:
    strategy = BearerTokenHttpClientStrategy("s3cr3t")
    request = strategy.configure(requests.Request("GET", url))
"""
from __future__ import annotations

import base64
import time
import uuid
from abc import ABC, abstractmethod
from dataclasses import dataclass, field, replace
from typing import Optional

import jwt
import requests
from cryptography.hazmat.primitives.asymmetric.rsa import RSAPrivateKey

AUTHORIZATION_HEADER = "Authorization"
BEARER_FORMAT = "Bearer {}"
BASIC_AUTH_FORMAT = "Basic {}"
USERNAME_PASSWORD_FORMAT = "{}:{}"


def _is_blank(value: Optional[str]) -> bool:
    return value is None or not value.strip()


def signing_algorithm_for(key: RSAPrivateKey) -> str:
    """Pick the strongest RSA signature algorithm the key size allows."""
    if key.key_size >= 4096:
        return "RS512"
    if key.key_size >= 3072:
        return "RS384"
    return "RS256"


class HttpClientStrategy(ABC):
    """Contract for request authentication strategies."""

    name = "abstract"

    @abstractmethod
    def configure(self, request: requests.Request) -> requests.Request:
        """Set the Authorization header on ``request`` or leave it untouched."""

    def for_subject(self, subject: Optional[str]) -> HttpClientStrategy:
        """Return the strategy to use for a call made on behalf of ``subject``.

        Only the signed-token strategy cares about the subject; every other
        strategy returns itself.
        """
        return self


@dataclass(frozen=True)
class DefaultHttpClientStrategy(HttpClientStrategy):
    """Sends requests unauthenticated."""

    name = "none"

    def configure(self, request: requests.Request) -> requests.Request:
        return request


@dataclass(frozen=True)
class BasicAuthHttpClientStrategy(HttpClientStrategy):
    """HTTP Basic authentication.

    Blank or missing credentials never produce a header: a half-configured
    strategy behaves exactly like ``DefaultHttpClientStrategy``.
    """

    username: Optional[str] = None
    password: Optional[str] = field(default=None, repr=False)

    name = "basic"

    def configure(self, request: requests.Request) -> requests.Request:
        header = self.authorization_header()
        if header is not None:
            request.headers[AUTHORIZATION_HEADER] = header
        return request

    def authorization_header(self) -> Optional[str]:
        if _is_blank(self.username) or _is_blank(self.password):
            return None
        raw = USERNAME_PASSWORD_FORMAT.format(self.username, self.password)
        # Latin-1; unmappable characters become "?"
        encoded = base64.b64encode(raw.encode("iso-8859-1", errors="replace"))
        return BASIC_AUTH_FORMAT.format(encoded.decode("ascii"))


@dataclass(frozen=True)
class BearerTokenHttpClientStrategy(HttpClientStrategy):
    """Static bearer token. A blank token sends no header."""

    token: Optional[str] = field(default=None, repr=False)

    name = "token"

    def configure(self, request: requests.Request) -> requests.Request:
        if not _is_blank(self.token):
            request.headers[AUTHORIZATION_HEADER] = BEARER_FORMAT.format(self.token)
        return request


@dataclass(frozen=True)
class JwtAuthHttpClientStrategy(HttpClientStrategy):
    """Per-request JWT assertion signed with an RSA private key.

    Every call to ``configure`` signs a new token (fresh ``iat`` and ``jti``);
    tokens are never cached. The ``sub`` claim is the bound subject, or the
    request URL when no subject is bound.
    """

    signing_key: RSAPrivateKey = field(repr=False)
    subject: Optional[str] = None

    name = "jwt"

    def for_subject(self, subject: Optional[str]) -> JwtAuthHttpClientStrategy:
        return replace(self, subject=subject)

    def configure(self, request: requests.Request) -> requests.Request:
        token = self.build_token(request.url)
        request.headers[AUTHORIZATION_HEADER] = BEARER_FORMAT.format(token)
        return request

    def build_token(self, request_url: str) -> str:
        claims = {
            "sub": self.subject if self.subject is not None else request_url,
            "iat": int(time.time()),
            "jti": uuid.uuid4().hex,
        }
        return jwt.encode(claims, self.signing_key, algorithm=signing_algorithm_for(self.signing_key))
