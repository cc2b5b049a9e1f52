"""HTTP layer for the legacy user API.

Architecture:
- client.py: request dispatch and response normalization
- strategies.py: request authentication strategies
- exceptions.py: transport failure type
"""
from .client import (
    HttpClient,
    HttpResponse,
    REQUEST_TIMEOUT,
)
from .exceptions import HttpRequestError
from .strategies import (
    HttpClientStrategy,
    DefaultHttpClientStrategy,
    BasicAuthHttpClientStrategy,
    BearerTokenHttpClientStrategy,
    JwtAuthHttpClientStrategy,
    AUTHORIZATION_HEADER,
    BEARER_FORMAT,
    BASIC_AUTH_FORMAT,
)

__all__ = [
    # Client
    "HttpClient",
    "HttpResponse",
    "REQUEST_TIMEOUT",

    # Exceptions
    "HttpRequestError",

    # Strategies
    "HttpClientStrategy",
    "DefaultHttpClientStrategy",
    "BasicAuthHttpClientStrategy",
    "BearerTokenHttpClientStrategy",
    "JwtAuthHttpClientStrategy",
    "AUTHORIZATION_HEADER",
    "BEARER_FORMAT",
    "BASIC_AUTH_FORMAT",
]
