"""HTTP-level exceptions."""
from __future__ import annotations

from typing import Any

from ..exceptions import RestUserProviderError


class HttpRequestError(RestUserProviderError):
    """Transport failure while talking to the legacy API.

    Attributes:
        request: The request that was being sent
        method: HTTP method of that request
        url: Target URL of that request
    """

    def __init__(self, request: Any, message: str):
        self.request = request
        self.method = getattr(request, "method", None)
        self.url = getattr(request, "url", None)
        super().__init__(f"{self.method} {self.url}: {message}")
