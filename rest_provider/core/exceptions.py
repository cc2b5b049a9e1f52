"""Exceptions raised by the legacy user provider."""
from __future__ import annotations

from typing import Optional


class RestUserProviderError(Exception):
    """Base exception for all legacy user provider failures.

    Callers only need to catch this class: the host treats any instance as
    "legacy backend unavailable". Subclasses keep the failure kind around
    for diagnostics.
    """

    @property
    def cause(self) -> Optional[BaseException]:
        """Original failure this error was raised from, if any."""
        return self.__cause__


class LegacyUserDecodeError(RestUserProviderError):
    """The legacy API answered 200 with a body that is not a valid user."""
    pass


class LegacyUserEncodeError(RestUserProviderError):
    """The outgoing request payload could not be serialized."""
    pass
