"""Provider settings from component properties, environment variables and Docker secrets."""
from __future__ import annotations
import os
import sys
from dataclasses import dataclass, field
from pathlib import Path
from typing import Mapping, Optional

from ..core.http.client import REQUEST_TIMEOUT

# Component configuration property names
URI_PROPERTY = "URI"
API_HTTP_BASIC_ENABLED_PROPERTY = "API_HTTP_BASIC_ENABLED"
API_HTTP_BASIC_USERNAME_PROPERTY = "API_HTTP_BASIC_USERNAME"
API_HTTP_BASIC_PASSWORD_PROPERTY = "API_HTTP_BASIC_PASSWORD"
API_TOKEN_ENABLED_PROPERTY = "USE_API_TOKEN"
API_TOKEN_PROPERTY = "API_TOKEN"
API_JWT_ENABLED_PROPERTY = "USE_JWT_AUTH"
API_JWT_PRIVATE_KEY_PROPERTY = "API_JWT_PRIVATE_KEY"
REQUEST_TIMEOUT_PROPERTY = "REQUEST_TIMEOUT"
ENCODE_IDENTIFIER_PROPERTY = "ENCODE_IDENTIFIER"

ALL_PROPERTIES = (
    URI_PROPERTY,
    API_HTTP_BASIC_ENABLED_PROPERTY,
    API_HTTP_BASIC_USERNAME_PROPERTY,
    API_HTTP_BASIC_PASSWORD_PROPERTY,
    API_TOKEN_ENABLED_PROPERTY,
    API_TOKEN_PROPERTY,
    API_JWT_ENABLED_PROPERTY,
    API_JWT_PRIVATE_KEY_PROPERTY,
    REQUEST_TIMEOUT_PROPERTY,
    ENCODE_IDENTIFIER_PROPERTY,
)

ENV_PREFIX = "LEGACY_"

# Properties that may come from /run/secrets instead of the environment
SECRET_FILES = {
    API_HTTP_BASIC_PASSWORD_PROPERTY: "legacy_api_basic_password",
    API_TOKEN_PROPERTY: "legacy_api_token",
    API_JWT_PRIVATE_KEY_PROPERTY: "legacy_api_jwt_private_key",
}


def _load_secret_from_file(secret_name: str) -> str | None:
    """
    Load secret from /run/secrets (Docker secrets pattern).

    Args:
        secret_name: Name of the secret file in /run/secrets

    Returns:
        Secret value or None if not found or empty
    """
    secret_file = Path("/run/secrets") / secret_name

    if secret_file.exists() and secret_file.is_file():
        try:
            secret_value = secret_file.read_text().strip()
            if secret_value:
                print(f"[settings] ✓ Loaded {secret_name} from /run/secrets", file=sys.stderr)
                return secret_value
        except OSError as e:
            print(f"[settings] ✗ Failed to read /run/secrets/{secret_name}: {e}", file=sys.stderr)

    return None


def _parse_bool(value: Optional[str]) -> bool:
    """Only a case-insensitive "true" is true."""
    return value is not None and value.strip().lower() == "true"


def _parse_timeout(value: Optional[str]) -> float:
    if value is None or not value.strip():
        return float(REQUEST_TIMEOUT)
    try:
        timeout = float(value)
    except ValueError:
        raise ValueError(f"{REQUEST_TIMEOUT_PROPERTY} must be a number of seconds, got {value!r}")
    if timeout <= 0:
        raise ValueError(f"{REQUEST_TIMEOUT_PROPERTY} must be positive, got {value!r}")
    return timeout


@dataclass
class ProviderConfig:
    """Legacy user provider configuration container."""
    # Legacy API
    uri: str

    # HTTP Basic
    basic_auth_enabled: bool = False
    basic_auth_username: Optional[str] = None
    basic_auth_password: Optional[str] = field(default=None, repr=False)

    # Static bearer token
    token_auth_enabled: bool = False
    api_token: Optional[str] = field(default=None, repr=False)

    # Signed JWT
    jwt_auth_enabled: bool = False
    jwt_private_key: Optional[str] = field(default=None, repr=False)

    # Transport
    request_timeout: float = REQUEST_TIMEOUT
    encode_identifier: bool = False

    @property
    def auth_mode(self) -> str:
        """Name of the auth mode the flags select, in precedence order."""
        if self.basic_auth_enabled:
            return "basic"
        if self.token_auth_enabled:
            return "token"
        if self.jwt_auth_enabled:
            return "jwt"
        return "none"

    @classmethod
    def from_properties(cls, properties: Mapping[str, Optional[str]]) -> ProviderConfig:
        """Build configuration from the host's component properties.

        Args:
            properties: Property name to raw string value

        Returns:
            Parsed configuration

        Raises:
            ValueError: If the URI is missing or the timeout is invalid
        """
        uri = (properties.get(URI_PROPERTY) or "").strip()
        if not uri:
            raise ValueError(f"{URI_PROPERTY} property is required")

        return cls(
            uri=uri.rstrip("/"),
            basic_auth_enabled=_parse_bool(properties.get(API_HTTP_BASIC_ENABLED_PROPERTY)),
            basic_auth_username=properties.get(API_HTTP_BASIC_USERNAME_PROPERTY),
            basic_auth_password=properties.get(API_HTTP_BASIC_PASSWORD_PROPERTY),
            token_auth_enabled=_parse_bool(properties.get(API_TOKEN_ENABLED_PROPERTY)),
            api_token=properties.get(API_TOKEN_PROPERTY),
            jwt_auth_enabled=_parse_bool(properties.get(API_JWT_ENABLED_PROPERTY)),
            jwt_private_key=properties.get(API_JWT_PRIVATE_KEY_PROPERTY),
            request_timeout=_parse_timeout(properties.get(REQUEST_TIMEOUT_PROPERTY)),
            encode_identifier=_parse_bool(properties.get(ENCODE_IDENTIFIER_PROPERTY)),
        )


def load_properties(environ: Optional[Mapping[str, str]] = None) -> dict[str, Optional[str]]:
    """Collect component properties from LEGACY_* variables.

    Secrets (Basic password, API token, private key) prefer
    /run/secrets/legacy_api_* and fall back to the environment.
    """
    env = os.environ if environ is None else environ
    properties: dict[str, Optional[str]] = {}
    for name in ALL_PROPERTIES:
        env_var = f"{ENV_PREFIX}{name}"
        if name in SECRET_FILES:
            value = _load_secret_from_file(SECRET_FILES[name])
            properties[name] = value if value is not None else env.get(env_var)
        else:
            properties[name] = env.get(env_var)
    return properties


def load_settings(environ: Optional[Mapping[str, str]] = None) -> ProviderConfig:
    """Load provider settings from the environment and /run/secrets."""
    config = ProviderConfig.from_properties(load_properties(environ))
    print(
        f"[settings] uri={config.uri}; auth={config.auth_mode}; timeout={config.request_timeout}s",
        file=sys.stderr,
    )
    return config
