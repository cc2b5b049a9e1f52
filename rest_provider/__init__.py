"""Legacy user provider over a REST API.

Lets an identity provider look users up and validate passwords against a
legacy user directory reachable only through its REST API.

Usage:
    from rest_provider import RestUserService, load_settings

    service = RestUserService(load_settings())
    user = service.find_by_username("alice")
"""
from .config.settings import ProviderConfig, load_settings
from .core.exceptions import RestUserProviderError
from .core.legacy_user import LegacyUser
from .core.user_service import LegacyUserService, RestUserService, create_user_service

__version__ = "1.0.0"

__all__ = [
    "ProviderConfig",
    "load_settings",
    "RestUserProviderError",
    "LegacyUser",
    "LegacyUserService",
    "RestUserService",
    "create_user_service",
]
