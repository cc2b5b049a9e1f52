"""Legacy user record as returned by the legacy REST API.

Usage:
    user = LegacyUser.from_dict({"username": "alice", "email": "alice@example.com"})
    user.to_dict()["firstName"]
"""
from __future__ import annotations
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any, Dict, Mapping, Optional, Tuple


def _optional_str(payload: Mapping[str, Any], key: str) -> Optional[str]:
    """Read a string field; other JSON scalars are converted to their JSON text."""
    value = payload.get(key)
    if value is None:
        return None
    if isinstance(value, str):
        return value
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, (int, float)):
        return str(value)
    raise ValueError(f"'{key}' must be a string, not {type(value).__name__}")


def _str_tuple(value: Any, key: str) -> Tuple[str, ...]:
    if value is None:
        return ()
    if not isinstance(value, list) or not all(isinstance(item, str) for item in value):
        raise ValueError(f"'{key}' must be a list of strings")
    return tuple(value)


def _flag(payload: Mapping[str, Any], key: str) -> bool:
    value = payload.get(key, False)
    if value is None:
        return False
    if isinstance(value, str) and value.lower() in ("true", "false"):
        return value.lower() == "true"
    if not isinstance(value, bool):
        raise ValueError(f"'{key}' must be a boolean")
    return value


@dataclass(frozen=True)
class LegacyUser:
    """Immutable legacy user.

    List-valued fields are tuples and ``attributes`` is a read-only mapping of
    tuples, so two users decoded from the same payload compare equal and a
    decoded user cannot be changed afterwards. ``attributes`` is left out of
    the hash.
    """
    username: Optional[str] = None
    email: Optional[str] = None
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    enabled: bool = False
    email_verified: bool = False
    id: Optional[str] = None
    roles: Tuple[str, ...] = ()
    groups: Tuple[str, ...] = ()
    required_actions: Tuple[str, ...] = ()
    attributes: Mapping[str, Tuple[str, ...]] = field(default_factory=dict, hash=False)

    def __post_init__(self):
        object.__setattr__(self, "attributes", MappingProxyType(dict(self.attributes)))

    @classmethod
    def from_dict(cls, payload: Mapping[str, Any]) -> LegacyUser:
        """Build a user from the legacy JSON representation.

        Unknown keys are ignored.

        Raises:
            ValueError: If a known field has the wrong type
        """
        if not isinstance(payload, Mapping):
            raise ValueError(f"Legacy user must be a JSON object, got {type(payload).__name__}")

        raw_attributes = payload.get("attributes") or {}
        if not isinstance(raw_attributes, Mapping):
            raise ValueError("'attributes' must be an object")
        attributes = {
            str(name): _str_tuple(values, f"attributes.{name}")
            for name, values in raw_attributes.items()
        }

        return cls(
            id=_optional_str(payload, "id"),
            username=_optional_str(payload, "username"),
            email=_optional_str(payload, "email"),
            first_name=_optional_str(payload, "firstName"),
            last_name=_optional_str(payload, "lastName"),
            enabled=_flag(payload, "enabled"),
            email_verified=_flag(payload, "emailVerified"),
            roles=_str_tuple(payload.get("roles"), "roles"),
            groups=_str_tuple(payload.get("groups"), "groups"),
            required_actions=_str_tuple(payload.get("requiredActions"), "requiredActions"),
            attributes=attributes,
        )

    def to_dict(self) -> Dict[str, Any]:
        """Render the legacy JSON representation."""
        return {
            "id": self.id,
            "username": self.username,
            "email": self.email,
            "firstName": self.first_name,
            "lastName": self.last_name,
            "enabled": self.enabled,
            "emailVerified": self.email_verified,
            "roles": list(self.roles),
            "groups": list(self.groups),
            "requiredActions": list(self.required_actions),
            "attributes": {name: list(values) for name, values in self.attributes.items()},
        }
