"""Configuration module for the legacy user provider."""
from .settings import ProviderConfig, load_properties, load_settings

__all__ = ["ProviderConfig", "load_properties", "load_settings"]
