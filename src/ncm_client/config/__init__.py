"""Configuration for the NCM client."""

from .settings import DEFAULT_BASE_URL, Settings, get_settings

__all__ = ["DEFAULT_BASE_URL", "Settings", "get_settings"]
