"""Configuration package for the Snippet Board service."""

from .settings import Settings, get_settings

__all__ = ["Settings", "get_settings"]
