"""Application settings loading."""

from .app import RestSettings, get_settings


__all__ = ["RestSettings", "get_settings"]
