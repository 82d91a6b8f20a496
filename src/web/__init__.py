"""Web application entry point and its project-specific settings."""

from web.settings import AppSettings

__all__ = ["AppSettings"]
