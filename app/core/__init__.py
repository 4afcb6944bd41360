"""Core: config, error envelope, rate limits and application bootstrap.

Single place for settings and app-wide wiring.
"""

from app.core.config import Settings, get_settings

__all__ = ["Settings", "get_settings"]
