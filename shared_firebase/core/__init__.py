"""Core: config and shared constants.

Single place for settings and engine-wide literal values.
"""

from shared_firebase.core.config import Settings, get_settings

__all__ = ["Settings", "get_settings"]
