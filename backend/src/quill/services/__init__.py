"""
Services package for the Quill backend.
"""

from .settings_service import SettingsService

__all__ = ["SettingsService"]
