"""
Configuration management package for lrcsync

Settings are loaded from YAML files and environment variables into typed
dataclass sections and shared through a lazily created singleton.

Usage:
    from lrcsync.config import get_settings

    settings = get_settings()
    settings.sync.tolerance
"""

from .settings import (
    get_settings,
    reload_settings,
    split_ignore_tokens,
    Settings,
    LrclibConfig,
    SyncConfig,
    LoggingConfig,
)

__all__ = [
    # Settings management - primary configuration interface
    'get_settings',        # Factory function for singleton settings access
    'reload_settings',     # Function to reload settings from files
    'split_ignore_tokens', # Helper for comma separated ignore values
    'Settings',            # Settings class for direct instantiation

    # Configuration sections
    'LrclibConfig',
    'SyncConfig',
    'LoggingConfig',
]
