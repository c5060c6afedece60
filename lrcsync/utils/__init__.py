# lrcsync/utils/__init__.py
"""
Utilities package
Common helpers, logging, and validation functions
"""

from .logger import (
    get_logger,
    configure_from_settings,
    setup_logging,
    OperationLogger,
    get_current_log_file,
    parse_size
)
from .helpers import (
    format_duration,
    format_track_seconds,
    normalize_text,
    join_artists,
    build_user_agent
)
from .validation import (
    validate_lrclib_url,
    validate_library_directory,
    validate_log_level,
    unknown_ignore_tokens,
    warn_unknown_ignore_tokens
)

__all__ = [
    # Logger exports
    'get_logger',
    'configure_from_settings',
    'setup_logging',
    'OperationLogger',
    'get_current_log_file',
    'parse_size',

    # Helper exports
    'format_duration',
    'format_track_seconds',
    'normalize_text',
    'join_artists',
    'build_user_agent',

    # Validation exports
    'validate_lrclib_url',
    'validate_library_directory',
    'validate_log_level',
    'unknown_ignore_tokens',
    'warn_unknown_ignore_tokens',
]
