"""
Input validation utilities
"""

import logging
from pathlib import Path
from typing import Iterable, List, Optional, Tuple
from urllib.parse import urlparse


KNOWN_IGNORE_TOKENS = {"duration", "album", "album_name", "artist", "artist_name"}

LOG_LEVELS = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}


def validate_lrclib_url(url: str) -> Tuple[bool, Optional[str]]:
    """
    Validate the lyrics service base URL

    Args:
        url: Base URL such as https://lrclib.net

    Returns:
        Tuple of (is_valid, error_message)
    """
    if not url or not url.strip():
        return False, "LRCLIB URL cannot be empty"

    parsed = urlparse(url.strip())
    if parsed.scheme not in ('http', 'https'):
        return False, f"LRCLIB URL must use http or https: {url}"
    if not parsed.netloc:
        return False, f"LRCLIB URL has no host: {url}"

    return True, None


def validate_library_directory(path: str) -> Tuple[bool, Optional[str]]:
    """
    Validate the directory to scan

    Args:
        path: Directory path

    Returns:
        Tuple of (is_valid, error_message)
    """
    try:
        path_obj = Path(path).expanduser()
    except (TypeError, ValueError) as e:
        return False, f"Invalid path: {e}"

    if not path_obj.exists():
        return False, f"Directory does not exist: {path}"
    if not path_obj.is_dir():
        return False, f"Path is not a directory: {path}"

    return True, None


def validate_log_level(level: str) -> Tuple[bool, Optional[str]]:
    """
    Validate logging level name

    Args:
        level: Level name, case-insensitive

    Returns:
        Tuple of (is_valid, error_message)
    """
    if not isinstance(level, str) or level.upper() not in LOG_LEVELS:
        return False, f"Invalid log level: {level}. Must be one of: {', '.join(sorted(LOG_LEVELS))}"
    return True, None


def unknown_ignore_tokens(tokens: Iterable[str]) -> List[str]:
    """
    Return ignore tokens that do not name a lookup field

    Unknown tokens are not an error; the caller only warns about them.
    Matching is case-sensitive.

    Args:
        tokens: Raw ignore tokens

    Returns:
        Unrecognised tokens in their original order
    """
    return [token for token in tokens if token not in KNOWN_IGNORE_TOKENS]


def warn_unknown_ignore_tokens(tokens: Iterable[str], logger: logging.Logger) -> None:
    """Log a warning for every ignore token that will have no effect."""
    for token in unknown_ignore_tokens(tokens):
        logger.warning(
            f"Unknown ignore field '{token}' has no effect "
            f"(known: {', '.join(sorted(KNOWN_IGNORE_TOKENS))})"
        )
