"""
Utility helper functions for lrcsync
Small formatting and text helpers shared across modules
"""

from typing import Iterable, Optional, Union

from .. import __version__, __homepage__


def format_duration(seconds: Union[int, float]) -> str:
    """
    Format duration in seconds to human-readable string

    Args:
        seconds: Duration in seconds

    Returns:
        Formatted duration string (e.g., "3:45" or "1:23:45")
    """
    if seconds < 0:
        return "0:00"

    total = int(seconds)
    hours = total // 3600
    minutes = (total % 3600) // 60
    secs = total % 60

    if hours > 0:
        return f"{hours}:{minutes:02d}:{secs:02d}"
    return f"{minutes}:{secs:02d}"


def format_track_seconds(seconds: Optional[float]) -> str:
    """
    Format a track duration for log lines, keeping one decimal

    Args:
        seconds: Duration or None when the track has none

    Returns:
        "200.0s" style string, or "unknown"
    """
    if seconds is None:
        return "unknown"
    return f"{seconds:.1f}s"


def normalize_text(value: Optional[str]) -> Optional[str]:
    """
    Strip a tag value and turn blanks into None

    Args:
        value: Raw tag value

    Returns:
        Stripped string or None
    """
    if value is None:
        return None
    value = str(value).strip()
    return value or None


def join_artists(artists: Iterable[str]) -> str:
    """Join artist names into the display string sent to the lyrics service."""
    return ", ".join(artists)


def build_user_agent() -> str:
    """
    Build the identification string sent with every lyrics request

    Returns:
        "lrcsync/<version> (<homepage>)"
    """
    return f"lrcsync/{__version__} ({__homepage__})"
