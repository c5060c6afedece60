"""
Library package: finding audio files and writing lyrics next to them
"""

from .walker import (
    DEFAULT_IGNORE_FILENAMES,
    IgnoreRule,
    WalkEntry,
    is_audio_file,
    is_ignored,
    iter_library,
    load_ignore_rules,
)
from .writer import lrc_path_for, write_lrc_file

__all__ = [
    'DEFAULT_IGNORE_FILENAMES',
    'IgnoreRule',
    'WalkEntry',
    'is_audio_file',
    'is_ignored',
    'iter_library',
    'load_ignore_rules',
    'lrc_path_for',
    'write_lrc_file',
]
