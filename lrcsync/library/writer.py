"""
LRC file writing

Synchronized lyrics are stored next to their audio file with the same stem and
an ".lrc" extension, which is what most players look for.
"""

from pathlib import Path
from typing import Union

from ..exceptions import LyricsWriteError
from ..utils.logger import get_logger

LRC_EXTENSION = ".lrc"

logger = get_logger(__name__)


def lrc_path_for(audio_path: Union[str, Path]) -> Path:
    """
    Get the sidecar lyrics path for an audio file

    Args:
        audio_path: Path to the audio file

    Returns:
        Same directory and stem with an .lrc extension
    """
    return Path(audio_path).with_suffix(LRC_EXTENSION)


def write_lrc_file(audio_path: Union[str, Path], lyrics_text: str) -> Path:
    """
    Write synchronized lyrics next to an audio file

    An existing .lrc file is replaced.

    Args:
        audio_path: Path to the audio file
        lyrics_text: LRC text as returned by the service

    Returns:
        Path of the written .lrc file

    Raises:
        LyricsWriteError: If the file cannot be written
    """
    lrc_path = lrc_path_for(audio_path)
    try:
        with open(lrc_path, 'w', encoding='utf-8') as f:
            f.write(lyrics_text)
    except OSError as e:
        raise LyricsWriteError(
            f"Failed to write {lrc_path}: {e.strerror or e}",
            details={'file_path': str(lrc_path), 'original_error': e}
        )

    logger.debug(f"Wrote {len(lyrics_text)} characters to {lrc_path}")
    return lrc_path
