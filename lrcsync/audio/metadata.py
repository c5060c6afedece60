"""
Audio tag reading for lyrics lookups

This module extracts the handful of tags the lyrics lookup needs (title,
artists, album, duration) from audio files of any format mutagen understands.

Format Support:
mutagen's "easy" interface maps format-specific tag names to common keys, so
one code path covers:
- MP3: ID3v2 frames (TIT2, TPE1, TALB)
- FLAC / Ogg Vorbis / Opus: Vorbis Comments (TITLE, ARTIST, ALBUM)
- M4A / MP4: iTunes atoms (©nam, ©ART, ©alb)

WAVE and AIFF files carry a plain ID3 tag that the easy interface does not
wrap, so their TIT2/TPE1/TALB frames are read directly.

Duration always comes from the decoded stream header (`info.length`), never
from a tag, since tagged lengths are frequently stale.

Error Handling:
A missing file, an unrecognised format or a corrupt header raises TagReadError.
The synchronizer reports it for that file and continues with the next one.
"""

from pathlib import Path
from typing import List, Optional, Union

import mutagen
from mutagen import MutagenError
from mutagen.id3 import ID3

from ..exceptions import TagReadError
from ..lyrics.models import TrackMetadata
from ..utils.helpers import normalize_text
from ..utils.logger import get_logger

# Frames read when a format hands back raw ID3 instead of easy tags
ID3_FRAMES = {
    'title': 'TIT2',
    'artist': 'TPE1',
    'album': 'TALB',
}


class MetadataReader:
    """
    Reads TrackMetadata from audio files

    Stateless apart from its logger; one instance is shared for a whole run.
    """

    def __init__(self):
        self.logger = get_logger(__name__)

    def read(self, file_path: Union[str, Path]) -> TrackMetadata:
        """
        Read lookup metadata from an audio file

        Args:
            file_path: Path to the audio file

        Returns:
            TrackMetadata with whatever tags are present

        Raises:
            TagReadError: If the file is missing or cannot be parsed
        """
        path = Path(file_path)
        if not path.is_file():
            raise TagReadError(f"Audio file not found: {path}", details={'file_path': str(path)})

        try:
            audio = mutagen.File(str(path), easy=True)
        except (MutagenError, OSError) as e:
            raise TagReadError(
                f"Failed to read tags from {path.name}: {e}",
                details={'file_path': str(path), 'original_error': e}
            )

        if audio is None:
            raise TagReadError(
                f"Unsupported or unrecognised audio format: {path.name}",
                details={'file_path': str(path)}
            )

        tags = audio.tags or {}
        metadata = TrackMetadata(
            title=self._first(tags, 'title') or "",
            artists=tuple(self._all(tags, 'artist')),
            album=self._first(tags, 'album'),
            duration=self._duration(audio),
        )
        self.logger.debug(f"Read tags from {path}: {metadata}")
        return metadata

    def _first(self, tags, key: str) -> Optional[str]:
        values = self._all(tags, key)
        return values[0] if values else None

    def _all(self, tags, key: str) -> List[str]:
        """
        Return all non-blank values for an easy tag key

        Easy tags are lists of strings, but a few formats hand back a bare
        string; both are accepted. Raw ID3 tags are looked up by frame id.
        """
        try:
            if isinstance(tags, ID3):
                frame = tags.get(ID3_FRAMES[key])
                raw = frame.text if frame is not None else None
            else:
                raw = tags.get(key)
        except (KeyError, ValueError):
            return []
        if raw is None:
            return []
        if isinstance(raw, str):
            raw = [raw]
        values = []
        for value in raw:
            text = normalize_text(value)
            if text:
                values.append(text)
        return values

    def _duration(self, audio) -> Optional[float]:
        info = getattr(audio, 'info', None)
        length = getattr(info, 'length', None)
        if not length or length <= 0:
            return None
        return float(length)


# Global metadata reader instance
_metadata_reader: Optional[MetadataReader] = None


def get_metadata_reader() -> MetadataReader:
    """
    Get global metadata reader instance

    Returns:
        Shared MetadataReader
    """
    global _metadata_reader
    if not _metadata_reader:
        _metadata_reader = MetadataReader()
    return _metadata_reader
